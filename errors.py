"""
Error taxonomy

Every failure the API reports on purpose is a ShopError. ``status_code`` is
the HTTP status the gateway answers with and ``key`` is the field of the
``{"success": false, ...}`` body that carries the message ("error" or
"errors", as the storefront client reads them).
"""


class ShopError(Exception):
    status_code = 400
    key = "error"
    message = "Request failed"

    def __init__(self, message: str = None, status_code: int = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code


class DuplicateEmail(ShopError):
    message = "Email already registered"


class UserNotFound(ShopError):
    status_code = 401
    key = "errors"
    message = "Invalid Email"


class InvalidCredentials(ShopError):
    status_code = 401
    key = "errors"
    message = "Invalid Password"


class MissingToken(ShopError):
    status_code = 401
    key = "errors"
    message = "Please authenticate with a valid token"


class InvalidToken(ShopError):
    status_code = 401
    key = "errors"
    message = "Invalid token"


class ProductNotFound(ShopError):
    status_code = 404
    message = "Product not found"


class ValidationError(ShopError):
    key = "errors"
    message = "Invalid request"


class UploadError(ShopError):
    status_code = 502
    message = "Image upload failed"
