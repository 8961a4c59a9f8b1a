import logging
from typing import Optional

from fastapi import FastAPI, Depends, File, Header, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, EmailStr, Field, StrictInt
from pymongo.database import Database

import auth
import cart
import catalog
import uploads
from config import get_settings
from database import get_db, ensure_indexes
from errors import ShopError

# ----------------------------------------------------------------------------
# App Setup
# ----------------------------------------------------------------------------

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Shop API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----------------------------------------------------------------------------
# Error Mapping
# ----------------------------------------------------------------------------

@app.exception_handler(ShopError)
def shop_error_handler(request: Request, exc: ShopError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, exc.key: exc.message})


@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"success": False, "errors": errors})


@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


def current_user_id(auth_token: Optional[str] = Header(None, alias="auth-token")) -> str:
    return auth.authorize(auth_token)


# ----------------------------------------------------------------------------
# Models (request bodies)
# ----------------------------------------------------------------------------

class SignupRequest(BaseModel):
    username: str
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AddProductRequest(BaseModel):
    name: str
    image: str
    category: str
    new_price: float = Field(..., ge=0)
    old_price: float = Field(..., ge=0)
    available: bool = True


class RemoveProductRequest(BaseModel):
    id: int
    name: Optional[str] = None


class CartItemRequest(BaseModel):
    itemId: StrictInt


# ----------------------------------------------------------------------------
# Auth Endpoints
# ----------------------------------------------------------------------------

@app.post("/signup")
def signup(body: SignupRequest, db: Database = Depends(get_db)):
    token = auth.register(db, body.email, body.username, body.password)
    return {"success": True, "token": token}


@app.post("/login")
def login(body: LoginRequest, db: Database = Depends(get_db)):
    token = auth.login(db, body.email, body.password)
    return {"success": True, "token": token}


# ----------------------------------------------------------------------------
# Product Endpoints
# ----------------------------------------------------------------------------

@app.post("/upload")
def upload(product: UploadFile = File(...)):
    image_url = uploads.upload_image(product.file.read(), product.filename, product.content_type)
    return {"success": 1, "image_url": image_url}


@app.post("/addproduct")
def add_product(body: AddProductRequest, db: Database = Depends(get_db)):
    product = catalog.add_product(db, **body.model_dump())
    return {"success": True, "name": product["name"]}


@app.post("/removeproduct")
def remove_product(body: RemoveProductRequest, db: Database = Depends(get_db)):
    product = catalog.remove_product(db, body.id)
    return {"success": True, "name": product.get("name")}


@app.get("/allproducts")
def all_products(db: Database = Depends(get_db)):
    return catalog.list_all(db)


@app.get("/newcollections")
def new_collections(db: Database = Depends(get_db)):
    return catalog.list_newest(db)


@app.get("/popularinwomen")
def popular_in_women(db: Database = Depends(get_db)):
    return catalog.list_by_category(db, "women")


# ----------------------------------------------------------------------------
# Cart
# ----------------------------------------------------------------------------

@app.post("/addtocart", response_class=PlainTextResponse)
def add_to_cart(body: CartItemRequest, uid: str = Depends(current_user_id), db: Database = Depends(get_db)):
    cart.increment(db, uid, body.itemId)
    return "Added"


@app.post("/removefromcart", response_class=PlainTextResponse)
def remove_from_cart(body: CartItemRequest, uid: str = Depends(current_user_id), db: Database = Depends(get_db)):
    cart.decrement(db, uid, body.itemId)
    return "Removed"


@app.post("/getcart")
def get_cart(uid: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return cart.get_cart(db, uid)


# ----------------------------------------------------------------------------
# Health and Startup
# ----------------------------------------------------------------------------

@app.get("/", response_class=PlainTextResponse)
def root():
    return "Express App is Running"


@app.on_event("startup")
def on_startup():
    ensure_indexes(get_db())
    uploads.configure()
    logger.info("Server running on port %s", settings.port)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
