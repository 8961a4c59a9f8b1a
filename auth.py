"""
Authenticator

Signup and login against the users collection, and the stateless token gate
that every cart operation goes through. Tokens are HS256 JWTs carrying
``{"user": {"id": <user id>}}``.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Dict, Any

import jwt
from passlib.context import CryptContext
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from config import get_settings
from database import USERS
from errors import DuplicateEmail, UserNotFound, InvalidCredentials, MissingToken, InvalidToken
from schemas import User

logger = logging.getLogger(__name__)


@lru_cache()
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str) -> str:
    return _pwd_context(get_settings().bcrypt_rounds).hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return _pwd_context(get_settings().bcrypt_rounds).verify(plain, hashed)


@lru_cache()
def _dummy_hash(rounds: int) -> str:
    return _pwd_context(rounds).hash("unknown-user-placeholder")


def create_token(user_id: str) -> str:
    settings = get_settings()
    payload: Dict[str, Any] = {"user": {"id": user_id}}
    if settings.jwt_expire_minutes:
        payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


# ----------------------------------------------------------------------------
# Operations
# ----------------------------------------------------------------------------

def register(db: Database, email: str, username: str, password: str) -> str:
    if db[USERS].find_one({"email": email}, {"_id": 1}):
        logger.warning("Signup rejected: email already registered")
        raise DuplicateEmail()

    user = User(name=username, email=email, password=hash_password(password))
    try:
        uid = db[USERS].insert_one(user.model_dump()).inserted_id
    except DuplicateKeyError:
        # lost the race against a concurrent signup; the unique index kept one record
        logger.warning("Signup rejected by unique index: email already registered")
        raise DuplicateEmail()

    logger.info("Created user %s", uid)
    return create_token(str(uid))


def login(db: Database, email: str, password: str) -> str:
    user = db[USERS].find_one({"email": email}, {"password": 1})
    if not user:
        # match the bcrypt cost of the wrong-password path
        verify_password(password, _dummy_hash(get_settings().bcrypt_rounds))
        logger.warning("Login rejected: unknown email")
        raise UserNotFound()
    if not user.get("password") or not verify_password(password, user["password"]):
        logger.warning("Login rejected for user %s: wrong password", user["_id"])
        raise InvalidCredentials()
    return create_token(str(user["_id"]))


def authorize(token: Optional[str]) -> str:
    """Resolve a token to the user id it was issued for."""
    if not token:
        raise MissingToken()
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired token")
        raise InvalidToken("Token expired")
    except jwt.InvalidTokenError:
        logger.warning("Rejected token with bad signature or format")
        raise InvalidToken()

    user = payload.get("user")
    uid = user.get("id") if isinstance(user, dict) else None
    if not isinstance(uid, str) or not uid:
        logger.warning("Rejected token without a user id")
        raise InvalidToken()
    return uid
