"""
Cart Manager

Per-user slot quantities stored in ``users.cartData``. Callers pass the user
id returned by ``auth.authorize``. Each mutation is a single atomic update on
the user document, so concurrent increments and decrements for the same user
never lose an update.
"""

from typing import Dict

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.database import Database

from database import USERS
from errors import UserNotFound, ValidationError
from schemas import CART_SLOTS


def _user_oid(user_id: str) -> ObjectId:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        raise UserNotFound("User not found", status_code=404)


def _slot_field(slot: int) -> str:
    if isinstance(slot, bool) or not isinstance(slot, int) or not 0 <= slot < CART_SLOTS:
        raise ValidationError(f"itemId must be an integer between 0 and {CART_SLOTS - 1}")
    return f"cartData.{slot}"


def increment(db: Database, user_id: str, slot: int) -> None:
    field = _slot_field(slot)
    res = db[USERS].update_one({"_id": _user_oid(user_id)}, {"$inc": {field: 1}})
    if res.matched_count == 0:
        raise UserNotFound("User not found", status_code=404)


def decrement(db: Database, user_id: str, slot: int) -> None:
    field = _slot_field(slot)
    oid = _user_oid(user_id)
    res = db[USERS].update_one({"_id": oid, field: {"$gt": 0}}, {"$inc": {field: -1}})
    if res.matched_count == 0 and db[USERS].find_one({"_id": oid}, {"_id": 1}) is None:
        raise UserNotFound("User not found", status_code=404)


def get_cart(db: Database, user_id: str) -> Dict[int, int]:
    user = db[USERS].find_one({"_id": _user_oid(user_id)}, {"cartData": 1})
    if not user:
        raise UserNotFound("User not found", status_code=404)
    return {int(slot): qty for slot, qty in (user.get("cartData") or {}).items()}
