"""
Database Schemas for the Shop API

Each Pydantic model describes the documents of one MongoDB collection.

We store:
- User (collection "users", includes the cart)
- Product (collection "products")
"""

from pydantic import BaseModel, Field
from typing import Dict
from datetime import datetime, timezone

CART_SLOTS = 300


def empty_cart() -> Dict[str, int]:
    return {str(slot): 0 for slot in range(CART_SLOTS)}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """
    Users collection schema
    Collection name: "users"
    """
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address (unique)")

    # bcrypt hash, never returned in public responses
    password: str = Field(..., description="Hashed password")

    # slot -> quantity; keys are stringified slot numbers 0..299
    cartData: Dict[str, int] = Field(default_factory=empty_cart)
    date: datetime = Field(default_factory=utcnow)


class Product(BaseModel):
    """
    Products collection schema
    Collection name: "products"
    """
    id: int = Field(..., ge=1, description="Sequential product id")
    name: str = Field(..., description="Product name")
    image: str = Field(..., description="Image URL")
    category: str = Field(..., description="Product category")
    new_price: float = Field(..., ge=0, description="Current price")
    old_price: float = Field(..., ge=0, description="Price before discount")
    available: bool = Field(True, description="Whether the product is for sale")
    date: datetime = Field(default_factory=utcnow)
