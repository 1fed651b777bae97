"""
Database Schemas

Pydantic models for the MongoDB collections and the request bodies that
write to them. Collection names are the lowercase class name:
- AuthUser -> "user" (kept explicit in auth.py)
- Product -> "product"
- Initiative -> "initiative"
- ContactMessage -> "contactmessage"

Money enters the API in dollars and is stored as integer cents.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

OrderStatus = Literal["pending", "paid", "payment_failed", "shipped", "delivered", "cancelled"]
ContactStatus = Literal["new", "read", "replied", "closed"]


def not_null(value):
    """Partial updates may omit a field but not blank it with null."""
    if value is None:
        raise ValueError("may not be null")
    return value


def to_cents(amount: float) -> int:
    return int(round(amount * 100))


class AuthUser(BaseModel):
    email: EmailStr
    display_name: str
    password_hash: str
    role: str = Field("USER", description="USER | ADMIN")
    is_active: bool = True


# -----------
# Initiatives
# -----------

class Initiative(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, description="URL-friendly unique slug")
    summary: str = Field(..., min_length=1)
    long_description: Optional[str] = None
    hero_image: Optional[str] = None
    gallery: List[str] = Field(default_factory=list)
    featured: bool = False
    order: int = Field(0, description="Display position, ascending")
    status: Literal["active", "inactive"] = "active"
    external_docs_link: Optional[str] = None


class InitiativeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    summary: Optional[str] = Field(None, min_length=1)
    long_description: Optional[str] = None
    hero_image: Optional[str] = None
    gallery: Optional[List[str]] = None
    featured: Optional[bool] = None
    order: Optional[int] = None
    status: Optional[Literal["active", "inactive"]] = None
    external_docs_link: Optional[str] = None

    # long_description, hero_image and external_docs_link may be cleared
    @field_validator("title", "summary", "gallery", "featured", "order", "status")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


# --------
# Products
# --------

class Product(BaseModel):
    sku: str = Field(..., min_length=1, description="Stock-keeping unit, unique")
    title: str = Field(..., min_length=1)
    price: float = Field(..., ge=0, description="Unit price in USD")
    description: str = Field(..., min_length=1)
    initiative_id: str = Field(..., min_length=1, description="Slug of the owning initiative")
    images: List[str] = Field(default_factory=list)
    inventory_count: int = Field(0, ge=0)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    featured: bool = False
    is_active: bool = True


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=1)
    initiative_id: Optional[str] = Field(None, min_length=1)
    images: Optional[List[str]] = None
    inventory_count: Optional[int] = Field(None, ge=0)
    metadata: Optional[Dict[str, Any]] = None
    featured: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("*")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


# ------
# Orders
# ------

class OrderItem(BaseModel):
    sku: str
    title: str
    price: float = Field(..., ge=0, description="Unit price at time of order, USD")
    quantity: int = Field(..., ge=1)
    image: Optional[str] = None


class OrderCreate(BaseModel):
    items: List[OrderItem] = Field(..., min_length=1)
    total: float = Field(..., ge=0, description="Order total in USD")
    billing_info: Dict[str, Any]
    shipping_info: Dict[str, Any]
    payment_method: Optional[Literal["stripe", "coinbase"]] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentRequest(BaseModel):
    order_id: str
    amount: Optional[float] = Field(None, ge=0, description="Expected total in USD")


# -------
# Contact
# -------

class ContactMessage(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


class NewsletterRequest(BaseModel):
    email: EmailStr


class SiteSettingValue(BaseModel):
    value: Any
