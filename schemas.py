"""
Database Schemas

Pydantic models that define MongoDB collections for the Food Ordering app,
plus the request and response bodies of the order routes.
Each collection model name maps to a lowercase collection name.

Example: class Restaurant(BaseModel) -> "restaurant" collection
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    IN_PROGRESS = "inProgress"
    OUT_FOR_DELIVERY = "outForDelivery"
    DELIVERED = "delivered"


# Orders a customer can see in their history; pending checkouts are hidden
ACTIVE_STATUSES = [
    OrderStatus.PAID,
    OrderStatus.IN_PROGRESS,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Menuitem(CamelModel):
    id: Any = Field(..., alias="_id", description="Menu item id")
    name: str = Field("", description="Dish name")
    price: float = Field(..., ge=0, description="Price in the base currency unit")


class Restaurant(CamelModel):
    restaurant_name: str = Field("", alias="restaurantName")
    city: Optional[str] = None
    country: Optional[str] = None
    delivery_price: float = Field(..., ge=0, alias="deliveryPrice")
    estimated_delivery_time: Optional[int] = Field(None, alias="estimatedDeliveryTime")
    cuisines: List[str] = Field(default_factory=list)
    menu_items: List[Menuitem] = Field(default_factory=list, alias="menuItems")
    image_url: Optional[str] = Field(None, alias="imageUrl")


class DeliveryDetails(CamelModel):
    email: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    address_line1: str = Field(..., alias="addressLine1", min_length=1)
    city: str = Field(..., min_length=1)


class CartItem(CamelModel):
    menu_item_id: str = Field(..., alias="menuItemId", min_length=1)
    name: str = ""
    quantity: str = Field(..., description="Whole number of portions, sent as a string")

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_is_whole_number(cls, value):
        if isinstance(value, bool) or value is None:
            raise ValueError("quantity must be a non-negative integer")
        text = str(value).strip()
        if not (text.isascii() and text.isdigit()):
            raise ValueError("quantity must be a non-negative integer")
        return text

    @property
    def count(self) -> int:
        return int(self.quantity)


class CheckoutSessionRequest(CamelModel):
    cart_items: List[CartItem] = Field(..., alias="cartItems")
    delivery_details: DeliveryDetails = Field(..., alias="deliveryDetails")
    restaurant_id: str = Field(..., alias="restaurantId", min_length=1)


class Order(CamelModel):
    restaurant: Any = Field(..., description="Restaurant id")
    user: Any = Field(..., description="Id of the user who placed the order")
    status: OrderStatus = OrderStatus.PENDING
    delivery_details: DeliveryDetails = Field(..., alias="deliveryDetails")
    cart_items: List[CartItem] = Field(..., alias="cartItems")
    total_amount: Union[int, float] = Field(..., alias="totalAmount")
    razorpay_order_id: Optional[str] = Field(None, alias="razorpayOrderId")
    razorpay_payment_id: Optional[str] = Field(None, alias="razorpayPaymentId")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")

    def to_document(self) -> dict:
        doc = self.model_dump(by_alias=True, exclude_none=True, mode="python")
        doc["status"] = self.status.value
        return doc


class PaymentOrderResponse(CamelModel):
    order_id: str = Field(..., alias="orderId")
    amount: int
    currency: str
    key: str
    db_order_id: str = Field(..., alias="dbOrderId")


class VerifyPaymentRequest(CamelModel):
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str
    db_order_id: str = Field(..., alias="dbOrderId", min_length=1)


class VerifyPaymentResponse(CamelModel):
    success: bool
    message: str
    redirect_url: Optional[str] = Field(None, alias="redirectUrl")
