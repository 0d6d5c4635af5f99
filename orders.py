import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Union

from database import OrderStore, RestaurantStore, UserStore, as_reference, serialize_doc
from errors import InternalFailure, InvalidInput, NotFound, OrderFlowError, VerificationFailed
from payments import RazorpayGateway
from schemas import (
    ACTIVE_STATUSES,
    CheckoutSessionRequest,
    Order,
    OrderStatus,
    PaymentOrderResponse,
    Restaurant,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)

logger = logging.getLogger(__name__)


def as_number(value: Decimal) -> Union[int, float]:
    return int(value) if value == value.to_integral_value() else float(value)


def to_minor_units(amount: Union[int, float, Decimal]) -> int:
    """Rupees to paise"""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_total(restaurant: dict, checkout: CheckoutSessionRequest) -> Decimal:
    """Menu prices times quantities plus delivery, using the restaurant's current menu"""
    menu = Restaurant.model_validate(restaurant)
    prices = {str(item.id): item.price for item in menu.menu_items}
    menu_total = Decimal("0")
    for cart_item in checkout.cart_items:
        price = prices.get(str(cart_item.menu_item_id))
        if price is None:
            raise InvalidInput(f"Menu item not found: {cart_item.menu_item_id}")
        menu_total += Decimal(str(price)) * cart_item.count
    return menu_total + Decimal(str(menu.delivery_price))


class OrderService:
    def __init__(self, orders: OrderStore, restaurants: RestaurantStore, users: UserStore,
                 gateway: RazorpayGateway, frontend_url: str):
        self.orders = orders
        self.restaurants = restaurants
        self.users = users
        self.gateway = gateway
        self.frontend_url = frontend_url.rstrip("/")

    def get_my_orders(self, user_id: str) -> List[dict]:
        try:
            orders = self.orders.find_for_user(user_id, ACTIVE_STATUSES)
            restaurants = {
                r["_id"]: r for r in self.restaurants.find_many({o.get("restaurant") for o in orders})
            }
            users = {u["_id"]: u for u in self.users.find_many({o.get("user") for o in orders})}
            for order in orders:
                order["restaurant"] = restaurants.get(order.get("restaurant"))
                order["user"] = users.get(order.get("user"))
            return [serialize_doc(o) for o in orders]
        except Exception as e:
            logger.error(f"Error listing orders for user {user_id}: {e}", exc_info=True)
            raise InternalFailure("something went wrong") from e

    def create_payment_order(self, user_id: str, checkout: CheckoutSessionRequest) -> PaymentOrderResponse:
        try:
            restaurant = self.restaurants.find_by_id(checkout.restaurant_id)
            if not restaurant:
                raise NotFound("Restaurant not found")

            total = calculate_total(restaurant, checkout)

            order = Order(
                restaurant=restaurant["_id"],
                user=as_reference(user_id),
                status=OrderStatus.PENDING,
                delivery_details=checkout.delivery_details,
                cart_items=checkout.cart_items,
                total_amount=as_number(total),
                created_at=datetime.now(timezone.utc),
            )
            saved = self.orders.save(order.to_document())
            db_order_id = str(saved["_id"])
            logger.info(f"Pending order {db_order_id} created for user {user_id}, total {total}")

            remote = self.gateway.create_order(to_minor_units(total), receipt=db_order_id)
            return PaymentOrderResponse(
                order_id=remote["id"],
                amount=remote["amount"],
                currency=remote["currency"],
                key=self.gateway.key_id,
                db_order_id=db_order_id,
            )
        except OrderFlowError:
            raise
        except Exception as e:
            logger.error(f"Error creating payment order for user {user_id}: {e}", exc_info=True)
            raise InternalFailure("Error creating Razorpay order") from e

    def verify_payment(self, payload: VerifyPaymentRequest) -> VerifyPaymentResponse:
        # No check on the previous status: a repeated or late callback re-marks the order paid
        try:
            if not self.gateway.verify_signature(
                payload.razorpay_order_id, payload.razorpay_payment_id, payload.razorpay_signature
            ):
                logger.warning(f"Signature mismatch for order {payload.db_order_id}")
                raise VerificationFailed("Payment verification failed")

            order = self.orders.find_by_id(payload.db_order_id)
            if not order:
                raise NotFound("Order not found")

            order["status"] = OrderStatus.PAID.value
            order["razorpayOrderId"] = payload.razorpay_order_id
            order["razorpayPaymentId"] = payload.razorpay_payment_id
            self.orders.save(order)
            logger.info(f"Order {payload.db_order_id} paid with {payload.razorpay_payment_id}")

            return VerifyPaymentResponse(
                success=True,
                message="Payment successful",
                redirect_url=f"{self.frontend_url}/order-status?success=true",
            )
        except OrderFlowError:
            raise
        except Exception as e:
            logger.error(f"Error verifying payment for order {payload.db_order_id}: {e}", exc_info=True)
            raise InternalFailure("Error verifying payment") from e
