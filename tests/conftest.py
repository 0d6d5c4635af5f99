import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from config import Settings
from database import OrderStore, RestaurantStore, UserStore
from main import create_app
from orders import OrderService
from payments import RazorpayGateway
from tests.helpers import FRONTEND_URL, JWT_SECRET, KEY_ID, KEY_SECRET, make_token


class FakeOrderApi:
    def __init__(self):
        self.calls = []
        self.error = None

    def create(self, data=None, **kwargs):
        self.calls.append(data)
        if self.error:
            raise self.error
        return {
            "id": f"order_rzp_{len(self.calls)}",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
        }


class FakeRazorpayClient:
    def __init__(self):
        self.order = FakeOrderApi()


@pytest.fixture
def db():
    return mongomock.MongoClient()["food_ordering_test"]


@pytest.fixture
def orders(db):
    return OrderStore(db)


@pytest.fixture
def restaurants(db):
    return RestaurantStore(db)


@pytest.fixture
def users(db):
    return UserStore(db)


@pytest.fixture
def razorpay_client():
    return FakeRazorpayClient()


@pytest.fixture
def gateway(razorpay_client):
    return RazorpayGateway(KEY_ID, KEY_SECRET, "INR", client=razorpay_client)


@pytest.fixture
def service(orders, restaurants, users, gateway):
    return OrderService(orders, restaurants, users, gateway, FRONTEND_URL)


@pytest.fixture
def user(users):
    return users.save({"auth0Id": "auth0|alice", "email": "alice@example.com", "name": "Alice"})


@pytest.fixture
def other_user(users):
    return users.save({"auth0Id": "auth0|bob", "email": "bob@example.com", "name": "Bob"})


@pytest.fixture
def restaurant(restaurants):
    return restaurants.save({
        "restaurantName": "Spice Route",
        "city": "Pune",
        "country": "India",
        "deliveryPrice": 50,
        "estimatedDeliveryTime": 30,
        "cuisines": ["Indian"],
        "menuItems": [
            {"_id": ObjectId(), "name": "Butter Chicken", "price": 500},
            {"_id": ObjectId(), "name": "Paneer Tikka", "price": 320},
        ],
    })


@pytest.fixture
def checkout_body(restaurant):
    menu_item = restaurant["menuItems"][0]
    return {
        "cartItems": [{"menuItemId": str(menu_item["_id"]), "name": menu_item["name"], "quantity": "2"}],
        "deliveryDetails": {
            "email": "alice@example.com",
            "name": "Alice",
            "addressLine1": "12 MG Road",
            "city": "Pune",
        },
        "restaurantId": str(restaurant["_id"]),
    }


@pytest.fixture
def settings():
    return Settings(
        razorpay_key_id=KEY_ID,
        razorpay_key_secret=KEY_SECRET,
        jwt_secret=JWT_SECRET,
        frontend_url=FRONTEND_URL,
    )


@pytest.fixture
def client(settings, service, users):
    app = create_app(settings=settings, order_service=service, users=users)
    return TestClient(app)


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {make_token(user['auth0Id'])}"}
