import hashlib
import hmac

import jwt

JWT_SECRET = "test-jwt-secret-for-hs256-signing-key"
KEY_SECRET = "test-key-secret"
KEY_ID = "rzp_test_key"
FRONTEND_URL = "http://frontend.test"


def make_token(sub, secret=JWT_SECRET, **claims):
    return jwt.encode({"sub": sub, **claims}, secret, algorithm="HS256")


def sign(order_id, payment_id, secret=KEY_SECRET):
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()
