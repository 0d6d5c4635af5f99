import hashlib
import hmac
import logging

import razorpay

from errors import UpstreamFailure

logger = logging.getLogger(__name__)


def payment_signature(secret: str, razorpay_order_id: str, razorpay_payment_id: str) -> str:
    """Signature Razorpay attaches to a successful checkout callback"""
    payload = f"{razorpay_order_id}|{razorpay_payment_id}"
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


class RazorpayGateway:
    """One configured Razorpay client, shared by every request of the process"""

    def __init__(self, key_id: str, key_secret: str, currency: str = "INR", client=None):
        self.key_id = key_id
        self._key_secret = key_secret
        self.currency = currency
        self.client = client or razorpay.Client(auth=(key_id, key_secret))

    @classmethod
    def from_settings(cls, settings) -> "RazorpayGateway":
        return cls(settings.razorpay_key_id, settings.razorpay_key_secret, settings.razorpay_currency)

    def create_order(self, amount_minor_units: int, receipt: str) -> dict:
        try:
            remote = self.client.order.create(data={
                "amount": amount_minor_units,
                "currency": self.currency,
                "receipt": receipt,
            })
        except Exception as e:
            logger.error(f"Razorpay order creation failed for receipt {receipt}: {e}", exc_info=True)
            raise UpstreamFailure(str(e) or "Error creating Razorpay order") from e
        logger.info(f"Razorpay order {remote.get('id')} created for receipt {receipt}")
        return remote

    def signature_for(self, razorpay_order_id: str, razorpay_payment_id: str) -> str:
        return payment_signature(self._key_secret, razorpay_order_id, razorpay_payment_id)

    def verify_signature(self, razorpay_order_id: str, razorpay_payment_id: str, signature: str) -> bool:
        expected = self.signature_for(razorpay_order_id, razorpay_payment_id)
        return hmac.compare_digest(expected.encode(), (signature or "").encode())
