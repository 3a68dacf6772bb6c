"""
Payment Security Module

Signature verification for payment gateway completion callbacks. The gateway
signs "<order_id>|<payment_id>" with the account's key secret (HMAC-SHA256,
hex encoded) and the client forwards that signature after checkout.
"""

import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)


class PaymentSignatureError(Exception):
    """Raised when a payment signature cannot be verified"""

    pass


def constant_time_compare(a: str, b: str) -> bool:
    """Compare two strings in constant time to prevent timing attacks"""
    if not a or not b:
        return False
    return hmac.compare_digest(a, b)


def compute_hmac_sha256(secret: str, payload: bytes) -> str:
    """Compute HMAC-SHA256 signature of payload"""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def create_payment_signature(secret: str, order_id: str, payment_id: str) -> str:
    """Signature the gateway produces for a completed payment"""
    return compute_hmac_sha256(secret, f"{order_id}|{payment_id}".encode("utf-8"))


def verify_payment_signature(secret: str, order_id: str, payment_id: str, signature: str) -> None:
    """
    Raises PaymentSignatureError when the signature does not match.

    Args:
        secret: Gateway key secret
        order_id: Gateway order reference
        payment_id: Gateway payment reference
        signature: Hex signature forwarded by the client
    """
    if not secret:
        raise PaymentSignatureError("Payment gateway secret not configured")

    expected = create_payment_signature(secret, order_id, payment_id)
    if not constant_time_compare(expected, (signature or "").strip().lower()):
        logger.warning(f"❌ Invalid payment signature for order {order_id}")
        raise PaymentSignatureError("Invalid payment signature")

    logger.info(f"✅ Payment signature verified for order {order_id}")
