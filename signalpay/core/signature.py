import hmac
import hashlib


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """HMAC-SHA256 hex digest of ``order_id|payment_id`` keyed by ``secret``."""
    body = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    if not secret or not signature:
        return False
    expected = compute_signature(order_id, payment_id, secret)
    # compare_digest rejects non-ASCII str input, compare bytes instead
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
