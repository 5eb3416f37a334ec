import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    mac = hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256)
    return SIGNATURE_PREFIX + mac.hexdigest()


def verify_signature(secret: str | None, body: bytes, signature_header: str | None) -> bool:
    """Check an ``X-Hub-Signature-256`` header against the raw request body.

    An empty or unset secret disables verification and always passes. With a
    secret configured the header must be ``sha256=<hex>``; any other shape,
    or a digest that is not valid hex, fails. Digests are compared as bytes
    with ``hmac.compare_digest``.
    """
    if not secret:
        return True
    if not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    try:
        provided = bytes.fromhex(signature_header[len(SIGNATURE_PREFIX):])
    except ValueError:
        return False

    expected = hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256).digest()
    return hmac.compare_digest(provided, expected)
