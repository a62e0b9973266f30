"""Password hashing and session cookie signing."""
import hashlib
import hmac
import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PasswordHasher:
    """bcrypt hashing with a fixed cost factor.

    Holds no mutable state after construction, so a single instance is shared
    by every request thread.
    """

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain: str, hashed: str) -> bool:
        """Check plain against a stored digest. Malformed digests never match."""
        if not plain or not hashed:
            return False
        try:
            return self._context.verify(plain, hashed)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be identified")
            return False


# Cookie value: <session id>.<hmac>
def _signature(value: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), value.encode("utf-8"), hashlib.sha256).hexdigest()


def sign_session_id(session_id: str, secret: str) -> str:
    """Build the cookie value for a session id."""
    return f"{session_id}.{_signature(session_id, secret)}"


def unsign_session_id(value: str | None, secret: str) -> str | None:
    """Return the session id if the cookie signature is valid; None otherwise."""
    if not value or "." not in value:
        return None
    session_id, sig = value.rsplit(".", 1)
    if not session_id:
        return None
    if not hmac.compare_digest(_signature(session_id, secret), sig):
        return None
    return session_id
