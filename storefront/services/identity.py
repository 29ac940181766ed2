# storefront/services/identity.py
from dataclasses import dataclass

from jose import JWTError, jwt

from storefront.domain.errors import Unauthorized
from storefront.utils.settings import JWT_SECRET, JWT_ALGORITHM, ADMIN_EMAILS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str
    is_admin: bool = False
    first_name: str | None = None
    last_name: str | None = None


class IdentityResolver:
    """
    Zamienia bearer token na tozsamosc wywolujacego.
    Wydawanie tokenow jest poza tym serwisem, tu tylko weryfikacja podpisu i claimow.
    Admin = claim isAdmin albo email z listy ADMIN_EMAILS.
    """

    def __init__(
        self,
        secret: str | None = None,
        algorithm: str | None = None,
        admin_emails: frozenset[str] | None = None,
    ):
        self.secret = secret or JWT_SECRET
        self.algorithm = algorithm or JWT_ALGORITHM
        self.admin_emails = ADMIN_EMAILS if admin_emails is None else admin_emails

    def resolve(self, token: str) -> Identity:
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise Unauthorized("Invalid token")

        user_id = claims.get("userId") or claims.get("sub")
        email = claims.get("email")
        if not user_id or not email:
            raise Unauthorized("Invalid token")
        # claimy z tokenu moga miec dowolny typ JSON
        if not isinstance(email, str) or isinstance(user_id, bool) or not isinstance(user_id, (str, int)):
            logger.warning("Rejected bearer token: userId/email claims have wrong type")
            raise Unauthorized("Invalid token")
        first_name, last_name = claims.get("firstName"), claims.get("lastName")
        if not isinstance(first_name, (str, type(None))) or not isinstance(last_name, (str, type(None))):
            logger.warning("Rejected bearer token: name claims have wrong type")
            raise Unauthorized("Invalid token")

        is_admin = bool(claims.get("isAdmin")) or email.lower() in self.admin_emails

        return Identity(
            user_id=str(user_id),
            email=email,
            is_admin=is_admin,
            first_name=first_name,
            last_name=last_name,
        )
