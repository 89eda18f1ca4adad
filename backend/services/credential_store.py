import logging
import uuid
from typing import Tuple

import bcrypt

from models.user import User
from repositories.user_repository import UserRepository
from services.errors import NotFound

logger = logging.getLogger(__name__)

# Fixed cost factor; callers cannot tune it per call.
BCRYPT_ROUNDS = 12


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def check_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison; a malformed stored hash is a mismatch."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


class CredentialStore:
    def __init__(self, users: UserRepository):
        self.users = users

    def email_exists(self, email: str) -> bool:
        return self.users.exists_by_email(email)

    def register(self, email: str, password: str) -> User:
        user = User(id=str(uuid.uuid4()), email=email, password_hash=hash_password(password))
        self.users.insert(user)
        logger.info("Registered user", extra={"user_id": user.id})
        return user

    def verify_credentials(self, email: str, password: str) -> Tuple[str, str]:
        """Return ``(subject_id, password_hash)`` for a registered email.

        The password itself is compared by the caller with :func:`check_password`;
        it is accepted here only so the lookup has the same shape as a login.
        """
        row = self.users.fetch_credentials(email)
        if row is None:
            raise NotFound("Cannot find the user id")
        password_hash, user_id = row
        return user_id, password_hash
