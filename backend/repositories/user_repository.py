from typing import Optional, Tuple

from sqlalchemy import exists
from sqlalchemy.orm import Session

from models.user import User


class UserRepository:
    """Record-level access to the users table."""

    def __init__(self, session: Session):
        self.session = session

    def insert(self, user: User) -> User:
        self.session.add(user)
        self.session.commit()
        return user

    def exists_by_email(self, email: str) -> bool:
        return bool(self.session.query(exists().where(User.email == email)).scalar())

    def fetch_credentials(self, email: str) -> Optional[Tuple[str, str]]:
        """Return ``(password_hash, id)`` for the email, or None."""
        row = (
            self.session.query(User.password_hash, User.id)
            .filter(User.email == email)
            .first()
        )
        if row is None:
            return None
        return row[0], row[1]
