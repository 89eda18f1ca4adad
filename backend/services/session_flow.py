"""Session flows: registration, login and every token-gated item operation.

This is the boundary the transport calls. Anything raised out of here is a
TodoServiceError subclass; storage exceptions are logged, rolled back and turned
into a generic InternalError.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.todo import TodoItem
from models.user import User
from repositories.todo_repository import TodoRepository
from repositories.user_repository import UserRepository
from services.authorization import OwnershipGuard
from services.credential_store import CredentialStore, check_password
from services.errors import (
    AlreadyExists,
    Forbidden,
    InternalError,
    InvalidIdentity,
    NotFound,
    NotRegistered,
    Unauthorized,
    ValidationError,
)
from services.item_lifecycle import ItemLifecycle
from services.token_service import TokenService

logger = logging.getLogger(__name__)


def _require_credentials(email, password):
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("Email and password must be strings")
    if not email or not password:
        raise ValidationError("Email and password are required")


class SessionFlow:
    def __init__(
        self,
        session: Session,
        tokens: TokenService,
        credentials: CredentialStore,
        guard: OwnershipGuard,
        lifecycle: ItemLifecycle,
    ):
        self.session = session
        self.tokens = tokens
        self.credentials = credentials
        self.guard = guard
        self.lifecycle = lifecycle

    @classmethod
    def for_session(cls, session: Session, tokens: TokenService) -> "SessionFlow":
        items = TodoRepository(session)
        return cls(
            session,
            tokens,
            CredentialStore(UserRepository(session)),
            OwnershipGuard(items),
            ItemLifecycle(items),
        )

    @contextmanager
    def _storage(self, operation: str):
        try:
            yield
        except SQLAlchemyError:
            logger.exception("Storage failure during %s", operation)
            self.session.rollback()
            raise InternalError()

    # --- identity -------------------------------------------------------

    def register(self, email: str, password: str) -> User:
        _require_credentials(email, password)
        with self._storage("register"):
            if self.credentials.email_exists(email):
                raise AlreadyExists()
            return self.credentials.register(email, password)

    def login(self, email: str, password: str) -> str:
        _require_credentials(email, password)
        with self._storage("login"):
            if not self.credentials.email_exists(email):
                raise NotRegistered()
            try:
                user_id, password_hash = self.credentials.verify_credentials(email, password)
            except NotFound:
                # Existed a moment ago; the lookup itself is what failed.
                logger.error("Credential lookup failed for a registered email")
                raise InternalError("Cannot process the request")

        if not check_password(password, password_hash):
            raise Unauthorized()

        try:
            token = self.tokens.issue(user_id, email)
        except InvalidIdentity:
            logger.error("Refused to sign token for incomplete identity")
            raise InternalError("Cannot process the request")
        logger.info("User logged in", extra={"user_id": user_id})
        return token

    def _authenticate(self, token: str) -> str:
        return self.tokens.validate(token).subject_id

    def _authorize(self, item_id: str, subject_id: str) -> TodoItem:
        # Fetch first so a missing id reads as NotFound, not Forbidden.
        item = self.lifecycle.find_by_id(item_id)
        if not self.guard.is_owner(item_id, subject_id):
            logger.warning(
                "Denied access to item", extra={"item_id": item_id, "user_id": subject_id},
            )
            raise Forbidden()
        return item

    # --- items ----------------------------------------------------------

    def create_item(
        self,
        token: str,
        name: str,
        description: Optional[str],
        due_date: Optional[datetime],
        priority,
    ) -> TodoItem:
        subject_id = self._authenticate(token)
        with self._storage("create_item"):
            return self.lifecycle.create(name, description, due_date, priority, subject_id)

    def get_item(self, token: str, item_id: str) -> TodoItem:
        subject_id = self._authenticate(token)
        with self._storage("get_item"):
            return self._authorize(item_id, subject_id)

    def list_items(self, token: str, limit: int) -> List[TodoItem]:
        subject_id = self._authenticate(token)
        with self._storage("list_items"):
            return self.lifecycle.list_items(subject_id, limit)

    def update_item(
        self,
        token: str,
        item_id: str,
        description: Optional[str],
        due_date: Optional[datetime],
        priority,
    ) -> TodoItem:
        subject_id = self._authenticate(token)
        with self._storage("update_item"):
            self._authorize(item_id, subject_id)
            return self.lifecycle.update(item_id, description, due_date, priority)

    def complete_item(self, token: str, item_id: str) -> TodoItem:
        subject_id = self._authenticate(token)
        with self._storage("complete_item"):
            self._authorize(item_id, subject_id)
            return self.lifecycle.complete(item_id)

    def delete_item(self, token: str, item_id: str) -> None:
        subject_id = self._authenticate(token)
        with self._storage("delete_item"):
            self._authorize(item_id, subject_id)
            self.lifecycle.soft_delete(item_id)
