import logging

from sqlalchemy.exc import SQLAlchemyError

from repositories.todo_repository import TodoRepository
from services.errors import InternalError

logger = logging.getLogger(__name__)


class OwnershipGuard:
    """Single existence-and-ownership probe for todo items.

    A missing item and an item owned by someone else both answer False. A storage
    failure raises InternalError and never grants access.
    """

    def __init__(self, items: TodoRepository):
        self.items = items

    def is_owner(self, item_id: str, subject_id: str) -> bool:
        if not item_id or not subject_id:
            return False
        try:
            return self.items.exists_for_owner(item_id, subject_id)
        except SQLAlchemyError:
            logger.exception("Ownership probe failed", extra={"item_id": item_id})
            self.items.session.rollback()
            raise InternalError()
