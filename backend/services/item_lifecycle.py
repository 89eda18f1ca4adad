"""Todo item state machine.

    [none] --create--> ACTIVE
    ACTIVE --update--> ACTIVE
    ACTIVE --complete--> COMPLETED      (one way, idempotent)
    ACTIVE|COMPLETED --soft_delete--> DELETED   (one way, idempotent)

Nothing leaves DELETED: update and complete on a deleted item are rejected.
Ownership is not checked here; see services.authorization.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from models import utcnow
from models.todo import Priority, TodoItem
from repositories.todo_repository import TodoRepository
from services.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3


def validate_priority(priority) -> str:
    value = priority.value if isinstance(priority, Priority) else priority
    if not isinstance(value, str) or value not in {p.value for p in Priority}:
        raise ValidationError("priority must be one of HIGH, MEDIUM, LOW")
    return value


def validate_description(description) -> str:
    if description is None:
        return ""
    if not isinstance(description, str):
        raise ValidationError("description must be a string")
    return description


def validate_due_date(due_date: Optional[datetime]) -> datetime:
    if not isinstance(due_date, datetime):
        raise ValidationError("due_date is required")
    if due_date.tzinfo is not None:
        due_date = due_date.astimezone(timezone.utc).replace(tzinfo=None)
    return due_date


class ItemLifecycle:
    def __init__(self, items: TodoRepository):
        self.items = items

    def create(
        self,
        name: str,
        description: Optional[str],
        due_date: Optional[datetime],
        priority,
        owner_id: str,
    ) -> TodoItem:
        if name is not None and not isinstance(name, str):
            raise ValidationError("name must be a string")
        name = (name or "").strip()
        if len(name) < MIN_NAME_LENGTH:
            raise ValidationError(f"name must be at least {MIN_NAME_LENGTH} characters")
        description = validate_description(description)
        priority = validate_priority(priority)
        due_date = validate_due_date(due_date)

        now = utcnow()
        item = TodoItem(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=name,
            description=description,
            due_date=due_date,
            priority=priority,
            is_completed=False,
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )
        self.items.insert(item)
        logger.info("Created todo item", extra={"item_id": item.id, "user_id": owner_id})
        return item

    def update(
        self,
        item_id: str,
        description: Optional[str],
        due_date: Optional[datetime],
        priority,
    ) -> TodoItem:
        description = validate_description(description)
        priority = validate_priority(priority)
        due_date = validate_due_date(due_date)
        self._require_live(item_id)
        if not self.items.update_fields(item_id, description, due_date, priority, utcnow()):
            raise NotFound(f"Cannot find the item: {item_id}")
        return self.find_by_id(item_id)

    def complete(self, item_id: str) -> TodoItem:
        self._require_live(item_id)
        if not self.items.mark_completed(item_id, utcnow()):
            raise NotFound(f"Cannot find the item: {item_id}")
        return self.find_by_id(item_id)

    def soft_delete(self, item_id: str) -> None:
        if not self.items.mark_deleted(item_id, utcnow()):
            raise NotFound(f"Cannot find the item: {item_id}")
        logger.info("Soft-deleted todo item", extra={"item_id": item_id})

    def list_items(self, owner_id: str, limit: int) -> List[TodoItem]:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValidationError("limit must be a positive integer")
        return self.items.list_by_owner(owner_id, limit)

    def find_by_id(self, item_id: str) -> TodoItem:
        item = self.items.fetch_by_id(item_id)
        if item is None:
            raise NotFound(f"Cannot find the item: {item_id}")
        return item

    def _require_live(self, item_id: str) -> TodoItem:
        item = self.find_by_id(item_id)
        if item.is_deleted:
            raise ValidationError("item has been deleted")
        return item
