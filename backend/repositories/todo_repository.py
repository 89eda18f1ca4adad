from datetime import datetime
from typing import List, Optional

from sqlalchemy import exists
from sqlalchemy.orm import Session

from models.todo import TodoItem


class TodoRepository:
    """Record-level access to the todo_items table.

    Every write is a single statement followed by a commit. Update helpers return
    whether a row matched so callers can tell a vanished id from a no-op.
    """

    def __init__(self, session: Session):
        self.session = session

    def insert(self, item: TodoItem) -> TodoItem:
        self.session.add(item)
        self.session.commit()
        return item

    def fetch_by_id(self, item_id: str) -> Optional[TodoItem]:
        return self.session.query(TodoItem).filter(TodoItem.id == item_id).first()

    def list_by_owner(self, owner_id: str, limit: int) -> List[TodoItem]:
        return (
            self.session.query(TodoItem)
            .filter(TodoItem.owner_id == owner_id, TodoItem.is_deleted.is_(False))
            .order_by(TodoItem.created_at.asc())
            .limit(limit)
            .all()
        )

    def update_fields(
        self,
        item_id: str,
        description: str,
        due_date: datetime,
        priority: str,
        updated_at: datetime,
    ) -> bool:
        return self._update(item_id, {
            TodoItem.description: description,
            TodoItem.due_date: due_date,
            TodoItem.priority: priority,
            TodoItem.updated_at: updated_at,
        })

    def mark_completed(self, item_id: str, updated_at: datetime) -> bool:
        return self._update(item_id, {
            TodoItem.is_completed: True,
            TodoItem.updated_at: updated_at,
        })

    def mark_deleted(self, item_id: str, updated_at: datetime) -> bool:
        return self._update(item_id, {
            TodoItem.is_deleted: True,
            TodoItem.updated_at: updated_at,
        })

    def exists_for_owner(self, item_id: str, owner_id: str) -> bool:
        probe = exists().where(TodoItem.id == item_id, TodoItem.owner_id == owner_id)
        return bool(self.session.query(probe).scalar())

    def _update(self, item_id: str, values: dict) -> bool:
        matched = (
            self.session.query(TodoItem)
            .filter(TodoItem.id == item_id)
            .update(values, synchronize_session="fetch")
        )
        self.session.commit()
        return matched > 0
