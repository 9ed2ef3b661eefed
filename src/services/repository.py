"""Generic CRUD over one resource table."""

from typing import Any

from sqlalchemy.orm import Session


class ResourceService:
    """Create/read/update/delete for an owned resource model.

    Subclasses set ``model`` and ``min_columns`` (the projection used by the
    list-view "min" endpoints).
    """

    model: Any = None
    min_columns: tuple[str, ...] = ("id",)

    def __init__(self, db: Session):
        self.db = db

    def create(self, payload: dict[str, Any]) -> Any:
        """Persist a new record. Foreign ids in ``payload`` are not checked."""
        record = self.model(**payload)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def find_by_id(self, resource_id: str) -> Any | None:
        return self.db.query(self.model).filter(self.model.id == resource_id).first()

    def find_all(self, **filters: Any) -> list[Any]:
        return self.db.query(self.model).filter_by(**filters).order_by(self.model.created_at).all()

    def find_all_min(self, **filters: Any) -> list[Any]:
        """Rows holding only ``min_columns``."""
        columns = [getattr(self.model, name) for name in self.min_columns]
        return (
            self.db.query(*columns).filter_by(**filters).order_by(self.model.created_at).all()
        )

    def update_by_id(self, resource_id: str, data: dict[str, Any]) -> bool:
        """Merge ``data`` into the record. Returns False when no row matched."""
        if not data:
            return self.find_by_id(resource_id) is not None
        count = (
            self.db.query(self.model)
            .filter(self.model.id == resource_id)
            .update(data, synchronize_session="fetch")
        )
        self.db.commit()
        return count > 0

    def delete_by_id(self, resource_id: str) -> int:
        count = self.db.query(self.model).filter(self.model.id == resource_id).delete()
        self.db.commit()
        return count

    def delete_by_owner(self, user_id: str) -> int:
        count = self.db.query(self.model).filter(self.model.user_id == user_id).delete()
        self.db.commit()
        return count
