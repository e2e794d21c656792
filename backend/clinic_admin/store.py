# backend/clinic_admin/store.py
"""In-memory record store with one id-keyed collection per entity kind.

Lookups that find nothing return ``None`` (or ``False`` for deletes); they never
raise. Every operation holds the store's lock, so a single instance can be
shared by the request threads of one process.
"""
import logging
import threading
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel

from . import schemas

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    USERS = "users"
    DOCTORS = "doctors"
    PATIENTS = "patients"
    DEPARTMENTS = "departments"
    APPOINTMENTS = "appointments"
    VISITS = "visits"
    HEALTH_METRICS = "health_metrics"


RECORD_TYPES: Dict[EntityKind, Type[BaseModel]] = {
    EntityKind.USERS: schemas.User,
    EntityKind.DOCTORS: schemas.Doctor,
    EntityKind.PATIENTS: schemas.Patient,
    EntityKind.DEPARTMENTS: schemas.Department,
    EntityKind.APPOINTMENTS: schemas.Appointment,
    EntityKind.VISITS: schemas.Visit,
    EntityKind.HEALTH_METRICS: schemas.HealthMetric,
}

Fields = Union[BaseModel, Mapping[str, Any]]


class RecordStore:
    def __init__(self):
        self._lock = threading.RLock()
        self._records: Dict[EntityKind, Dict[int, BaseModel]] = {kind: {} for kind in EntityKind}
        self._next_id: Dict[EntityKind, int] = {kind: 1 for kind in EntityKind}

    @staticmethod
    def _kind(kind) -> EntityKind:
        try:
            return EntityKind(kind)
        except ValueError:
            raise ValueError(f"Unknown entity kind: {kind!r}") from None

    @staticmethod
    def _field_name(kind: EntityKind, name: str) -> str:
        """Resolve a snake_case attribute or camelCase alias to the attribute name."""
        model_fields = RECORD_TYPES[kind].model_fields
        if name in model_fields:
            return name
        for attr, info in model_fields.items():
            if info.alias == name:
                return attr
        raise ValueError(f"{kind.value} records have no field {name!r}")

    def create(self, kind, draft: Fields) -> BaseModel:
        kind = self._kind(kind)
        fields = draft.model_dump() if isinstance(draft, BaseModel) else dict(draft)
        fields.pop("id", None)
        with self._lock:
            record_id = self._next_id[kind]
            record = RECORD_TYPES[kind].model_validate({**fields, "id": record_id})
            self._next_id[kind] = record_id + 1
            self._records[kind][record_id] = record
        logger.debug("Created %s #%d", kind.value, record_id)
        return record

    def get_by_id(self, kind, record_id: int) -> Optional[BaseModel]:
        kind = self._kind(kind)
        with self._lock:
            return self._records[kind].get(record_id)

    def get_all(self, kind) -> List[BaseModel]:
        kind = self._kind(kind)
        with self._lock:
            return list(self._records[kind].values())

    def get_by_foreign_key(self, kind, field: str, value) -> List[BaseModel]:
        kind = self._kind(kind)
        attr = self._field_name(kind, field)
        with self._lock:
            return [r for r in self._records[kind].values() if getattr(r, attr) == value]

    def update(self, kind, record_id: int, partial: Fields) -> Optional[BaseModel]:
        kind = self._kind(kind)
        if isinstance(partial, BaseModel):
            # null in a typed update means "leave unchanged"
            changes = partial.model_dump(exclude_unset=True, exclude_none=True)
        else:
            changes = {self._field_name(kind, k): v for k, v in partial.items()}
        changes.pop("id", None)
        with self._lock:
            current = self._records[kind].get(record_id)
            if current is None:
                return None
            updated = current.model_copy(update=changes)
            self._records[kind][record_id] = updated
        return updated

    def delete(self, kind, record_id: int) -> bool:
        kind = self._kind(kind)
        with self._lock:
            existed = self._records[kind].pop(record_id, None) is not None
        if existed:
            logger.debug("Deleted %s #%d", kind.value, record_id)
        return existed

    def get_by_username(self, username: str) -> Optional[schemas.User]:
        with self._lock:
            for user in self._records[EntityKind.USERS].values():
                if user.username == username:
                    return user
        return None

    def count(self, kind) -> int:
        kind = self._kind(kind)
        with self._lock:
            return len(self._records[kind])

    def clear(self):
        """Drop every record. Id counters keep counting."""
        with self._lock:
            for records in self._records.values():
                records.clear()
        logger.info("Record store cleared")
