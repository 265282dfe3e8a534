"""Repository classes for data access."""

from __future__ import annotations

import json
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import MalformedPersistedData, PersistenceError
from .models import Employee, KeyValueEntry, Shift

Snapshot = Tuple[Shift, ...]
Listener = Callable[[], None]


def encode_snapshot(shifts: Iterable[Shift]) -> str:
    """Serialize shifts to the persisted JSON list."""
    return json.dumps([s.to_record() for s in shifts])


def decode_snapshot(payload: str | None) -> Snapshot:
    """
    Parse a persisted JSON list of shift records.

    Raises:
        MalformedPersistedData: If the payload is not a JSON list of valid records
    """
    if not payload:
        return ()
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise MalformedPersistedData(f"Snapshot is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedPersistedData(f"Snapshot must be a list, got {type(data).__name__}")
    return tuple(Shift.from_record(item) for item in data)


class ShiftRepository(ABC):
    """
    Loads and saves the whole shift collection as one snapshot.

    Subscribers are called with no arguments after every successful save and
    re-read the snapshot themselves.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    @abstractmethod
    def load(self) -> Snapshot:
        """Return the current snapshot (empty if nothing stored or unreadable)."""

    @abstractmethod
    def _write(self, shifts: Snapshot) -> None:
        """Persist the snapshot atomically."""

    def save(self, shifts: Sequence[Shift]) -> Snapshot:
        snapshot = tuple(shifts)
        self._write(snapshot)
        self._notify()
        return snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class InMemoryShiftRepository(ShiftRepository):
    """Snapshot held in process memory; used by tests and one-off scripts."""

    def __init__(self, shifts: Iterable[Shift] = ()) -> None:
        super().__init__()
        self._snapshot: Snapshot = tuple(shifts)
        self.save_count = 0

    def load(self) -> Snapshot:
        return self._snapshot

    def _write(self, shifts: Snapshot) -> None:
        self._snapshot = shifts
        self.save_count += 1


class SqlShiftRepository(ShiftRepository):
    """Snapshot stored as JSON in the kv_store table under a fixed key."""

    def __init__(self, session_factory: Callable[[], Session], key: str = "shiftboard.schedule.shifts") -> None:
        super().__init__()
        self.session_factory = session_factory
        self.key = key

    def load(self) -> Snapshot:
        session = self.session_factory()
        try:
            entry = session.get(KeyValueEntry, self.key)
            payload = entry.value if entry is not None else None
        finally:
            session.close()
        try:
            return decode_snapshot(payload)
        except MalformedPersistedData as e:
            print(f"[WARN] Ignoring unreadable snapshot under '{self.key}': {e}")
            return ()

    def _write(self, shifts: Snapshot) -> None:
        session = self.session_factory()
        try:
            entry = session.get(KeyValueEntry, self.key)
            if entry is None:
                entry = KeyValueEntry(key=self.key, value="[]", revision=0)
                session.add(entry)
            entry.value = encode_snapshot(shifts)
            entry.updated_at = datetime.now(timezone.utc)
            entry.revision = (entry.revision or 0) + 1
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Failed to save snapshot under '{self.key}': {e}") from e
        finally:
            session.close()


class EmployeeRepository:
    """Repository for employee data access."""
    
    @staticmethod
    def get_all(session: Session, include_inactive: bool = True) -> List[Employee]:
        """Get all employees."""
        query = session.query(Employee)
        if not include_inactive:
            query = query.filter(Employee.status == "active")
        return query.order_by(Employee.name).all()
    
    @staticmethod
    def get_by_id(session: Session, employee_id: str) -> Optional[Employee]:
        """Get employee by ID."""
        return session.get(Employee, employee_id)
    
    @staticmethod
    def create(session: Session, name: str, role: str | None = None, employee_id: str | None = None) -> Employee:
        """Create a new active employee."""
        employee = Employee(id=employee_id or uuid.uuid4().hex, name=name, role=role, status="active")
        session.add(employee)
        session.commit()
        session.refresh(employee)
        return employee
    
    @staticmethod
    def update(session: Session, employee_id: str, **fields) -> Optional[Employee]:
        """Rename or otherwise update an employee. Unknown ids are ignored."""
        employee = session.get(Employee, employee_id)
        if employee is None:
            return None
        for name in ("name", "role", "status"):
            if name in fields and fields[name] is not None:
                setattr(employee, name, fields[name])
        session.commit()
        return employee
    
    @staticmethod
    def deactivate(session: Session, employee_id: str) -> Optional[Employee]:
        """Mark an employee inactive."""
        return EmployeeRepository.update(session, employee_id, status="inactive")
    
    @staticmethod
    def reactivate(session: Session, employee_id: str) -> Optional[Employee]:
        """Mark an employee active again."""
        return EmployeeRepository.update(session, employee_id, status="active")
    
    @staticmethod
    def remove(session: Session, employee_id: str) -> bool:
        """Permanently delete an employee. Returns False if not found."""
        employee = session.get(Employee, employee_id)
        if employee is None:
            return False
        session.delete(employee)
        session.commit()
        return True
