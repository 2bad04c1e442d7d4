"""
Visitor registry: check-in / check-out, current visitors, activity log.
One registry per application run; nothing is persisted.
"""

import logging
import threading
from dataclasses import dataclass, FrozenInstanceError
from datetime import datetime
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

CURRENTLY_INSIDE = "Currently Inside"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class VisitorError(Exception):
    """Base class for registry errors."""


class VisitorNotFound(VisitorError, LookupError):
    def __init__(self, name: str):
        super().__init__("Visitor not found or already checked out.")
        self.name = name


class AlreadyCheckedOut(VisitorError):
    def __init__(self, name: str):
        super().__init__(f"Visitor '{name}' is already checked out.")
        self.name = name


# ---------------------------------------------------------------------------
# Views handed to the presentation layer
# ---------------------------------------------------------------------------

class VisitorView(NamedTuple):
    name: str
    contact_info: str
    check_in_time: datetime
    check_out_time: Optional[datetime]


class TableRow(NamedTuple):
    name: str
    contact_info: str
    check_in: str
    check_out: str


def format_timestamp(ts: datetime) -> str:
    return ts.isoformat()


# ---------------------------------------------------------------------------
# Visitor record
# ---------------------------------------------------------------------------

@dataclass
class VisitorRecord:
    """One visit. Name and contact never change; check-out is set at most once."""
    name: str
    contact_info: str
    check_in_time: datetime
    check_out_time: Optional[datetime] = None

    _IDENTITY_FIELDS = ("name", "contact_info", "check_in_time")

    def __setattr__(self, key, value):
        if key in self._IDENTITY_FIELDS and key in self.__dict__:
            raise FrozenInstanceError(f"cannot assign to field '{key}'")
        super().__setattr__(key, value)

    @classmethod
    def create(cls, name: str, contact_info: str, timestamp: Optional[datetime] = None) -> "VisitorRecord":
        return cls(name=name, contact_info=contact_info, check_in_time=timestamp or datetime.now())

    @property
    def is_inside(self) -> bool:
        return self.check_out_time is None

    def mark_checked_out(self, timestamp: Optional[datetime] = None) -> None:
        """
        Set the check-out time. Raises AlreadyCheckedOut on a second call.
        An explicit timestamp before check-in is rejected; a wall clock that
        stepped backwards is clamped to the check-in time.
        """
        if not self.is_inside:
            raise AlreadyCheckedOut(self.name)
        if timestamp is None:
            ts = max(datetime.now(self.check_in_time.tzinfo), self.check_in_time)
        else:
            if timestamp < self.check_in_time:
                raise ValueError("Check-out cannot be before check-in.")
            ts = timestamp
        self.check_out_time = ts

    def describe(self) -> str:
        line = (
            f"Visitor: {self.name}, Contact: {self.contact_info}, "
            f"Checked-in: {format_timestamp(self.check_in_time)}"
        )
        if self.check_out_time is not None:
            return line + f", Checked-out: {format_timestamp(self.check_out_time)}"
        return line + ", Currently inside"

    def to_view(self) -> VisitorView:
        return VisitorView(self.name, self.contact_info, self.check_in_time, self.check_out_time)

    def to_row(self) -> TableRow:
        return TableRow(
            self.name,
            self.contact_info,
            format_timestamp(self.check_in_time),
            CURRENTLY_INSIDE if self.check_out_time is None else format_timestamp(self.check_out_time),
        )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class VisitorRegistry:
    """
    Ordered visitor records (arrival order) plus an append-only activity log.
    Every public method takes the same lock, so shells may call it from any thread.
    """

    def __init__(self):
        self._records: list[VisitorRecord] = []
        self._log: list[str] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def check_in(self, name: str, contact_info: str, timestamp: Optional[datetime] = None) -> VisitorView:
        """Register an arrival. No uniqueness check on name."""
        record = VisitorRecord.create(name, contact_info, timestamp)
        with self._lock:
            self._records.append(record)
            self._log.append(record.describe())
        logger.info("Checked in %s", name)
        return record.to_view()

    def check_out(self, name: str, timestamp: Optional[datetime] = None) -> VisitorView:
        """
        Check out the earliest-arrived visitor with this exact name who is still inside.
        Raises VisitorNotFound when there is none; nothing changes in that case.
        """
        with self._lock:
            record = self._find_inside(name)
            if record is None:
                logger.warning("Check-out failed, no visitor inside named %r", name)
                raise VisitorNotFound(name)
            record.mark_checked_out(timestamp)
            self._log.append(record.describe())
        logger.info("Checked out %s", name)
        return record.to_view()

    def _find_inside(self, name: str) -> Optional[VisitorRecord]:
        for record in self._records:
            if record.name == name and record.is_inside:
                return record
        return None

    def list_current_visitors(self) -> list[VisitorView]:
        with self._lock:
            return [r.to_view() for r in self._records if r.is_inside]

    def current_count(self) -> int:
        with self._lock:
            return sum(1 for r in self._records if r.is_inside)

    def get_log(self) -> list[str]:
        with self._lock:
            return list(self._log)

    def snapshot_table(self) -> list[TableRow]:
        """One row per record, arrival order; the check-out column holds a label while inside."""
        with self._lock:
            return [r.to_row() for r in self._records]


def describe_view(view: VisitorView) -> str:
    """Same text as VisitorRecord.describe(), for views held by a shell."""
    return VisitorRecord(*view).describe()
