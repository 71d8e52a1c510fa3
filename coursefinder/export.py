"""
Adding a course to a timetable.

The timetable store maps a table id to its list of schedule slots and is
owned by the caller. The exporter only reads the existing list, appends the
course's slots and writes the list back.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from coursefinder.model import CourseRecord, ScheduleSlot
from coursefinder.schedule import parse_schedule

log = logging.getLogger(__name__)


class MissingTableError(KeyError):
    """The target table id has no entry in the timetable store."""


class TableStore(Protocol):
    def has_table(self, table_id: str) -> bool: ...

    def get_slots(self, table_id: str) -> list[ScheduleSlot]: ...

    def set_slots(self, table_id: str, slots: list[ScheduleSlot]) -> None: ...


class InMemoryTableStore:
    """
    Dict-backed table store.
    """

    def __init__(self, tables: Optional[dict[str, list[ScheduleSlot]]] = None) -> None:
        self._tables: dict[str, list[ScheduleSlot]] = {k: list(v) for k, v in (tables or {}).items()}

    def create_table(self, table_id: str) -> None:
        self._tables.setdefault(table_id, [])

    def has_table(self, table_id: str) -> bool:
        return table_id in self._tables

    def get_slots(self, table_id: str) -> list[ScheduleSlot]:
        return list(self._tables[table_id])

    def set_slots(self, table_id: str, slots: list[ScheduleSlot]) -> None:
        self._tables[table_id] = list(slots)


class ScheduleExporter:
    """
    Appends a course's parsed slots to a table, then signals completion.
    """

    def __init__(self, store: TableStore, on_close: Optional[Callable[[], None]] = None) -> None:
        self.store = store
        self.on_close = on_close

    def add_to_table(self, table_id: str, course: CourseRecord) -> list[ScheduleSlot]:
        """
        Append the course's slots to table_id and return the appended slots.

        Raises MissingTableError if table_id does not exist in the store.
        """
        if not self.store.has_table(table_id):
            raise MissingTableError(table_id)

        added = [slot.with_course(course) for slot in parse_schedule(course.schedule)]
        if not added:
            log.info("Course %s has no schedule slots; table %s unchanged", course.id, table_id)

        self.store.set_slots(table_id, self.store.get_slots(table_id) + added)
        log.info("Added %s (%d slots) to table %s", course.id, len(added), table_id)

        if self.on_close is not None:
            self.on_close()
        return added
