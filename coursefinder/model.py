"""
Central data model definitions used across the project.

This module defines the canonical structure of the search objects so that:
- the loader, filter engine, pagination and exporter share the same field names
- records stay immutable once they are loaded
- search criteria are hashable, which makes memoizing the filter step trivial
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace as dc_replace
from typing import Any, Iterable, Iterator, Optional

from coursefinder.config import SEPARATOR


_SEPARATOR_RE = re.compile(re.escape(SEPARATOR), re.IGNORECASE)


def major_label(major: str) -> str:
    """Short tag label: the part after the last separator."""
    return _SEPARATOR_RE.split(major)[-1]


def major_display(major: str) -> str:
    """Full major name with separators shown as spaces."""
    return _SEPARATOR_RE.sub(" ", major)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class CourseRecord:
    """
    Represents one course offering as delivered by the catalog endpoints.
    """

    id: str
    title: str
    grade: int
    credits: str
    major: str
    schedule: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CourseRecord":
        """
        Build a record from one endpoint JSON object.

        Raises ValueError if the object has no id or a non-integer grade.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Course record must be an object, got {type(data).__name__}")

        cid = "" if data.get("id") is None else str(data["id"]).strip()
        if not cid:
            raise ValueError("Course record without id")

        try:
            grade = int(data.get("grade"))
        except (TypeError, ValueError):
            raise ValueError(f"Course {cid!r} has invalid grade {data.get('grade')!r}") from None

        return cls(
            id=cid,
            title=_text(data.get("title")),
            grade=grade,
            credits=_text(data.get("credits")),
            major=_text(data.get("major")),
            schedule=_text(data.get("schedule")),
        )

    @property
    def major_label(self) -> str:
        return major_label(self.major)

    @property
    def major_display(self) -> str:
        return major_display(self.major)


@dataclass(frozen=True)
class ScheduleSlot:
    """
    One weekly meeting of a course: a weekday and the slot ids it occupies.

    `course` is a back-reference for display and export only. It does not
    take part in equality, so parsed slots compare equal with or without it.
    """

    day: str
    range: tuple[int, ...]
    room: Optional[str] = None
    course: Optional[CourseRecord] = field(default=None, compare=False)

    def with_course(self, course: CourseRecord) -> "ScheduleSlot":
        return dc_replace(self, course=course)


@dataclass(frozen=True)
class SearchContext:
    """
    Hint from whoever opened the search: the target table and, optionally,
    the grid cell (day + slot) that was clicked.
    """

    table_id: str
    day: Optional[str] = None
    time: Optional[int] = None


_SET_FIELDS = {"grades": int, "days": str, "times": int, "majors": str}
CRITERIA_FIELDS = ("query", "credits", *_SET_FIELDS)


def _normalize(name: str, value: Any) -> Any:
    if name == "query":
        return "" if value is None else str(value)
    if name == "credits":
        if value is None or value == "":
            return None
        return int(value)
    if name in _SET_FIELDS:
        if value is None:
            return frozenset()
        if isinstance(value, (str, int)):
            value = [value]
        cast = _SET_FIELDS[name]
        return frozenset(cast(v) for v in value)
    raise ValueError(f"Unknown search field: {name!r}")


@dataclass(frozen=True)
class SearchCriteria:
    """
    The current combination of filter dimensions.

    An empty set (or None / "" for the scalar fields) matches everything
    for that dimension.
    """

    query: str = ""
    grades: frozenset[int] = frozenset()
    days: frozenset[str] = frozenset()
    times: frozenset[int] = frozenset()
    majors: frozenset[str] = frozenset()
    credits: Optional[int] = None

    def replace(self, name: str, value: Any) -> "SearchCriteria":
        """
        Return a copy with one field changed. Values are normalized
        (checkbox strings become ints, a single value becomes a set).
        """
        return dc_replace(self, **{name: _normalize(name, value)})

    @property
    def is_empty(self) -> bool:
        return not (self.query or self.grades or self.days or self.times or self.majors or self.credits)


class Catalog:
    """
    Immutable, ordered collection of course records with unique ids.

    Uniqueness is enforced by construction in `merge`; the plain
    constructor is only used with records that are already unique.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[CourseRecord] = ()) -> None:
        self._records: tuple[CourseRecord, ...] = tuple(records)

    @classmethod
    def merge(cls, *partitions: Iterable[CourseRecord]) -> "Catalog":
        """
        Concatenate the partitions in order and deduplicate by id.

        A repeated id overwrites the earlier record, so the later-listed
        partition wins ties. The record keeps the position of the id's
        first occurrence.
        """
        by_id: dict[str, CourseRecord] = {}
        for partition in partitions:
            for record in partition:
                by_id[record.id] = record
        return cls(by_id.values())

    @property
    def records(self) -> tuple[CourseRecord, ...]:
        return self._records

    def majors(self) -> list[str]:
        """Distinct majors in first-seen order."""
        return list(dict.fromkeys(r.major for r in self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[CourseRecord]:
        return iter(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def __repr__(self) -> str:
        return f"Catalog({len(self._records)} records)"
