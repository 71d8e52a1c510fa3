"""
Filter engine.

Applies the search criteria to the catalog as an ordered chain of
predicates (AND across dimensions, OR inside each dimension):

    text -> grade -> major -> credits -> day -> time

Schedules are only parsed when the day or time dimension is active.
"""

from __future__ import annotations

from typing import Iterable, Optional

from coursefinder.model import Catalog, CourseRecord, ScheduleSlot, SearchCriteria
from coursefinder.schedule import parse_schedule


def _slots(course: CourseRecord) -> tuple[ScheduleSlot, ...]:
    return parse_schedule(course.schedule) if course.schedule else ()


def _match_text(course: CourseRecord, needle: str) -> bool:
    return not needle or needle in course.id.lower() or needle in course.title.lower()


def _match_days(course: CourseRecord, days: frozenset[str]) -> bool:
    return not days or any(s.day in days for s in _slots(course))


def _match_times(course: CourseRecord, times: frozenset[int]) -> bool:
    return not times or any(not times.isdisjoint(s.range) for s in _slots(course))


def filter_courses(records: Iterable[CourseRecord], criteria: SearchCriteria) -> tuple[CourseRecord, ...]:
    """
    Return the records matching every active dimension, in catalog order.
    """
    if criteria.is_empty:
        return tuple(records)

    needle = criteria.query.lower()
    credits = str(criteria.credits) if criteria.credits else ""

    out = (r for r in records if _match_text(r, needle))
    if criteria.grades:
        out = (r for r in out if r.grade in criteria.grades)
    if criteria.majors:
        out = (r for r in out if r.major in criteria.majors)
    if credits:
        out = (r for r in out if r.credits.startswith(credits))
    if criteria.days:
        out = (r for r in out if _match_days(r, criteria.days))
    if criteria.times:
        out = (r for r in out if _match_times(r, criteria.times))

    return tuple(out)


class FilterEngine:
    """
    Memoizes filter_courses on its two inputs.

    The catalog is compared by identity (a fresh load is a new object),
    the criteria by value.
    """

    def __init__(self) -> None:
        self._catalog: Optional[Catalog] = None
        self._criteria: Optional[SearchCriteria] = None
        self._view: tuple[CourseRecord, ...] = ()
        self.runs = 0

    def filter(self, catalog: Catalog, criteria: SearchCriteria) -> tuple[CourseRecord, ...]:
        if catalog is self._catalog and criteria == self._criteria:
            return self._view

        self._view = filter_courses(catalog, criteria)
        self._catalog = catalog
        self._criteria = criteria
        self.runs += 1
        return self._view
