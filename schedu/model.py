"""
Central data model definitions used across the library.

This module defines the canonical structure of the objects handed out by
ScheduleClient so that:
- the reshape step and the client share the same field names
- callers get a stable output schema regardless of the server's key names
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, List, Optional

from schedu.errors import InvalidArgument


class EntityKind(Enum):
    """
    Which reference list a schedule query is about.

    Each kind knows the list method of the server and the query parameter
    the schedule method expects for it.
    """

    GROUP = ("getGroups", "id_grp", "Group")
    TEACHER = ("getTeachers", "id_fio", "Teacher")
    AUDITORIUM = ("getAuditoriums", "id_aud", "Auditorium")

    def __init__(self, list_method: str, id_param: str, label: str) -> None:
        self.list_method = list_method
        self.id_param = id_param
        self.label = label

    @classmethod
    def parse(cls, value: "EntityKind | str") -> "EntityKind":
        """
        Accept an EntityKind or its name in any letter case.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            member = cls.__members__.get(value.upper())
            if member is not None:
                return member
        raise InvalidArgument("Invalid type. Use GROUP, TEACHER, or AUDITORIUM.")


class LoadState(Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class TimeWindow:
    start: str
    end: str


@dataclass
class ScheduleEntry:
    """
    Represents one timetable slot (single date & lesson number).

    Each ScheduleEntry corresponds to exactly one record of the server's
    getSchedules response.
    """

    date: Optional[str]
    weekday: Optional[str]
    number: int
    time: TimeWindow
    teacher: Optional[str]
    auditorium: Optional[str]
    groups: List[str] = field(default_factory=list)
    shortname: Optional[str] = None
    discipline: Optional[str] = None
    type: Optional[str] = None
    reason: Optional[str] = None
    info: Optional[str] = None
    comment: Optional[str] = None
    approved: Optional[str] = None
    token: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
