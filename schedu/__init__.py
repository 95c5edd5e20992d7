"""
schedu: client for the SumDU public schedule service.
"""

from schedu.client import ScheduleClient
from schedu.errors import DecodeError, FetchError, InvalidArgument, ScheduError
from schedu.export_ics import export_entries_to_ics
from schedu.model import EntityKind, LoadState, ScheduleEntry, TimeWindow
from schedu.reference import resolve_id_by_name, resolve_name_by_id

__all__ = [
    "ScheduleClient",
    "ScheduError",
    "FetchError",
    "DecodeError",
    "InvalidArgument",
    "EntityKind",
    "LoadState",
    "ScheduleEntry",
    "TimeWindow",
    "resolve_id_by_name",
    "resolve_name_by_id",
    "export_entries_to_ics",
]
