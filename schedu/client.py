"""
HTTP client for the SumDU public schedule service.

Usage:

    client = ScheduleClient()
    client.list_groups()                        # {"1001": "IN-11", ...}
    client.get_schedule("group", "IN-11", "01.09.2024", "07.09.2024")

The three reference lists (groups, teachers, auditoriums) are loaded once
and kept in memory. Schedules are fetched fresh on every call.
"""

from __future__ import annotations

import json
import logging
from datetime import date, tzinfo
from typing import Any, Dict, List, Optional

import requests

from schedu.errors import DecodeError, FetchError, InvalidArgument, ScheduError
from schedu.model import EntityKind, LoadState, ScheduleEntry
from schedu.reference import ReferenceMap, build_reference_map, resolve_id_by_name, resolve_name_by_id
from schedu.transform import DATE_FORMAT, parse_records

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

BASE_URL = "https://schedule.sumdu.edu.ua/index/json"
DEFAULT_TIMEOUT = 30.0


def _format_date(value: "date | str | None") -> str:
    """
    None -> today's local date, date -> "DD.MM.YYYY", str -> as given.
    """
    if value is None:
        return date.today().strftime(DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    return value


class ScheduleClient:
    """
    Client for groups, teachers, auditoriums and timetable entries.

    By default the constructor loads all three reference lists right away
    (pass autoload=False to defer that to the first access or an explicit
    initialize() call). Use it as a context manager, or call close(), to
    release the HTTP session it created.
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        tz: Optional[tzinfo] = None,
        autoload: bool = True,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        # Only a session created here is closed by close(); an injected one belongs to the caller.
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.tz = tz

        self._maps: Dict[EntityKind, ReferenceMap] = {kind: {} for kind in EntityKind}
        self._states: Dict[EntityKind, LoadState] = {kind: LoadState.UNLOADED for kind in EntityKind}

        if autoload:
            try:
                self.initialize()
            except ScheduError:
                self.close()
                raise

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "ScheduleClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -----------------------------------------------------------------------
    # Transport
    # -----------------------------------------------------------------------

    def _get_json(self, params: Dict[str, Any]) -> Any:
        """
        GET base_url with the given query and decode the JSON body.

        Raises FetchError for transport problems and DecodeError when the
        body is not JSON or is JSON null.
        """
        logger.debug("GET %s params=%s", self.base_url, params)
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Request %s failed: %s", params.get("method"), e)
            raise FetchError(f"Failed to retrieve {params.get('method')}: {e}") from e

        try:
            # Raw bytes: json picks UTF-8/16/32 itself, whatever charset the headers claim.
            data = json.loads(resp.content)
        except ValueError as e:
            logger.warning("Invalid JSON from %s", params.get("method"))
            raise DecodeError(f"Error decoding JSON for {params.get('method')}") from e

        if data is None:
            raise DecodeError(f"Empty JSON response for {params.get('method')}")
        return data

    # -----------------------------------------------------------------------
    # Reference lists
    # -----------------------------------------------------------------------

    def _fetch_reference(self, kind: EntityKind) -> ReferenceMap:
        try:
            mapping = build_reference_map(self._get_json({"method": kind.list_method}))
        except (FetchError, DecodeError):
            self._states[kind] = LoadState.FAILED
            raise

        self._maps[kind] = mapping
        self._states[kind] = LoadState.LOADED
        logger.info("Loaded %d %s entries", len(mapping), kind.label.lower())
        return mapping

    def initialize(self) -> None:
        """
        (Re)load groups, teachers and auditoriums, replacing what was loaded.
        """
        for kind in EntityKind:
            self._fetch_reference(kind)

    def state(self, kind: "EntityKind | str") -> LoadState:
        return self._states[EntityKind.parse(kind)]

    def _reference(self, kind: EntityKind) -> ReferenceMap:
        # Lazy fallback: anything not loaded yet (or failed before) is fetched now.
        if self._states[kind] is not LoadState.LOADED:
            return self._fetch_reference(kind)
        return self._maps[kind]

    def list_reference(self, kind: "EntityKind | str") -> ReferenceMap:
        """
        Return a copy of the id -> name map for `kind`, loading it if needed.
        """
        return dict(self._reference(EntityKind.parse(kind)))

    def list_groups(self) -> ReferenceMap:
        return self.list_reference(EntityKind.GROUP)

    def list_teachers(self) -> ReferenceMap:
        return self.list_reference(EntityKind.TEACHER)

    def list_auditoriums(self) -> ReferenceMap:
        return self.list_reference(EntityKind.AUDITORIUM)

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    def find_id(self, kind: "EntityKind | str", name: str) -> Optional[str]:
        return resolve_id_by_name(self._reference(EntityKind.parse(kind)), name)

    def find_name(self, kind: "EntityKind | str", ref_id: "str | int") -> Optional[str]:
        return resolve_name_by_id(self._reference(EntityKind.parse(kind)), ref_id)

    def group_id(self, name: str) -> Optional[str]:
        return self.find_id(EntityKind.GROUP, name)

    def group_name(self, ref_id: "str | int") -> Optional[str]:
        return self.find_name(EntityKind.GROUP, ref_id)

    def teacher_id(self, name: str) -> Optional[str]:
        return self.find_id(EntityKind.TEACHER, name)

    def teacher_name(self, ref_id: "str | int") -> Optional[str]:
        return self.find_name(EntityKind.TEACHER, ref_id)

    def auditorium_id(self, name: str) -> Optional[str]:
        return self.find_id(EntityKind.AUDITORIUM, name)

    def auditorium_name(self, ref_id: "str | int") -> Optional[str]:
        return self.find_name(EntityKind.AUDITORIUM, ref_id)

    # -----------------------------------------------------------------------
    # Schedule query
    # -----------------------------------------------------------------------

    def schedule_params(
        self,
        kind: "EntityKind | str",
        name: str,
        date_from: "date | str | None" = None,
        date_to: "date | str | None" = None,
    ) -> Dict[str, str]:
        """
        Build the getSchedules query for `name` of the given kind.

        Raises InvalidArgument for an unknown kind or an unknown name.
        """
        entity = EntityKind.parse(kind)

        ref_id = self.find_id(entity, name)
        if ref_id is None:
            raise InvalidArgument(f"{entity.label} not found.")

        return {
            "method": "getSchedules",
            entity.id_param: ref_id,
            "date_beg": _format_date(date_from),
            "date_end": _format_date(date_to),
        }

    def get_schedule(
        self,
        kind: "EntityKind | str",
        name: str,
        date_from: "date | str | None" = None,
        date_to: "date | str | None" = None,
    ) -> List[ScheduleEntry]:
        """
        Fetch the timetable of a group, teacher or auditorium.

        Dates default to today. The returned entries keep the server order;
        an empty response gives an empty list.
        """
        params = self.schedule_params(kind, name, date_from, date_to)
        entries = parse_records(self._get_json(params), self.tz)
        logger.info("Fetched %d schedule entries for %s", len(entries), name)
        return entries
