"""
Reference maps (id -> display name) for groups, teachers and auditoriums.

The server answers getGroups/getTeachers/getAuditoriums with a JSON object
mapping id to name. Some entries carry an empty name; those are dropped.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from schedu.errors import DecodeError

ReferenceMap = Dict[str, str]


def build_reference_map(data: Any) -> ReferenceMap:
    """
    Turn a decoded list response into a ReferenceMap.

    Accepts a JSON object (id -> name) or a JSON array (index is the id).
    Entries with falsy names are discarded, order is kept.
    """
    if isinstance(data, dict):
        items = data.items()
    elif isinstance(data, list):
        items = enumerate(data)
    else:
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")

    out: ReferenceMap = {}
    for key, name in items:
        if not name:
            continue
        out[str(key)] = name
    return out


def resolve_id_by_name(mapping: ReferenceMap, name: str) -> Optional[str]:
    """
    Return the id of the first entry whose name equals `name` exactly.

    Matching is case-sensitive and does no trimming. Returns None if nothing
    matches.
    """
    for ref_id, ref_name in mapping.items():
        if ref_name == name:
            return ref_id
    return None


def resolve_name_by_id(mapping: ReferenceMap, ref_id: "str | int") -> Optional[str]:
    return mapping.get(str(ref_id))
