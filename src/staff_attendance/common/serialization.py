from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, Iterable


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return value


def to_dict(instance: Any, *, exclude: Iterable[str] = ()) -> Dict[str, Any]:
    """Dataclass -> JSON-ready dict with camelCase keys.

    Enums are rendered by value and dates as ISO strings; fields listed in
    ``exclude`` (e.g. password hashes) are left out.
    """

    skip = set(exclude)
    return {
        camel_case(f.name): to_json_value(getattr(instance, f.name))
        for f in dataclasses.fields(instance)
        if f.name not in skip
    }
