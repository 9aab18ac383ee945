"""Loading settings from an X resource database text."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

__all__ = [
    "ResourceType",
    "ResourcePref",
    "parse_resource_database",
    "load_resource",
    "load_resources",
]

Value = Union[str, int, float]

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?))")


class ResourceType(enum.Enum):
    STRING = 0
    INTEGER = 1
    FLOAT = 2


@dataclass(frozen=True)
class ResourcePref:
    """A resource name and the type its value is read as."""

    name: str
    type: ResourceType


def parse_resource_database(text: str) -> dict[str, str]:
    """Parse ``pattern: value`` lines; ``!`` comments and ``#`` directives are skipped."""
    db: dict[str, str] = {}
    logical: list[str] = []
    pending = ""
    for raw in text.splitlines():
        if raw.endswith("\\"):
            pending += raw[:-1]
            continue
        logical.append(pending + raw)
        pending = ""
    if pending:
        logical.append(pending)
    for line in logical:
        stripped = line.strip()
        if not stripped or stripped.startswith(("!", "#")):
            continue
        key, sep, value = stripped.partition(":")
        if not sep:
            continue
        key = "".join(key.split())
        if key:
            db[key] = value.lstrip()
    return db


def _split_pattern(key: str) -> list[tuple[str, str]]:
    parts: list[tuple[str, str]] = []
    binding, comp = ".", ""
    for ch in key:
        if ch in ".*":
            if comp:
                parts.append((binding, comp))
                comp = ""
                binding = ch
            elif ch == "*":
                binding = "*"
        else:
            comp += ch
    if comp:
        parts.append((binding, comp))
    return parts


def _match(pattern: list[tuple[str, str]], levels: list[tuple[str, str]]) -> Optional[tuple[int, ...]]:
    best: Optional[tuple[int, ...]] = None

    def walk(pi: int, li: int, score: tuple[int, ...]) -> None:
        nonlocal best
        if pi == len(pattern):
            if li == len(levels) and (best is None or score > best):
                best = score
            return
        binding, comp = pattern[pi]
        limit = len(levels) if binding == "*" else min(li + 1, len(levels))
        for k in range(li, limit):
            name, cls = levels[k]
            if comp == name:
                kind = 3
            elif comp == cls:
                kind = 2
            elif comp == "?":
                kind = 1
            else:
                continue
            value = kind * 2 + (1 if binding == "." else 0)
            walk(pi + 1, k + 1, score + (0,) * (k - li) + (value,))

    walk(0, 0, ())
    return best


def _lookup(db: dict[str, str], name: str, instance_name: str, class_name: str) -> Optional[str]:
    levels = [(instance_name, class_name)] + [(part, part) for part in name.split(".")]
    best_score: Optional[tuple[int, ...]] = None
    best_value: Optional[str] = None
    for key, value in db.items():
        score = _match(_split_pattern(key), levels)
        if score is not None and (best_score is None or score > best_score):
            best_score, best_value = score, value
    return best_value


def _convert(value: str, rtype: ResourceType) -> Value:
    if rtype is ResourceType.STRING:
        return value
    if rtype is ResourceType.INTEGER:
        m = _INT_RE.match(value)
        return int(m.group(1)) if m else 0
    m = _FLOAT_RE.match(value)
    return float(m.group(1)) if m else 0.0


def load_resource(
    db: dict[str, str],
    name: str,
    rtype: ResourceType,
    instance_name: Optional[str] = None,
    class_name: Optional[str] = None,
) -> Optional[Value]:
    """Look up ``name`` for the given instance and class; ``None`` if unset."""
    value = _lookup(db, name, instance_name or "st", class_name or "St")
    if value is None:
        return None
    return _convert(value, rtype)


def load_resources(
    db: dict[str, str],
    prefs: Iterable[ResourcePref],
    instance_name: Optional[str] = None,
    class_name: Optional[str] = None,
) -> dict[str, Value]:
    """Load every preference that the database sets."""
    found: dict[str, Value] = {}
    for pref in prefs:
        value = load_resource(db, pref.name, pref.type, instance_name, class_name)
        if value is not None:
            found[pref.name] = value
    return found