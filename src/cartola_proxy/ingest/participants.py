"""Ordered-probe extraction of participants from opaque league payloads.

The upstream league payload changes shape between seasons and deployments.
Instead of a fixed schema, every field we care about is looked up through an
ordered list of candidate paths; the first usable value wins. Adding support
for a new shape means appending a path here, not touching call sites.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from cartola_proxy.models import LeagueSummary, ParticipantRecord


logger = logging.getLogger(__name__)

FieldPath = Tuple[str, ...]

_PARTICIPANT_KEYS: tuple[str, ...] = (
    "times",
    "times_participantes",
    "timesParticipantes",
    "participantes",
)

PARTICIPANT_ARRAY_PATHS: tuple[FieldPath, ...] = tuple((key,) for key in _PARTICIPANT_KEYS) + tuple(
    ("liga", key) for key in _PARTICIPANT_KEYS
)

TEAM_ID_PATHS: tuple[FieldPath, ...] = (
    ("time_id",),
    ("time", "time_id"),
    ("timeId",),
    ("time", "id"),
)

TEAM_NAME_PATHS: tuple[FieldPath, ...] = (
    ("nome",),
    ("time", "nome"),
    ("nome_time",),
    ("timeName",),
)

DEFAULT_TEAM_NAME = "Time"

LEAGUE_WRAPPERS: tuple[FieldPath, ...] = (("liga",), ())
LEAGUE_ID_KEYS: tuple[str, ...] = ("liga_id", "id")
LEAGUE_NAME_KEYS: tuple[str, ...] = ("nome", "name")


def dig(payload: Any, path: Sequence[str]) -> Any:
    """Follow ``path`` through nested mappings, returning ``None`` on any miss."""

    current = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def coerce_id(value: Any) -> Optional[int]:
    """Return a positive integer id from ``value``, or ``None``."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, float) and value.is_integer():
        return int(value) or None
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip()) or None
    return None


def first_id(entry: Any, paths: Iterable[FieldPath]) -> Optional[int]:
    for path in paths:
        value = coerce_id(dig(entry, path))
        if value is not None:
            return value
    return None


def first_text(entry: Any, paths: Iterable[FieldPath]) -> Optional[str]:
    for path in paths:
        value = dig(entry, path)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def find_participant_entries(payload: Any) -> List[Any]:
    for path in PARTICIPANT_ARRAY_PATHS:
        candidate = dig(payload, path)
        if isinstance(candidate, list) and candidate:
            logger.debug("Participants found at %s", ".".join(path))
            return candidate
    return []


def normalize_participants(payload: Any) -> List[ParticipantRecord]:
    """Canonicalize the participants of ``payload``; never raises.

    Entries without a resolvable team id are dropped. Duplicated ids are kept
    as delivered by the upstream.
    """

    records: List[ParticipantRecord] = []
    dropped = 0
    for entry in find_participant_entries(payload):
        team_id = first_id(entry, TEAM_ID_PATHS)
        if team_id is None:
            dropped += 1
            continue
        name = first_text(entry, TEAM_NAME_PATHS) or DEFAULT_TEAM_NAME
        records.append(ParticipantRecord(team_id=team_id, display_name=name))
    if dropped:
        logger.info("Dropped %s participant entries without a team id", dropped)
    return records


def summarize_league(payload: Any, identifier: str) -> LeagueSummary:
    """Probe the league id, name and slug out of ``payload``."""

    for wrapper in LEAGUE_WRAPPERS:
        node = dig(payload, wrapper)
        if not isinstance(node, Mapping):
            continue
        league_id = first_id(node, [(key,) for key in LEAGUE_ID_KEYS])
        name = first_text(node, [(key,) for key in LEAGUE_NAME_KEYS])
        slug = first_text(node, [("slug",)])
        if league_id is not None or name or slug:
            return LeagueSummary(identifier=identifier, league_id=league_id, name=name, slug=slug)
    return LeagueSummary(identifier=identifier)
