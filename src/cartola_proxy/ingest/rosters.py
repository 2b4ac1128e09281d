"""Player-id extraction from team roster payloads."""

from __future__ import annotations

from typing import Any, List

from .participants import coerce_id, dig

ROSTER_ARRAY_PATHS = (
    ("atletas",),
    ("time", "atletas"),
)

PLAYER_ID_KEYS = ("atleta_id", "id")


def extract_player_ids(payload: Any) -> List[int]:
    """Return the fielded player ids in upstream order.

    Unknown shapes yield an empty list rather than an error.
    """

    for path in ROSTER_ARRAY_PATHS:
        players = dig(payload, path)
        if not isinstance(players, list):
            continue
        ids: List[int] = []
        for player in players:
            for key in PLAYER_ID_KEYS:
                player_id = coerce_id(dig(player, (key,)))
                if player_id is not None:
                    ids.append(player_id)
                    break
        return ids
    return []
