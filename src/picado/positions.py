"""Canonical field positions and tag normalization.

This module is the single source of truth for the position vocabulary shared
by signups, players, the local team split and suggested-split validation.
Signup forms and external suggesters speak loosely (Spanish labels, short
codes); everything is folded into the closed ``Position`` enum here.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional


class Position(str, Enum):
    GOALKEEPER = "goalkeeper"
    DEFENDER = "defender"
    MIDFIELDER = "midfielder"
    FORWARD = "forward"


# Balancing order used by the team split: goalkeepers first.
POSITION_PRIORITY: dict[Position, int] = {
    Position.GOALKEEPER: 0,
    Position.DEFENDER: 1,
    Position.MIDFIELDER: 2,
    Position.FORWARD: 3,
}

# Priority for entrants without any declared position.
UNTAGGED_PRIORITY = len(POSITION_PRIORITY)

POSITION_ALIASES: dict[str, Position] = {
    # Goalkeeper
    "goalkeeper": Position.GOALKEEPER,
    "keeper": Position.GOALKEEPER,
    "gk": Position.GOALKEEPER,
    "arco": Position.GOALKEEPER,
    "arquero": Position.GOALKEEPER,
    "portero": Position.GOALKEEPER,
    "guardameta": Position.GOALKEEPER,
    # Defender
    "defender": Position.DEFENDER,
    "def": Position.DEFENDER,
    "defensa": Position.DEFENDER,
    "defensor": Position.DEFENDER,
    # Midfielder
    "midfielder": Position.MIDFIELDER,
    "midfield": Position.MIDFIELDER,
    "mid": Position.MIDFIELDER,
    "medio": Position.MIDFIELDER,
    "mediocampo": Position.MIDFIELDER,
    "mediocampista": Position.MIDFIELDER,
    "centrocampista": Position.MIDFIELDER,
    # Forward
    "forward": Position.FORWARD,
    "fwd": Position.FORWARD,
    "striker": Position.FORWARD,
    "delantero": Position.FORWARD,
    "atacante": Position.FORWARD,
}


def normalize_position(raw: Optional[str]) -> Optional[Position]:
    """Return the canonical position for a tag, or None when unknown."""
    if raw is None:
        return None
    return POSITION_ALIASES.get(raw.strip().lower())


def normalize_positions(raw_tags: Iterable[str] | None) -> list[Position]:
    """Normalize free-form position tags.

    - Unknown tags are ignored.
    - Order is preserved and duplicates are removed.
    """
    if raw_tags is None:
        return []

    seen: set[Position] = set()
    normalized: list[Position] = []

    for raw in raw_tags:
        if not isinstance(raw, str):
            continue
        position = normalize_position(raw)
        if position is None or position in seen:
            continue
        seen.add(position)
        normalized.append(position)

    return normalized


def position_priority(positions: Iterable[Position]) -> int:
    """Best (lowest) balancing priority among the declared positions."""
    priorities = [POSITION_PRIORITY[p] for p in positions]
    return min(priorities) if priorities else UNTAGGED_PRIORITY
