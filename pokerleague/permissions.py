"""Capability checks by player role.

Kept apart from scoring and recording logic: the core never asks who is
calling, the outer layer calls ``can_access`` before invoking it.
"""

from __future__ import annotations

from pokerleague.db.models import PlayerRole

ACCESS_FULL = "full"
ACCESS_LIMITED = "limited"
ACCESS_READ_ONLY = "read-only"

_ALL_ROLES = frozenset(PlayerRole)
_STAFF_AND_MEMBERS = frozenset({PlayerRole.STAFF, PlayerRole.MEMBER})
_STAFF_ONLY = frozenset({PlayerRole.STAFF})

PERMISSIONS_MAP: dict[str, frozenset[PlayerRole]] = {
    "rankings": _ALL_ROLES,
    "winners": _ALL_ROLES,
    "calendar": _ALL_ROLES,
    "profile": _STAFF_AND_MEMBERS,
    "session-progress": _STAFF_AND_MEMBERS,
    "eliminations": _STAFF_ONLY,
    "game-dates": _STAFF_ONLY,
    "tournaments": _STAFF_ONLY,
    "players": _STAFF_ONLY,
    "winner-overrides": _STAFF_ONLY,
    "exports": _STAFF_ONLY,
    "audit-log": _STAFF_ONLY,
}

FEATURES = sorted(PERMISSIONS_MAP)


def _coerce_role(role: PlayerRole | str) -> PlayerRole | None:
    if isinstance(role, PlayerRole):
        return role
    try:
        return PlayerRole(role)
    except ValueError:
        return None


def can_access(role: PlayerRole | str, feature: str) -> bool:
    """Return True when ``role`` may use ``feature``; unknown values are denied."""
    resolved = _coerce_role(role)
    if resolved is None:
        return False
    return resolved in PERMISSIONS_MAP.get(feature, frozenset())


def access_level(role: PlayerRole | str) -> str:
    resolved = _coerce_role(role)
    if resolved == PlayerRole.STAFF:
        return ACCESS_FULL
    if resolved == PlayerRole.MEMBER:
        return ACCESS_LIMITED
    return ACCESS_READ_ONLY


def accessible_features(role: PlayerRole | str) -> list[str]:
    return [feature for feature in FEATURES if can_access(role, feature)]
