"""Entities stored by the league and read by the core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class PlayerRole(str, Enum):
    STAFF = "Staff"
    MEMBER = "Member"
    GUEST = "Guest"


class TournamentStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    FINISHED = "finished"


class GameDateStatus(str, Enum):
    PENDING = "pending"
    CONFIGURED = "configured"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ByPlayer:
    """The elimination was made by another roster player."""

    player_id: int


@dataclass(frozen=True)
class NoEliminator:
    """Nobody eliminated the player: the last one standing."""


NO_ELIMINATOR = NoEliminator()

Eliminator = Union[ByPlayer, NoEliminator]


def eliminator_from_id(player_id: int | None) -> Eliminator:
    if player_id is None:
        return NO_ELIMINATOR
    return ByPlayer(int(player_id))


def eliminator_to_id(eliminator: Eliminator) -> int | None:
    if isinstance(eliminator, ByPlayer):
        return eliminator.player_id
    return None


@dataclass(frozen=True)
class Player:
    id: int
    first_name: str
    last_name: str
    role: PlayerRole = PlayerRole.MEMBER
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Tournament:
    id: int
    number: int
    name: str
    status: TournamentStatus = TournamentStatus.UPCOMING


@dataclass(frozen=True)
class GameDate:
    id: int
    tournament_id: int
    date_number: int
    status: GameDateStatus
    player_ids: tuple[int, ...] = ()
    scheduled_date: str | None = None

    @property
    def roster_size(self) -> int:
        return len(self.player_ids)


@dataclass(frozen=True)
class EliminationRecord:
    id: int
    game_date_id: int
    eliminated_player_id: int
    eliminator: Eliminator
    position: int
    points: int
    created_at: str | None = None

    @property
    def is_winner(self) -> bool:
        return self.position == 1


@dataclass(frozen=True)
class NewElimination:
    """Validated elimination waiting to be persisted."""

    game_date_id: int
    eliminated_player_id: int
    eliminator: Eliminator
    position: int
    points: int


@dataclass(frozen=True)
class WinnerOverride:
    tournament_number: int
    champion_player_id: int
    note: str | None = None
    created_at: str | None = None
