"""Champion lookup: curated overrides first, computed standings second.

Some historical tournaments were migrated with incomplete elimination data, so
a ``WinnerOverride`` is authoritative whenever it exists and is never
reconciled against computed standings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pokerleague.db.models import Player, Tournament, TournamentStatus, WinnerOverride
from pokerleague.domain.repository_protocols import LeagueStore
from pokerleague.errors import NoCompletedDatesError, PlayerNotInRanking, TournamentNotFound
from pokerleague.services.ranking_aggregator import RankingAggregator

logger = logging.getLogger(__name__)

SOURCE_OVERRIDE = "override"
SOURCE_COMPUTED = "computed"


@dataclass(frozen=True)
class WinnerRecord:
    tournament_number: int
    champion_player_id: int
    champion: Player | None
    source: str
    tournament_id: int | None = None
    note: str | None = None
    total_points: int | None = None

    @property
    def champion_name(self) -> str:
        if self.champion is None:
            return f"Player {self.champion_player_id}"
        return self.champion.full_name


class WinnerResolver:
    def __init__(self, store: LeagueStore, aggregator: RankingAggregator | None = None) -> None:
        self._store = store
        self._aggregator = aggregator or RankingAggregator(store)

    def winner_for_tournament_number(self, number: int) -> WinnerRecord:
        override = self._store.get_winner_override(number)
        if override is not None:
            return self._from_override(override)

        tournament = self._store.get_tournament_by_number(number)
        if tournament is None:
            raise TournamentNotFound(tournament_number=number)
        return self._computed_winner(tournament)

    def all_winners_with_fallback(self) -> list[WinnerRecord]:
        """Every curated champion plus computed champions of finished tournaments."""
        winners = {
            override.tournament_number: self._from_override(override)
            for override in self._store.list_winner_overrides()
        }
        for tournament in self._store.list_tournaments():
            if tournament.number in winners or tournament.status != TournamentStatus.FINISHED:
                continue
            try:
                winners[tournament.number] = self._computed_winner(tournament)
            except PlayerNotInRanking as exc:
                logger.warning(
                    "Skipping tournament without a resolvable champion: %s",
                    exc.message,
                    extra={"tournament_id": tournament.id, "tournament_number": tournament.number},
                )
        return [winners[number] for number in sorted(winners)]

    def _from_override(self, override: WinnerOverride) -> WinnerRecord:
        tournament = self._store.get_tournament_by_number(override.tournament_number)
        return WinnerRecord(
            tournament_number=override.tournament_number,
            champion_player_id=override.champion_player_id,
            champion=self._store.get_player(override.champion_player_id),
            source=SOURCE_OVERRIDE,
            tournament_id=tournament.id if tournament else None,
            note=override.note,
        )

    def _computed_winner(self, tournament: Tournament) -> WinnerRecord:
        try:
            ranking = self._aggregator.calculate_tournament_ranking(tournament.id)
        except NoCompletedDatesError as exc:
            raise PlayerNotInRanking(tournament.number, "no recorded eliminations") from exc

        leader = ranking.leader
        if leader is None:
            raise PlayerNotInRanking(tournament.number)
        logger.debug(
            "Champion of tournament %s computed from standings",
            tournament.number,
            extra={"tournament_id": tournament.id, "player_id": leader.player_id},
        )
        return WinnerRecord(
            tournament_number=tournament.number,
            champion_player_id=leader.player_id,
            champion=self._store.get_player(leader.player_id),
            source=SOURCE_COMPUTED,
            tournament_id=tournament.id,
            total_points=leader.total_points,
        )
