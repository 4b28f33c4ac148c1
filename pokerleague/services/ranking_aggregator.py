from __future__ import annotations

import logging

from pokerleague.db.models import ByPlayer
from pokerleague.domain.eliminator_stats import EliminatorStat, build_eliminator_stats
from pokerleague.domain.points import PointsTable
from pokerleague.domain.repository_protocols import LeagueStore
from pokerleague.domain.standings import RankingEntry, TournamentRanking, build_tournament_ranking
from pokerleague.errors import NoCompletedDatesError, TournamentNotFound
from pokerleague.services.points_loader import load_points_table_from_settings

logger = logging.getLogger(__name__)


class RankingAggregator:
    """Read-only standings queries; safe to call concurrently with writes."""

    def __init__(self, store: LeagueStore, points_table: PointsTable | None = None) -> None:
        self._store = store
        if points_table is None:
            points_table = load_points_table_from_settings().table
        self._points_table = points_table

    def calculate_tournament_ranking(self, tournament_id: int) -> TournamentRanking:
        tournament = self._store.get_tournament(tournament_id)
        if tournament is None:
            raise TournamentNotFound(tournament_id=tournament_id)

        game_dates = self._store.list_game_dates(tournament_id)
        eliminations = self._store.list_eliminations_for_tournament(tournament_id)
        player_ids = {record.eliminated_player_id for record in eliminations}
        for game_date in game_dates:
            player_ids.update(game_date.player_ids)
        players = self._store.list_players(sorted(player_ids))

        ranking = build_tournament_ranking(
            tournament, game_dates, eliminations, players, self._points_table
        )
        if not ranking.counted_dates:
            raise NoCompletedDatesError(tournament_id)

        logger.debug(
            "Ranking calculated over %s dates for %s players",
            len(ranking.counted_dates),
            len(ranking.entries),
            extra={"tournament_id": tournament_id},
        )
        return ranking

    def player_ranking(self, tournament_id: int, player_id: int) -> RankingEntry | None:
        return self.calculate_tournament_ranking(tournament_id).entry_for(player_id)

    def eliminator_stats(
        self, tournament_id: int, active_only: bool = False
    ) -> list[EliminatorStat]:
        """Who eliminated whom across the tournament, registered players only."""
        tournament = self._store.get_tournament(tournament_id)
        if tournament is None:
            raise TournamentNotFound(tournament_id=tournament_id)

        game_dates = self._store.list_game_dates(tournament_id)
        eliminations = self._store.list_eliminations_for_tournament(tournament_id)
        player_ids = set()
        for record in eliminations:
            player_ids.add(record.eliminated_player_id)
            if isinstance(record.eliminator, ByPlayer):
                player_ids.add(record.eliminator.player_id)
        players = self._store.list_players(sorted(player_ids))

        stats = build_eliminator_stats(game_dates, eliminations, players)
        if active_only:
            stats = [stat for stat in stats if stat.is_active_relation]
        logger.debug(
            "Eliminator stats calculated: %s pairs",
            len(stats),
            extra={"tournament_id": tournament_id},
        )
        return stats
