#!/usr/bin/env python3
"""
Quick clubstats Example - Season Dashboard
==========================================

The simplest way to print a team's season analytics from the hosted backend.

Usage:
    export SUPABASE_URL=https://your-project.supabase.co
    export SUPABASE_KEY=your_anon_key
    python user_testing/quick_example.py <team_id> [team_name]
"""
import asyncio
import sys
import os

# Add backend source to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend', 'src'))

from adapters.external.supabase_client import SupabaseClient
from config.settings import settings
from core.exceptions import ClubStatsException
from domain.models.statistics import LeaderboardMetric
from domain.services.analytics_service import AnalyticsService


def print_record(label: str, stats) -> None:
    print(
        f"{label:<16} P{stats.total_games:>3}  W{stats.wins:>3}  D{stats.draws:>3}  L{stats.losses:>3}  "
        f"GF{stats.goals_for:>4}  GA{stats.goals_against:>4}  Pts{stats.points:>4}  {stats.win_rate}%"
    )


async def season_dashboard(team_id: str, team_name: str = None):
    """Fetch one team's snapshot and print the dashboard figures."""
    print(f"📊 clubstats Quick Example - team {team_id}\n")

    if not settings.supabase_url or not settings.supabase_key:
        print("⚠️  SUPABASE_URL and SUPABASE_KEY must be set (environment or .env)")
        return

    async with SupabaseClient() as client:
        service = AnalyticsService(client)
        analytics = await service.get_season_analytics(team_id, team_name=team_name)

    print_record("Overall", analytics.overall)
    print(f"Avg goals/game: {analytics.overall.avg_goals_per_game}\n")

    print("📋 By category:")
    for category in analytics.categories:
        print_record(category.category_name, category.stats)

    print("\n🏆 By event type:")
    for event_type, breakdown in analytics.event_types.items():
        print_record(event_type.display_name, breakdown.stats)
        for category in breakdown.categories:
            print_record(f"  {category.category_name}", category.stats)

    print("\n🕒 Recent results:")
    for result in analytics.recent_results:
        when = result.date.isoformat() if result.date else "undated"
        lines = ", ".join(
            f"{slot.category_name} {slot.our_score}-{slot.opponent_score} ({slot.outcome.value})"
            for slot in result.slots
        ) or "no score recorded"
        print(f"  {when}  {result.title}: {lines}")

    print("\n⚽ Top scorers:")
    for entry in analytics.leaderboard(LeaderboardMetric.GOALS):
        print(f"  {entry.rank}. {entry.player_name} - {entry.value}")

    totals = analytics.team_totals
    print(f"\n👥 {totals.player_count} active players, {totals.stats.total_goals} goals, "
          f"{totals.stats.total_assists} assists")


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    team_id = sys.argv[1]
    team_name = sys.argv[2] if len(sys.argv) > 2 else None

    try:
        asyncio.run(season_dashboard(team_id, team_name))
    except ClubStatsException as e:
        print(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
