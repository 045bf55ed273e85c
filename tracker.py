#!/usr/bin/env python3
"""
Match Tracker CLI

Reconciles scoreboard extraction results against the roster, recomputes
handicaps from the recorded game history, and splits players into teams.
The roster comes from data/roster.json and recorded games from data/games.json.

Usage:
    python tracker.py reconcile --extraction result.json --save-history data/games.json
    python tracker.py handicaps
    python tracker.py balance --players Jon Spartan NobleSix Arbiter --shuffle-key 2
    python tracker.py stats
    python tracker.py export --output stats.xlsx
"""

import argparse
import logging
import sys
from pathlib import Path

from matchtrack import (
    MalformedExtractionError,
    aggregate_player_totals,
    append_game,
    apply_cumulative_totals,
    balance_teams,
    calculate_player_averages,
    calculate_win_rate,
    determine_winners,
    history_scores,
    load_game_history,
    load_roster,
    match_player,
    parse_extraction_result,
    reconcile,
    team_handicap,
)
from matchtrack.config import balance_settings, handicap_settings, matcher_settings
from matchtrack.excel_export import export_player_stats
from matchtrack.logging_config import setup_logging
from matchtrack.utils import save_json
from matchtrack.validators import (
    validate_reconciled_scores,
    validate_roster,
    validate_team_assignment,
)

logger = logging.getLogger("matchtrack.cli")


def load_players_with_totals(roster_path: Path, history_path: Path):
    """Roster players carrying cumulative totals and current handicaps."""
    roster = load_roster(roster_path)
    scores = history_scores(load_game_history(history_path))
    players = apply_cumulative_totals(roster, aggregate_player_totals(scores), **handicap_settings())
    return players, scores


def cmd_reconcile(args) -> int:
    extraction_path = Path(args.extraction)
    if not extraction_path.exists():
        print(f"❌ Extraction result not found: {extraction_path}")
        return 1

    roster = load_roster(args.roster)
    for error in validate_roster(roster):
        logger.warning(error)

    try:
        result = parse_extraction_result(extraction_path.read_text(encoding='utf-8'))
        winning_team = args.winning_team if args.winning_team is not None else result.winning_team
        scores = reconcile(result, roster, winning_team=winning_team, **matcher_settings())
    except MalformedExtractionError as e:
        print(f"❌ Could not analyze screenshot: {e}")
        return 1

    if not scores:
        print("❌ No roster players were found in the extraction result")
        return 1

    for warning in validate_reconciled_scores(scores):
        logger.warning(warning)

    names = {p.id: p.name for p in roster}
    print(f"Game mode: {result.game_mode}")
    for s in sorted(scores, key=lambda s: (s.score, s.kills), reverse=True):
        team = f"team {s.team}" if s.team is not None else "no team"
        won = " (won)" if s.won else ""
        print(f"  {names[s.player_id]}: {s.kills}/{s.deaths}/{s.assists}, score {s.score}, {team}{won}")

    outcome = determine_winners(scores, result.game_mode, roster)
    if outcome.winners:
        print(f"Winners: {', '.join(outcome.winners)}")

    if args.output:
        save_json(args.output, scores)
        print(f"Scores written to {args.output}")

    if args.save_history:
        game = append_game(args.save_history, scores, result.game_mode, winning_team)
        print(f"Game {game.id} recorded in {args.save_history}")

    return 0


def cmd_handicaps(args) -> int:
    players, _ = load_players_with_totals(args.roster, args.history)
    for p in sorted(players, key=lambda p: p.handicap, reverse=True):
        print(f"  {p.name}: handicap {p.handicap} ({p.kills}/{p.deaths}/{p.assists})")
    return 0


def cmd_balance(args) -> int:
    players, _ = load_players_with_totals(args.roster, args.history)

    for name in args.players:
        player = match_player(name, players, **matcher_settings())
        if player is None:
            print(f"⚠️  {name} is not on the roster, skipping")
            continue
        player.is_selected = True

    teams = balance_teams(players, shuffle_key=args.shuffle_key, **balance_settings())
    if not teams.team_a and not teams.team_b:
        print("❌ Select at least two players to make teams")
        return 1

    for error in validate_team_assignment(teams, players):
        logger.error(error)

    for label, team in (("Team A", teams.team_a), ("Team B", teams.team_b)):
        print(f"{label} ({team_handicap(team)}): {', '.join(p.name for p in team)}")
    return 0


def cmd_stats(args) -> int:
    players, scores = load_players_with_totals(args.roster, args.history)
    averages = calculate_player_averages(scores, players)
    if not averages:
        print("No games recorded yet")
        return 0

    totals = aggregate_player_totals(scores)
    for avg in averages:
        wins = totals[avg.player_id].wins if avg.player_id in totals else 0
        print(
            f"  {avg.name}: {avg.games} games, "
            f"{avg.avg_kills}/{avg.avg_deaths}/{avg.avg_assists} per game, "
            f"KDA {avg.kda}, win rate {calculate_win_rate(wins, avg.games):.1f}%"
        )
    return 0


def cmd_export(args) -> int:
    players, scores = load_players_with_totals(args.roster, args.history)
    averages = calculate_player_averages(scores, players)
    path = export_player_stats(args.output, players, averages)
    print(f"Stats exported to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Match tracker: scoreboard reconciliation and team balancing")
    parser.add_argument("--data-dir", "-d", default="data", help="Path to data directory")
    parser.add_argument("--log-dir", default=None, help="Write a log file to this directory")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("reconcile", help="Match an extraction result to the roster")
    p.add_argument("--extraction", "-e", required=True, help="Extraction result JSON file")
    p.add_argument("--winning-team", type=int, default=None, help="Override the declared winning team")
    p.add_argument("--output", "-o", default=None, help="Write reconciled scores to this JSON file")
    p.add_argument("--save-history", default=None, help="Record the game in this games.json")
    p.set_defaults(func=cmd_reconcile)

    p = sub.add_parser("handicaps", help="Show handicaps from the game history")
    p.set_defaults(func=cmd_handicaps)

    p = sub.add_parser("balance", help="Split players into two balanced teams")
    p.add_argument("--players", "-p", nargs="+", required=True, help="Names of the players taking part")
    p.add_argument("--shuffle-key", "-s", type=int, default=0, help="Bump to get a different split")
    p.set_defaults(func=cmd_balance)

    p = sub.add_parser("stats", help="Per-player averages and win rates")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("export", help="Export player stats to Excel")
    p.add_argument("--output", "-o", required=True, help="Output .xlsx path")
    p.set_defaults(func=cmd_export)

    for name in ("reconcile", "handicaps", "balance", "stats", "export"):
        sub.choices[name].add_argument("--roster", default=None, help="Roster JSON (defaults to DATA_DIR/roster.json)")
        if name != "reconcile":
            sub.choices[name].add_argument("--history", default=None, help="Games JSON (defaults to DATA_DIR/games.json)")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(quiet=args.quiet, log_dir=Path(args.log_dir) if args.log_dir else None)

    data_dir = Path(args.data_dir)
    args.roster = Path(args.roster) if args.roster else data_dir / "roster.json"
    if hasattr(args, "history"):
        args.history = Path(args.history) if args.history else data_dir / "games.json"

    if not args.roster.exists():
        print(f"❌ Roster file not found: {args.roster}")
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
