"""Invest or Defend CLI.

Plays a whole game against a freshly seeded in-memory repository and prints
each organisation's balance after every turn. Useful for tuning catalog
probabilities and costs.

Usage:
    invest-or-defend --game-type competitive --organisations 3 --turns 8 --seed 7
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, TextIO

from invest_or_defend.models import Game, GameType
from invest_or_defend.services import GameService
from invest_or_defend.storage import MemoryRepository, seed_catalog

logger = logging.getLogger(__name__)

STRATEGIES = ["none", "cheapest"]


def buy_cheapest_controls(service: GameService, organisation_id: str) -> int:
    """Buy the cheapest new controls the organisation can afford.

    Returns:
        Number of controls bought
    """
    bought = 0
    controls = sorted(service.get_new_controls(organisation_id), key=lambda c: c.cost)
    for control in controls:
        organisation = service.get_organisation(organisation_id)
        if control.cost > organisation.balance:
            break
        service.purchase_control(organisation_id, control.id)
        bought += 1
    return bought


def play_game(
    service: GameService,
    game: Game,
    strategy: str = "none",
    out: Optional[TextIO] = None,
) -> Game:
    """Simulate every turn of a game, printing balances as it goes."""
    out = out or sys.stdout
    while not game.is_ended:
        turn = game.current_turn
        if strategy == "cheapest":
            for organisation_id in game.organisations:
                buy_cheapest_controls(service, organisation_id)

        # Competitive turns run once the last organisation asks
        for organisation_id in game.organisations:
            game = service.simulate_turn(game.id, organisation_id)
            if game.current_turn != turn or game.is_ended:
                break

        report = service.lifecycle.last_report
        print(f"Turn {turn}: {len(report.events)} event(s)", file=out)
        for result in report.organisations:
            organisation = service.get_organisation(result.organisation_id)
            print(
                f"  {organisation.name:<20} {result.starting_balance:>12.2f} "
                f"-{result.cost_incurred:>10.2f} +{result.income:>8.2f} "
                f"= {result.final_balance:>12.2f} ({result.mitigated_count} mitigated)",
                file=out,
            )

    print("\nFinal balances:", file=out)
    for organisation in service.get_organisations(game):
        print(f"  {organisation.name:<20} {organisation.balance:>12.2f}", file=out)
    return game


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play a game of Invest or Defend to the end")
    parser.add_argument("--game-type", choices=[t.value for t in GameType],
                        default=GameType.SINGLE_PLAYER.value,
                        help="Game type (default: single-player)")
    parser.add_argument("--organisations", type=int, default=1,
                        help="Number of organisations, competitive games only (default: 1)")
    parser.add_argument("--turns", type=int, default=None,
                        help="Number of turns (default: game default)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")
    parser.add_argument("--catalog", default=None,
                        help="Catalog JSON file (default: packaged catalog)")
    parser.add_argument("--strategy", choices=STRATEGIES, default="none",
                        help="Control purchasing strategy (default: none)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log simulation details")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for `invest-or-defend` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    game_type = GameType(args.game_type)
    if args.organisations < 1:
        parser.error("--organisations must be at least 1")
    if args.organisations > 1 and game_type != GameType.COMPETITIVE:
        parser.error("only competitive games have more than one organisation")
    if args.turns is not None and args.turns < 1:
        parser.error("--turns must be at least 1")

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    repository = MemoryRepository()
    seed_catalog(repository, args.catalog)
    service = GameService(repository, random_seed=args.seed)

    settings = {"game_type": game_type}
    if args.turns is not None:
        settings["max_turns"] = args.turns
    game = service.create_game(settings, "Organisation 1")
    for i in range(2, args.organisations + 1):
        game = service.add_organisation(game.id, f"Organisation {i}")

    print(f"Playing {game_type.value} game {game.id} over {game.max_turns} turns...")
    play_game(service, game, args.strategy)
    return 0


if __name__ == "__main__":
    sys.exit(main())
