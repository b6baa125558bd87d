"""Turn simulation.

A turn runs in three steps:

1. EVENTS - generate the turn's incident events
2. APPLY - for each organisation, record its starting balance then apply
   every event in generation order; once all organisations are done, credit
   each with the turn's income
3. ADVANCE - move to the next turn, or end the game after the last one

Income is credited in a second pass, after every debit of the turn, so the
same turn's income never offsets that turn's losses. The passes must stay
separate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from invest_or_defend.engine.catalog import SimulationCatalog
from invest_or_defend.engine.event_generator import EventGenerator
from invest_or_defend.engine.mitigation import apply_event
from invest_or_defend.engine.randomness import RandomSource
from invest_or_defend.errors import GameEndedError, PastBalanceAlreadySetError
from invest_or_defend.models import Event, ExperiencedEvent, Game, GameState, Organisation
from invest_or_defend.storage import SimulationRepository

logger = logging.getLogger(__name__)


@dataclass
class OrganisationTurn:
    """What happened to one organisation during a turn.

    Attributes:
        organisation_id: Organisation the record belongs to
        starting_balance: Balance before the turn's events
        events: Events as experienced, in application order
        income: Money credited at the end of the turn
        final_balance: Balance after events and income
    """

    organisation_id: str
    starting_balance: float
    events: list[ExperiencedEvent] = field(default_factory=list)
    income: float = 0.0
    final_balance: float = 0.0

    @property
    def cost_incurred(self) -> float:
        return sum(event.cost_incurred for event in self.events)

    @property
    def mitigated_count(self) -> int:
        return sum(1 for event in self.events if event.mitigated)


@dataclass
class TurnReport:
    """Result of simulating one turn.

    Attributes:
        turn: Turn that was simulated
        events: Events generated for the turn
        organisations: Per-organisation outcome, in game order
        game: The game after advancing
    """

    turn: int
    events: list[Event]
    organisations: list[OrganisationTurn]
    game: Game

    @property
    def game_ended(self) -> bool:
        return self.game.state == GameState.ENDED


class TurnSimulator:
    """Runs a single turn of a game against every organisation in it."""

    def __init__(self, repository: SimulationRepository, rng: RandomSource) -> None:
        self.repository = repository
        self._random = rng

    def load_organisations(self, game: Game) -> list[Organisation]:
        """Load the game's organisations and check none has played this turn.

        Every organisation is checked before any is modified.

        Raises:
            PastBalanceAlreadySetError: If any organisation already has a
                balance recorded for the current turn
        """
        organisations = [self.repository.get_organisation(org_id) for org_id in game.organisations]
        for organisation in organisations:
            if organisation.has_past_balance(game.current_turn):
                raise PastBalanceAlreadySetError(
                    f"Past balance already set for organisation {organisation.id} "
                    f"on turn {game.current_turn} of game {game.id}"
                )
        return organisations

    def run(self, game: Game, catalog: SimulationCatalog) -> TurnReport:
        """Simulate the game's current turn and advance it.

        The caller is expected to wrap this in ``repository.transaction()``;
        the game, organisations and events are all saved through it.

        Raises:
            GameEndedError: If the game has already ended
            PastBalanceAlreadySetError: If the turn was already simulated
            ConfigurationError: If the catalog cannot produce an event
        """
        if game.is_ended:
            raise GameEndedError(f"Game {game.id} is already finished")

        organisations = self.load_organisations(game)
        turn = game.current_turn

        # Step 1: events
        generator = EventGenerator(self.repository, catalog, self._random)
        events = generator.generate_turn(game)
        game.events.extend(event.id for event in events)

        # Step 2, pass A: starting balance, then every event
        outcomes = []
        for organisation in organisations:
            organisation.record_past_balance(turn)
            outcome = OrganisationTurn(organisation.id, starting_balance=organisation.balance)
            for event in events:
                outcome.events.append(apply_event(organisation, event))
            self.repository.save_organisation(organisation)
            outcomes.append(outcome)

        # Step 2, pass B: income
        for organisation, outcome in zip(organisations, outcomes):
            organisation.balance += game.money_per_turn
            outcome.income = game.money_per_turn
            outcome.final_balance = organisation.balance
            self.repository.save_organisation(organisation)

        # Step 3: advance
        self.advance(game)
        self.repository.save_game(game)

        for outcome in outcomes:
            logger.info(
                f"Game {game.id} turn {turn}: organisation {outcome.organisation_id} "
                f"{outcome.starting_balance:.2f} -> {outcome.final_balance:.2f} "
                f"({outcome.mitigated_count}/{len(outcome.events)} events mitigated)"
            )
        return TurnReport(turn=turn, events=events, organisations=outcomes, game=game)

    @staticmethod
    def advance(game: Game) -> None:
        """Move the game past a simulated turn.

        The last turn ends the game and leaves ``current_turn`` at
        ``max_turns``; any other turn moves to the next purchasing phase.
        Readiness is reset either way.
        """
        if game.is_last_turn:
            game.state = GameState.ENDED
            logger.info(f"Game {game.id} ended after turn {game.current_turn}")
        else:
            game.current_turn += 1
            game.state = GameState.PURCHASING
        game.ready_organisations = []
