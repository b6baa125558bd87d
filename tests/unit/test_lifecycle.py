"""Unit tests for invest_or_defend.engine.lifecycle.

Tests cover:
- Single-player and cooperative turns run on any request
- Competitive readiness gating
- Game end after max_turns
- Atomicity: failed turns leave no partial writes
- Settings changes apply to the next turn
- Per-game locks
"""

import gc
import random
import threading

import pytest
from support import ScriptedRandom, create_game

from invest_or_defend.engine.lifecycle import GameLifecycle
from invest_or_defend.errors import (
    ConfigurationError,
    GameEndedError,
    InvalidRequestError,
    PastBalanceAlreadySetError,
)
from invest_or_defend.models import GameState, GameType
from invest_or_defend.parameters import THREAT_ACTORS_SETTING
from invest_or_defend.storage.repository import EVENTS

ONE_LAPTOP_EVENT = [0.0, 0.0, 0.0, 0.0, 0.0, 0.5]
SETTINGS = dict(min_num_of_events=1, max_num_of_events=1, min_cost_per_event=0.0, max_cost_per_event=2000.0)


class TestSimulateTurn:
    """Tests for non-competitive games."""

    def test_single_player_turn(self, repository):
        game, (org,) = create_game(repository, **SETTINGS)
        lifecycle = GameLifecycle(repository, rng=ScriptedRandom(ONE_LAPTOP_EVENT))

        result = lifecycle.simulate_turn(game.id)

        assert result.current_turn == 2
        assert result.state == GameState.PURCHASING
        assert repository.get_game(game.id) == result
        assert repository.get_organisation(org.id).past_balances == [0.0]
        assert lifecycle.last_report.turn == 1

    def test_cooperative_ignores_readiness(self, repository):
        game, _ = create_game(repository, game_type=GameType.COOPERATIVE, **SETTINGS)
        lifecycle = GameLifecycle(repository, rng=ScriptedRandom(ONE_LAPTOP_EVENT))

        assert lifecycle.simulate_turn(game.id).current_turn == 2

    def test_game_ends_after_max_turns(self, repository):
        game, (org,) = create_game(repository, max_turns=5)
        lifecycle = GameLifecycle(repository, rng=random.Random(7))

        states = [lifecycle.simulate_turn(game.id).state for _ in range(5)]

        assert states == [GameState.PURCHASING] * 4 + [GameState.ENDED]
        stored = repository.get_game(game.id)
        assert stored.current_turn == 5
        assert stored.ready_organisations == []
        org = repository.get_organisation(org.id)
        assert len(org.past_balances) == 5

        with pytest.raises(GameEndedError):
            lifecycle.simulate_turn(game.id)
        assert repository.get_organisation(org.id) == org

    def test_seeded_runs_are_reproducible(self, repository):
        first, (org_a,) = create_game(repository)
        second, (org_b,) = create_game(repository)

        GameLifecycle(repository, random_seed=99).simulate_turn(first.id)
        GameLifecycle(repository, random_seed=99).simulate_turn(second.id)

        a = repository.get_organisation(org_a.id)
        b = repository.get_organisation(org_b.id)
        assert a.balance == b.balance
        assert [e.cost for e in a.events] == [e.cost for e in b.events]


class TestCompetitive:
    """Tests for competitive readiness gating."""

    def test_turn_waits_for_every_organisation(self, repository):
        game, (first, second) = create_game(
            repository, organisations=2, game_type=GameType.COMPETITIVE, **SETTINGS
        )
        lifecycle = GameLifecycle(repository, rng=ScriptedRandom(ONE_LAPTOP_EVENT))

        waiting = lifecycle.simulate_turn(game.id, first.id)

        assert waiting.current_turn == 1
        assert waiting.state == GameState.PURCHASING
        assert waiting.ready_organisations == [first.id]
        assert waiting.events == []
        assert repository.get_organisation(first.id).past_balances == []

        # Asking twice does not count twice
        assert lifecycle.simulate_turn(game.id, first.id).ready_organisations == [first.id]

        done = lifecycle.simulate_turn(game.id, second.id)

        assert done.current_turn == 2
        assert done.ready_organisations == []
        assert len(done.events) == 1
        for org in (first, second):
            assert len(repository.get_organisation(org.id).past_balances) == 1

    def test_requires_organisation(self, repository):
        game, _ = create_game(repository, organisations=2, game_type=GameType.COMPETITIVE)
        with pytest.raises(InvalidRequestError):
            GameLifecycle(repository).simulate_turn(game.id)

    def test_rejects_foreign_organisation(self, repository):
        game, _ = create_game(repository, organisations=2, game_type=GameType.COMPETITIVE)
        _, (stranger,) = create_game(repository)
        with pytest.raises(InvalidRequestError):
            GameLifecycle(repository).simulate_turn(game.id, stranger.id)

    def test_concurrent_requests_run_one_turn(self, repository):
        game, orgs = create_game(repository, organisations=4, game_type=GameType.COMPETITIVE)
        lifecycle = GameLifecycle(repository, random_seed=3)
        errors = []

        def request(org_id):
            try:
                lifecycle.simulate_turn(game.id, org_id)
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=request, args=(org.id,)) for org in orgs]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert repository.get_game(game.id).current_turn == 2
        for org in orgs:
            assert len(repository.get_organisation(org.id).past_balances) == 1


class TestAtomicity:
    """Failed turns leave storage untouched."""

    def test_failure_mid_turn_rolls_back(self, repository):
        game, (org,) = create_game(
            repository, min_num_of_events=2, max_num_of_events=2,
            min_cost_per_event=0.0, max_cost_per_event=2000.0,
        )
        # Enough draws for the count and the first event only
        lifecycle = GameLifecycle(repository, rng=ScriptedRandom([0.0] + ONE_LAPTOP_EVENT[1:] + [0.0]))

        with pytest.raises(AssertionError, match="exhausted"):
            lifecycle.simulate_turn(game.id)

        stored = repository.get_game(game.id)
        assert stored.state == GameState.PURCHASING
        assert stored.current_turn == 1
        assert stored.events == []
        assert repository.get_organisation(org.id).past_balances == []
        assert repository._scan(EVENTS) == []

    def test_past_balance_conflict_leaves_game_purchasing(self, repository):
        game, (org,) = create_game(repository, **SETTINGS)
        org.past_balances = [0.0]
        repository.save_organisation(org)

        with pytest.raises(PastBalanceAlreadySetError):
            GameLifecycle(repository, rng=ScriptedRandom(ONE_LAPTOP_EVENT)).simulate_turn(game.id)

        assert repository.get_game(game.id).state == GameState.PURCHASING

    def test_configuration_error_leaves_game_untouched(self, repository):
        game, _ = create_game(repository, source="iso27001")

        with pytest.raises(ConfigurationError):
            GameLifecycle(repository, rng=ScriptedRandom([])).simulate_turn(game.id)

        assert repository.get_game(game.id) == game


class TestCatalogFreshness:
    """Settings changed between turns apply to the next turn."""

    def test_threat_actor_change_applies_next_turn(self, repository):
        game, _ = create_game(repository, **SETTINGS)
        lifecycle = GameLifecycle(repository, rng=ScriptedRandom(ONE_LAPTOP_EVENT * 2))

        lifecycle.simulate_turn(game.id)
        assert lifecycle.last_report.events[0].threat_actor == "criminal"
        assert lifecycle.last_report.events[0].cost == 1000.0

        repository.save_setting(THREAT_ACTORS_SETTING, [{"slug": "ransomware-gang", "cost_modifier": 3.0}])
        lifecycle.simulate_turn(game.id)

        event = lifecycle.last_report.events[0]
        assert event.threat_actor == "ransomware-gang"
        assert event.cost == 3000.0


class TestLocks:
    """Tests for the per-game locks."""

    def test_lock_dropped_after_request(self, repository):
        game, _ = create_game(repository, **SETTINGS)
        lifecycle = GameLifecycle(repository, rng=ScriptedRandom(ONE_LAPTOP_EVENT))

        lifecycle.simulate_turn(game.id)
        gc.collect()

        assert game.id not in lifecycle._locks

    def test_locked_is_reentrant(self, repository):
        game, _ = create_game(repository, **SETTINGS)
        lifecycle = GameLifecycle(repository, rng=ScriptedRandom(ONE_LAPTOP_EVENT))

        with lifecycle.locked(game.id):
            assert lifecycle.simulate_turn(game.id).current_turn == 2

    def test_locked_blocks_other_threads(self, repository):
        game, _ = create_game(repository, **SETTINGS)
        lifecycle = GameLifecycle(repository, rng=ScriptedRandom(ONE_LAPTOP_EVENT))
        thread = threading.Thread(target=lifecycle.simulate_turn, args=(game.id,))

        with lifecycle.locked(game.id):
            thread.start()
            thread.join(timeout=0.3)
            assert thread.is_alive()
            assert repository.get_game(game.id).current_turn == 1
        thread.join(timeout=5)

        assert repository.get_game(game.id).current_turn == 2
