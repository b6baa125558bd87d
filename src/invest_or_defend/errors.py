"""Exceptions raised by the simulation core.

Every exception carries a ``status_code`` so the web layer can turn it into
an HTTP response without knowing about individual error types.
"""


class SimulationError(Exception):
    """Base class for all errors raised by the simulation core."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SimulationError):
    """The catalog for a game's source cannot support a simulation.

    Raised for empty threat actor, asset or security area catalogs, and for
    probability tables that cannot be normalised.
    """

    status_code = 500


class StateViolationError(SimulationError):
    """An operation is not allowed in the game's current state."""

    status_code = 409


class GameEndedError(StateViolationError):
    """The game has already ended."""

    status_code = 403


class PastBalanceAlreadySetError(StateViolationError):
    """An organisation already has a recorded balance for the turn."""

    status_code = 500


class NotFoundError(SimulationError):
    """A game, organisation, event or control does not exist."""

    status_code = 404


class InvalidRequestError(SimulationError):
    """The request references something inconsistent with the game."""

    status_code = 400
