"""Exception types raised by the simulation core."""


class PendulabError(Exception):
    """Base class for all pendulab errors."""


class InvalidParameterError(PendulabError, ValueError):
    """A parameter set violates a physical constraint or names an unknown key."""


class StateCapacityError(PendulabError, ValueError):
    """State vector longer than the integrator workspace can hold."""


class SimulationNotInitializedError(PendulabError, RuntimeError):
    """A lifecycle operation was called before initialize()."""


class NumericalDivergenceError(PendulabError, RuntimeError):
    """The state vector contains NaN or Inf values."""
