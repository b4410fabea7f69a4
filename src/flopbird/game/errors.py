"""Errors raised synchronously by the simulation core."""


class SimulationError(Exception):
    """Base class for core failures."""


class ConfigError(SimulationError, ValueError):
    """The profile / world combination cannot produce a valid obstacle."""


class InvalidBoundsError(ConfigError):
    """World width or height is zero or negative."""
