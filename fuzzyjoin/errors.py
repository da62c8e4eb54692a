"""Exceptions raised by the fuzzy join engine."""


class FuzzyJoinError(Exception):
    """Base exception for fuzzyjoin."""
    pass


class ConfigurationError(FuzzyJoinError, ValueError):
    """Raised for an invalid join call: bad `by`, missing columns, bad mode."""
    pass


class StrategyError(FuzzyJoinError, ValueError):
    """Raised by a matcher strategy for invalid parameters or inputs."""
    pass
