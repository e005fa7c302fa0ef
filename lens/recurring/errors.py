"""Errors raised by the recurring runner."""


class InvalidArgumentError(ValueError):
    """Raised at construction for a missing callback or a bad interval."""
