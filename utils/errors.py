"""Error types for the tutorial helpers."""


class TutorialError(Exception):
    """Base exception for tutorial helper errors."""
    pass


class InvalidArgument(TutorialError, ValueError):
    """Invalid sampling or model parameters."""
    pass
