"""
Exception hierarchy for puzzle generation, encoding and import.
"""


class PipsError(Exception):
    """Base exception for puzzle engine failures."""


class GenerationError(PipsError):
    """Raised when a puzzle cannot be assembled from a foundation."""


class DecodeError(PipsError):
    """Raised when a share token is malformed or not one of ours."""


class ExternalPuzzleError(PipsError):
    """Raised when a third-party puzzle payload cannot be converted."""


class PuzzleTooLargeError(ExternalPuzzleError):
    """Raised when an imported puzzle does not fit on the work grid."""
