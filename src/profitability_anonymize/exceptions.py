"""
Error taxonomy for the profitability privacy models.

All errors are raised where they are detected and propagated to the caller.
Nothing in this package retries: the engine performs no I/O on its hot path,
so every failure is either a deterministic validation rejection or a fatal
consistency problem in the reference data.

A population lookup miss is deliberately not an error: it resolves to a
group size of 0.0.
"""

from typing import Optional


class ProfitabilityError(Exception):
    """Base exception for all errors raised by this package."""


class ConfigurationError(ProfitabilityError, ValueError):
    """
    Invalid run configuration, detected at construction time.

    Raised for invalid cost-benefit parameters, a generalization/suppression
    factor outside [0, 1], or a privacy model that lacks a resource it needs
    (subset, hierarchies, population table).
    """


class LoadError(ProfitabilityError, ValueError):
    """
    Malformed reference table.

    Parameters
    ----------
    message : str
        Description of the problem.
    source : str, optional
        Name of the table or file being loaded.
    row : int, optional
        Zero-based index of the offending row.
    """

    def __init__(self, message: str, source: Optional[str] = None, row: Optional[int] = None):
        self.message = message
        self.source = source
        self.row = row
        location = ""
        if source is not None:
            location = f"{source}"
            if row is not None:
                location += f", row {row}"
            location = f" ({location})"
        super().__init__(f"{message}{location}")


class InvariantViolation(ProfitabilityError, RuntimeError):
    """
    Internal consistency check failed during an evaluation.

    Signals corrupted reference data or a mismatch between the hierarchies and
    the population table. Never clamped or recovered from.
    """
