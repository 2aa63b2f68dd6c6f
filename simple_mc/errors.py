"""
Fatal error taxonomy.

Every failure in the core is an invariant violation: nothing here is
retried. Degenerate statistics (fewer than two active batches) are not
errors and are reported as NaN instead.
"""


class SimulationError(Exception):
    """Base class for all fatal simple_mc errors."""


class AllocationFailure(SimulationError, MemoryError):
    """Bank or queue growth could not obtain memory."""


class EmptyQueueError(SimulationError, IndexError):
    """Dequeue attempted on an empty particle queue."""


class ParameterError(SimulationError, ValueError):
    """Invalid or unparseable run parameters."""
