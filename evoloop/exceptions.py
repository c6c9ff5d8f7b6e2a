class EvoLoopError(Exception):
    """Base for all evoloop exceptions."""

    pass


class EvolutionError(EvoLoopError):
    """Evolution process failures."""

    pass


class EmptyPopulationError(EvolutionError, ValueError):
    """Operation requires at least one agent but the population is empty."""

    pass
