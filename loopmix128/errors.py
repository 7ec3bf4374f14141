# loopmix128/errors.py
# Construction failures. The step function itself never raises.


class LoopMixError(Exception):
    pass


class InvalidSeed(LoopMixError, ValueError):
    """Seed material cannot be expanded into a non-degenerate state."""


class InvalidStream(LoopMixError, ValueError):
    """Stream index/count outside the partitionable range."""
