from .errors import InvalidSeed, InvalidStream, LoopMixError
from .rng import GR, LOOPMIX128, LoopMix128, LoopParams, State, next_array, next_n, rotl, step
from .seeding import init
from .streams import INDEPENDENT, PARTITIONED, init_stream, init_streams

__all__ = [
    'GR', 'LOOPMIX128', 'LoopMix128', 'LoopParams', 'State',
    'init', 'init_stream', 'init_streams', 'next_n', 'next_array', 'rotl', 'step',
    'INDEPENDENT', 'PARTITIONED',
    'LoopMixError', 'InvalidSeed', 'InvalidStream',
]
