# loopmix128/streams.py
# Derive many streams from one seed.
#
# partitioned: fast_loop and mix come from the seed folded with the stream
#   index, slow_loop is the centre of the stream's slice of the 2**64
#   range, so the k slow_loop fields are distinct and evenly spaced.
# independent: every stream draws all three words from one continuing
#   SplitMix64 chain; overlap is left to chance (~2**-192 per pair).

import os

from .errors import InvalidStream
from .rng import GR, MASK64, State
from .seeding import absorb, draw_nonzero, draw_state, entropy_seed, fold

PARTITIONED = 'partitioned'
INDEPENDENT = 'independent'
MODES = (PARTITIONED, INDEPENDENT)

MAX_STREAMS = 1 << 63
GR_INVERSE = pow(GR, -1, 1 << 64)


def check_stream(stream_index, stream_count):
    for name, value in (('stream_index', stream_index), ('stream_count', stream_count)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidStream(f"{name} must be an int, got {type(value).__name__}")
    if not 1 <= stream_count <= MAX_STREAMS:
        raise InvalidStream(f"stream_count must be in [1, 2**63], got {stream_count}")
    if not 0 <= stream_index < stream_count:
        raise InvalidStream(f"stream_index {stream_index} out of range for {stream_count} streams")


def stream_spacing(stream_count):
    # floor division: when stream_count does not divide 2**64 the gap from
    # the last stream back round to stream 0 is larger by 2**64 % stream_count
    return (1 << 64) // stream_count


def partition_position(stream_index, stream_count):
    """Centre of the stream's slice of the 2**64 slow_loop range."""
    check_stream(stream_index, stream_count)
    spacing = stream_spacing(stream_count)
    return stream_index * spacing + (spacing >> 1)


def partition_slow_loop(stream_index, stream_count):
    # evenly spaced by 2**64 // stream_count, never zero
    return partition_position(stream_index, stream_count)


def counter_position(slow_loop):
    """How many GR advances (outer cycles) slow_loop sits from zero."""
    return (slow_loop * GR_INVERSE) & MASK64


def init_stream(seed_material, stream_index, stream_count):
    """State for stream ``stream_index`` of ``stream_count`` partitioned streams."""
    slow_loop = partition_slow_loop(stream_index, stream_count)
    if seed_material is None:
        seed_material = entropy_seed()
    splitter = fold(absorb(seed_material), stream_index)
    splitter, fast_loop = draw_nonzero(splitter)
    splitter, mix = draw_nonzero(splitter)
    return State(fast_loop, slow_loop, mix)


def init_streams(seed_material, stream_count, mode=PARTITIONED, entropy=os.urandom):
    if mode not in MODES:
        raise InvalidStream(f"unknown partition mode {mode!r}")
    check_stream(0, stream_count)
    if seed_material is None:
        seed_material = entropy_seed(entropy)

    if mode == PARTITIONED:
        return [init_stream(seed_material, i, stream_count) for i in range(stream_count)]

    states = []
    splitter = absorb(seed_material)
    for _ in range(stream_count):
        splitter, state = draw_state(splitter)
        states.append(state)
    return states
