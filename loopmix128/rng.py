# loopmix128/rng.py
# LoopMix128 core: 192-bit state (fast_loop, slow_loop, mix), one 64-bit output per step.
# All arithmetic is explicit modulo 2**bits; Python ints never overflow on their own.

from collections import namedtuple

import numpy as np

from .errors import InvalidSeed

GR = 0x9e3779b97f4a7c15
MASK64 = (1 << 64) - 1
MIX_ROTATION = 59
FAST_ROTATION = 47


def rotl(x, r, bits=64):
    r %= bits
    mask = (1 << bits) - 1
    x &= mask
    return ((x << r) & mask) | (x >> (bits - r))


class State(namedtuple('State', 'fast_loop slow_loop mix')):
    __slots__ = ()

    def is_degenerate(self):
        return self.fast_loop == 0 or self.slow_loop == 0 or self.mix == 0

    def as_hex(self):
        return tuple(format(v, '016x') for v in self)


# bits: word width, increment: Weyl constant and output multiplier,
# rotations for mix and fast_loop. Only LOOPMIX128 is the real generator;
# narrower widths exist for exhaustive cycle experiments.
LoopParams = namedtuple('LoopParams', 'bits increment mix_rotation fast_rotation')

LOOPMIX128 = LoopParams(64, GR, MIX_ROTATION, FAST_ROTATION)


def step(state, params=LOOPMIX128):
    """Advance ``state`` once and return ``(output, next_state)``.

    The output is taken from the state *before* it is updated:

        output = GR * (mix + fast_loop)
        if fast_loop == 0: slow_loop += GR; mix ^= slow_loop
        mix = rotl(mix, 59) + fast_loop
        fast_loop = rotl(fast_loop, 47) + GR
    """
    bits, inc, mix_rot, fast_rot = params
    mask = (1 << bits) - 1
    fast, slow, mix = state

    output = (inc * (mix + fast)) & mask
    if fast == 0:
        # fast_loop has come back round: bump the outer counter
        slow = (slow + inc) & mask
        mix ^= slow
    mix = (rotl(mix, mix_rot, bits) + fast) & mask
    fast = (rotl(fast, fast_rot, bits) + inc) & mask
    return output, State(fast, slow, mix)


def next_n(state, n, params=LOOPMIX128):
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    out = []
    for _ in range(n):
        value, state = step(state, params)
        out.append(value)
    return out, state


def next_array(state, n):
    # same values as next_n, packed as uint64
    values, state = next_n(state, n)
    return np.array(values, dtype=np.uint64), state


class LoopMix128:
    """Owned single-stream generator around the pure step function."""

    def __init__(self, seed=None, state=None):
        if state is None:
            from .seeding import init
            state = init(seed)
        state = State(*(word & MASK64 for word in state))
        if not any(state):
            raise InvalidSeed("all-zero state")
        self.state = state

    @classmethod
    def from_stream(cls, seed, stream_index, stream_count):
        from .streams import init_stream
        return cls(state=init_stream(seed, stream_index, stream_count))

    def next_raw(self):
        value, self.state = step(self.state)
        return value

    def peek_next(self):
        # next output without consuming it
        return step(self.state)[0]

    def next_n(self, n):
        values, self.state = next_n(self.state, n)
        return values

    def next_array(self, n):
        values, self.state = next_array(self.state, n)
        return values

    def next_double(self):
        # top 53 bits -> [0, 1)
        return (self.next_raw() >> 11) * (1.0 / (1 << 53))
