# loopmix128/seeding.py
# Expand external seed material into a non-degenerate State via SplitMix64.

import logging
import os

from .errors import InvalidSeed
from .rng import GR, MASK64, State

logger = logging.getLogger(__name__)

SEED_BYTES = 24
MAX_DRAW_ATTEMPTS = 8


def splitmix64_finalize(z):
    z = ((z ^ (z >> 30)) * 0xbf58476d1ce4e5b9) & MASK64
    z = ((z ^ (z >> 27)) * 0x94d049bb133111eb) & MASK64
    return z ^ (z >> 31)


def splitmix64(splitter):
    """Advance the splitter by GR and return ``(splitter, word)``."""
    splitter = (splitter + GR) & MASK64
    return splitter, splitmix64_finalize(splitter)


def fold(splitter, limb):
    return splitmix64_finalize((splitter ^ limb) & MASK64)


def absorb(seed_material):
    """Reduce seed material (int or bytes) to a 64-bit splitter start.

    Bytes are read little-endian. Ints wider than 64 bits are folded in one
    64-bit limb at a time, low limb first.
    """
    if isinstance(seed_material, (bytes, bytearray)):
        if not seed_material:
            raise InvalidSeed("empty seed bytes")
        seed_material = int.from_bytes(seed_material, 'little')
    if isinstance(seed_material, bool) or not isinstance(seed_material, int):
        raise InvalidSeed(f"unsupported seed type: {type(seed_material).__name__}")
    if seed_material < 0:
        raise InvalidSeed("seed must be non-negative")

    splitter = seed_material & MASK64
    rest = seed_material >> 64
    while rest:
        splitter = fold(splitter, rest & MASK64)
        rest >>= 64
    return splitter


def draw_nonzero(splitter):
    for _ in range(MAX_DRAW_ATTEMPTS):
        splitter, word = splitmix64(splitter)
        if word:
            return splitter, word
        logger.debug("splitter produced a zero word, redrawing")
    raise InvalidSeed(f"no non-zero word after {MAX_DRAW_ATTEMPTS} draws")


def draw_state(splitter):
    """Draw fast_loop, slow_loop, mix (in that order); returns ``(splitter, State)``."""
    splitter, fast_loop = draw_nonzero(splitter)
    splitter, slow_loop = draw_nonzero(splitter)
    splitter, mix = draw_nonzero(splitter)
    return splitter, State(fast_loop, slow_loop, mix)


def entropy_seed(entropy=os.urandom):
    raw = entropy(SEED_BYTES)
    if raw is None or len(raw) < SEED_BYTES:
        raise InvalidSeed("entropy source exhausted")
    if not any(raw):
        raise InvalidSeed("entropy source returned all-zero bytes")
    return int.from_bytes(raw, 'little')


def init(seed_material=None, entropy=os.urandom):
    """Construct a State from seed material, or from ``entropy`` when None.

    Every field of the returned state is non-zero.
    """
    if seed_material is None:
        seed_material = entropy_seed(entropy)
    _, state = draw_state(absorb(seed_material))
    return state
