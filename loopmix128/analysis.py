# loopmix128/analysis.py
# Cycle-structure checks on narrow surrogate widths and sampled injectivity.
#
# 64-bit cycles are far too long to walk, so the periodicity argument is
# exercised on LoopParams with small `bits`. Scaling the 64-bit constants
# down does not keep fast_loop full-period (rotate-then-add at 4..32 bits
# never is); TOY_WEYL8 uses fast rotation 0, a plain Weyl sequence, to show
# the 2**bits inner / 2**(2*bits) outer shape.

from collections import namedtuple

from .rng import LOOPMIX128, LoopMix128, LoopParams, State, rotl, step

TOY_WEYL8 = LoopParams(8, 0x15, 3, 0)

# Region of the published 192-bit counterexample to strict injectivity.
# Sampled around, never asserted either way.
KNOWN_NONINJECTIVE_REGION = 0x5050a1e1d03b6432

MAX_EXHAUSTIVE_BITS = 16

InjectivityReport = namedtuple('InjectivityReport', 'samples distinct collisions')


def _fast_step(f, params):
    bits, inc, _, fast_rot = params
    return (rotl(f, fast_rot, bits) + inc) & ((1 << bits) - 1)


def fast_cycle_length(params, start=0):
    """Length of the fast_loop cycle through ``start``.

    The fast_loop update is a bijection, so ``start`` always comes back.
    """
    start &= (1 << params.bits) - 1
    f, n = _fast_step(start, params), 1
    while f != start:
        f, n = _fast_step(f, params), n + 1
    return n


def is_full_period(params):
    return fast_cycle_length(params) == 1 << params.bits


def inverse_step(state, params=LOOPMIX128):
    """Predecessor of ``state``: undo fast_loop, then slow_loop, then mix."""
    bits, inc, mix_rot, fast_rot = params
    mask = (1 << bits) - 1
    fast, slow, mix = state

    fast = rotl((fast - inc) & mask, bits - fast_rot % bits, bits)
    mix = rotl((mix - fast) & mask, bits - mix_rot % bits, bits)
    if fast == 0:
        mix ^= slow
        slow = (slow - inc) & mask
    return State(fast, slow, mix)


def slow_bumps(state, steps, params=LOOPMIX128):
    """Run ``steps`` steps; return (number of slow_loop advances, final state)."""
    bumps = 0
    for _ in range(steps):
        before = state.slow_loop
        _, state = step(state, params)
        if state.slow_loop != before:
            bumps += 1
    return bumps, state


def counter_period(params, state):
    """Steps until (fast_loop, slow_loop) first returns to its starting pair."""
    if params.bits > MAX_EXHAUSTIVE_BITS:
        raise ValueError(f"{params.bits}-bit counters are too wide to walk exhaustively")
    start = (state.fast_loop, state.slow_loop)
    limit = 1 << (2 * params.bits)
    for n in range(1, limit + 1):
        _, state = step(state, params)
        if (state.fast_loop, state.slow_loop) == start:
            return n
    raise AssertionError("counter pair did not recur")  # bijective update; unreachable


def sample_states(samples, seed=0, region=None):
    """Yield ``samples`` pseudo-random states.

    With ``region`` set, fast_loop is drawn from the 2**16 values that differ
    from ``region`` only in the low 16 bits.
    """
    gen = LoopMix128(seed=seed)
    for _ in range(samples):
        fast = gen.next_raw()
        if region is not None:
            fast = region ^ (fast & 0xffff)
        yield State(fast, gen.next_raw(), gen.next_raw())


def sample_injectivity(samples, seed=0, region=None):
    """Count successor collisions among sampled states (see sample_states)."""
    successors = {}
    seen_next = set()
    collisions = 0
    for state in sample_states(samples, seed, region):
        if state in successors:
            continue
        _, nxt = step(state)
        if nxt in seen_next:
            collisions += 1
        successors[state] = nxt
        seen_next.add(nxt)
    return InjectivityReport(samples, len(successors), collisions)
