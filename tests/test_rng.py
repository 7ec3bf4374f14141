"""Step function, rotation and the owned-generator wrapper."""

import numpy as np
import pytest

from loopmix128.errors import InvalidSeed
from loopmix128.rng import GR, MASK64, LoopMix128, State, next_array, next_n, rotl, step
from loopmix128.seeding import init
from loopmix128.streams import init_stream

SEED = 0x1234567890ABCDEF
SEEDED_STATE = State(0x1c948e1575796814, 0xae9ef1ab67004bdb, 0x7a2988d31f16e86e)
GOLDEN = [
    0x8be4b2a3da6992aa,
    0xd4020d31c1a57148,
    0x32dea59ab1890bd2,
    0x3631454db086a398,
    0xb0512070588ff20e,
    0xb2b67e38ae74db1f,
    0x978c139ab6fc107b,
    0xf4b356b4e3995e95,
]
AFTER_GOLDEN = State(0x321d6dce03e0a236, 0xae9ef1ab67004bdb, 0x9c3f97b925e16a50)


@pytest.mark.parametrize("k", range(1, 64))
def test_rotl_round_trip(k):
    for x in (1, GR, MASK64, 0x5050a1e1d03b6432, 0x8000000000000000):
        assert rotl(rotl(x, k), 64 - k) == x


def test_rotl_wraps_high_bit():
    assert rotl(0x8000000000000000, 1) == 1
    assert rotl(1, 63) == 0x8000000000000000
    assert rotl(0x1234, 0) == 0x1234


def test_step_hand_computed():
    out, nxt = step(State(1, 2, 3))
    assert out == (GR * 4) & MASK64 == 0x78dde6e5fd29f054
    assert nxt == State(0x9e37f9b97f4a7c15, 2, 0x1800000000000001)


def test_step_bumps_slow_loop_when_fast_loop_is_zero():
    out, nxt = step(State(0, 5, 7))
    assert out == (GR * 7) & MASK64
    assert nxt.slow_loop == (5 + GR) & MASK64
    assert nxt.mix == rotl(7 ^ nxt.slow_loop, 59)
    assert nxt.fast_loop == GR


def test_zero_state_is_kicked_by_counter():
    out, nxt = step(State(0, 0, 0))
    assert out == 0
    assert nxt == State(GR, GR, 0xacf1bbcdcbfa53e0)


def test_step_is_deterministic():
    assert step(SEEDED_STATE) == step(SEEDED_STATE)


def test_golden_vectors():
    assert init(SEED) == SEEDED_STATE
    values, state = next_n(SEEDED_STATE, 8)
    assert values == GOLDEN
    assert state == AFTER_GOLDEN


def test_next_n_matches_repeated_step():
    state = SEEDED_STATE
    expected = []
    for _ in range(100):
        value, state = step(state)
        expected.append(value)
    values, end = next_n(SEEDED_STATE, 100)
    assert values == expected
    assert end == state


def test_next_n_zero_and_negative():
    assert next_n(SEEDED_STATE, 0) == ([], SEEDED_STATE)
    with pytest.raises(ValueError):
        next_n(SEEDED_STATE, -1)


def test_next_array_is_uint64():
    arr, state = next_array(SEEDED_STATE, 8)
    assert arr.dtype == np.uint64
    assert [int(v) for v in arr] == GOLDEN
    assert state == AFTER_GOLDEN


def test_generator_wrapper():
    gen = LoopMix128(seed=SEED)
    assert gen.peek_next() == GOLDEN[0]
    assert gen.next_raw() == GOLDEN[0]
    assert gen.next_n(3) == GOLDEN[1:4]
    assert [int(v) for v in gen.next_array(4)] == GOLDEN[4:]
    assert gen.state == AFTER_GOLDEN


def test_generator_from_stream():
    gen = LoopMix128.from_stream(SEED, 1, 4)
    assert gen.state == init_stream(SEED, 1, 4)
    assert gen.next_n(5) == next_n(init_stream(SEED, 1, 4), 5)[0]


def test_generator_masks_state_words():
    wide = LoopMix128(state=(1 << 64 | 1, (1 << 70) + 2, 3))
    assert wide.state == State(1, 2, 3)
    assert wide.next_raw() == 0x78dde6e5fd29f054


def test_generator_rejects_all_zero_state():
    with pytest.raises(InvalidSeed):
        LoopMix128(state=(0, 0, 0))
    with pytest.raises(InvalidSeed):
        LoopMix128(state=(1 << 64, 0, 1 << 128))


def test_generator_from_state_replays():
    a = LoopMix128(state=SEEDED_STATE)
    b = LoopMix128(state=tuple(SEEDED_STATE))
    assert a.next_n(50) == b.next_n(50)


def test_next_double_range():
    gen = LoopMix128(seed=SEED)
    values = [gen.next_double() for _ in range(1000)]
    assert all(0.0 <= v < 1.0 for v in values)
    assert values[0] == (GOLDEN[0] >> 11) / float(1 << 53)


def test_state_helpers():
    assert State(0, 1, 2).is_degenerate()
    assert not SEEDED_STATE.is_degenerate()
    assert State(1, 2, 3).as_hex()[2] == '0000000000000003'
