"""Replay client against an in-process oracle."""

import types

import pytest

from loopmix128 import replay
from loopmix128.oracle import config
from loopmix128.oracle.app import create_app


class FakeResponse:
    def __init__(self, flask_response):
        self.status_code = flask_response.status_code
        self._json = flask_response.get_json()

    def json(self):
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise RuntimeError(f"HTTP {self.status_code}")


@pytest.fixture
def oracle(monkeypatch):
    cfg = types.SimpleNamespace(**{k: getattr(config, k) for k in dir(config) if k.isupper()})
    cfg.SEED, cfg.OUTPUT_BITS, cfg.STREAM_COUNT = 0xC0FFEE, 40, 3
    client = create_app(cfg).test_client()

    def fake_get(url, params=None, timeout=None):
        return FakeResponse(client.get(url.replace(replay.ORACLE, ''), query_string=params))

    def fake_post(url, json=None, timeout=None):
        return FakeResponse(client.post(url.replace(replay.ORACLE, ''), json=json))

    monkeypatch.setattr(replay.requests, 'get', fake_get)
    monkeypatch.setattr(replay.requests, 'post', fake_post)
    return client


def test_replay_reproduces_served_stream(oracle):
    info = replay.fetch_seed_info()
    assert info['output_bits'] == 40
    obs = replay.query_oracle(6, stream=2)
    matches, gen = replay.replay(info, 2, obs)
    assert matches == 6
    cand, result = replay.predict_and_validate(gen, info, 2)
    assert len(cand) == 10
    assert result['ok'] is True


def test_replay_detects_consumed_stream(oracle):
    oracle.get('/get_output?stream=1')
    info = replay.fetch_seed_info()
    matches, _ = replay.replay(info, 1, replay.query_oracle(4, stream=1))
    assert matches == 0


def test_main_exit_codes(oracle):
    assert replay.main(['--samples', '4', '--stream', '0']) == 0
    # stream 0 has now been read past the replay start
    assert replay.main(['--samples', '4', '--stream', '0']) == 1
