# loopmix128/oracle/app.py
# Flask oracle serving LoopMix128 streams: /get_output, /get_outputs, /seed, /validate
# Supports SEED_MODE = 'fixed' | 'random' | 'time'

import logging
import os
import threading
import time

from flask import Flask, jsonify, request

from loopmix128.errors import LoopMixError
from loopmix128.rng import MASK64, LoopMix128
from loopmix128.streams import MODES, init_streams
from loopmix128.oracle import config

logger = logging.getLogger('oracle')

DEFAULT_SEED = 0x1234567890ABCDEF


def derive_seed(cfg=config):
    """
    Derive seed material according to cfg.SEED_MODE.
      - 'fixed'  -> cfg.SEED, or DEFAULT_SEED when it is None
      - 'random' -> os.urandom(16)
      - 'time'   -> current time in seconds or ms (cfg.TIME_GRANULARITY)
    Unknown modes fall back to DEFAULT_SEED with a warning.
    """
    mode = (getattr(cfg, 'SEED_MODE', None) or 'fixed').lower()
    if mode == 'fixed':
        seed = getattr(cfg, 'SEED', None)
        if seed is None:
            logger.info(f"Using default fixed SEED: {DEFAULT_SEED:x}")
            return DEFAULT_SEED
        logger.info(f"Using fixed SEED from config: {seed:x}")
        return int(seed)
    if mode == 'random':
        seed = int.from_bytes(os.urandom(16), 'big')
        logger.info(f"Using random SEED (os.urandom): {seed:032x}")
        return seed
    if mode == 'time':
        if getattr(cfg, 'TIME_GRANULARITY', 's') == 'ms':
            seed = int(time.time() * 1000)
        else:
            seed = int(time.time())
        logger.info(f"Using time-derived SEED (granu={cfg.TIME_GRANULARITY}): {seed}")
        return seed
    logger.warning(f"Unknown SEED_MODE '{cfg.SEED_MODE}', falling back to default SEED: {DEFAULT_SEED:x}")
    return DEFAULT_SEED


def mask_output(x, bits=64, select='high'):
    if bits >= 64:
        return x & MASK64
    if select == 'high':
        return (x >> (64 - bits)) & ((1 << bits) - 1)
    return x & ((1 << bits) - 1)


def hex_width(bits):
    return (bits + 3) // 4


class BadRequest(Exception):
    pass


def create_app(cfg=config):
    output_bits = int(getattr(cfg, 'OUTPUT_BITS', 64))
    if not 1 <= output_bits <= 64:
        raise ValueError(f"OUTPUT_BITS must be in 1..64, got {output_bits}")
    select = getattr(cfg, 'OUTPUT_SELECT', 'high')
    stream_count = int(getattr(cfg, 'STREAM_COUNT', 1))
    mode = getattr(cfg, 'PARTITION_MODE', 'partitioned')
    if mode not in MODES:
        raise ValueError(f"PARTITION_MODE must be one of {MODES}, got {mode!r}")
    max_batch = int(getattr(cfg, 'MAX_BATCH', 4096))

    seed = derive_seed(cfg)
    streams = [LoopMix128(state=s) for s in init_streams(seed, stream_count, mode)]
    # streams are single-owner; the lock serialises request threads
    lock = threading.Lock()
    logger.info(f"Oracle ready: {stream_count} {mode} stream(s), {output_bits}-bit {select} outputs")

    app = Flask(__name__)
    app.config['LOOPMIX_SEED'] = seed

    def fmt(value):
        return format(mask_output(value, output_bits, select), '0{}x'.format(hex_width(output_bits)))

    def int_arg(source, name, default):
        raw = source.get(name, default)
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise BadRequest(f"bad {name}")

    def pick_stream(source):
        idx = int_arg(source, 'stream', 0)
        if not 0 <= idx < stream_count:
            raise BadRequest(f"stream must be in [0, {stream_count})")
        return idx

    @app.errorhandler(BadRequest)
    def bad_request(exc):
        return jsonify({'ok': False, 'reason': str(exc)}), 400

    @app.errorhandler(LoopMixError)
    def loopmix_error(exc):
        logger.warning(f"Rejected request: {exc}")
        return jsonify({'ok': False, 'reason': str(exc)}), 400

    @app.route('/get_output', methods=['GET'])
    def get_output():
        idx = pick_stream(request.args)
        with lock:
            val = streams[idx].next_raw()
        return jsonify({'stream': idx, 'output': fmt(val)})

    @app.route('/get_outputs', methods=['GET'])
    def get_outputs():
        idx = pick_stream(request.args)
        n = int_arg(request.args, 'n', 1)
        if not 0 <= n <= max_batch:
            raise BadRequest(f"n must be in [0, {max_batch}]")
        with lock:
            values = streams[idx].next_n(n)
        return jsonify({'stream': idx, 'outputs': [fmt(v) for v in values]})

    @app.route('/seed', methods=['GET'])
    def get_seed():
        return jsonify({
            'seed': format(seed, 'x'),
            'stream_count': stream_count,
            'partition_mode': mode,
            'output_bits': output_bits,
            'output_select': select,
        })

    @app.route('/validate', methods=['POST'])
    def validate():
        data = request.get_json(silent=True)
        if not data or 'candidate' not in data:
            return jsonify({'ok': False, 'reason': 'need candidate'}), 400
        try:
            candidate = int(data['candidate'], 16)
        except (TypeError, ValueError):
            return jsonify({'ok': False, 'reason': 'bad hex'}), 400
        idx = pick_stream(data)
        with lock:
            true = streams[idx].next_raw()
        expected = mask_output(true, output_bits, select)
        ok = (candidate & ((1 << output_bits) - 1)) == expected
        return jsonify({'ok': ok, 'expected': fmt(true)})

    return app


if __name__ == '__main__':
    logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
    app = create_app(config)
    logger.info(f"Starting oracle at http://{config.HOST}:{config.PORT} with SEED_MODE={config.SEED_MODE}")
    app.run(host=config.HOST, port=config.PORT, debug=False, threaded=True)
