# loopmix128/replay.py
# Client that pulls outputs from the oracle, replays the same stream locally
# from the advertised seed, and checks the oracle's next output against the
# local prediction.

import argparse
import logging
import time

import requests

from loopmix128.rng import LoopMix128
from loopmix128.streams import init_streams
from loopmix128.oracle.app import hex_width, mask_output

ORACLE = 'http://127.0.0.1:5000'

logger = logging.getLogger('replay')


def fetch_seed_info(oracle=ORACLE):
    r = requests.get(oracle + '/seed', timeout=5)
    r.raise_for_status()
    return r.json()


def query_oracle(n, stream=0, oracle=ORACLE):
    r = requests.get(oracle + '/get_outputs', params={'stream': stream, 'n': n}, timeout=5)
    r.raise_for_status()
    return [int(h, 16) for h in r.json()['outputs']]


def local_stream(info, stream):
    states = init_streams(int(info['seed'], 16), info['stream_count'], info['partition_mode'])
    return LoopMix128(state=states[stream])


def replay(info, stream, observed):
    """Return ``(matches, generator)``: how many observed outputs the local
    replay reproduced before the first mismatch, and the generator positioned
    just after them."""
    gen = local_stream(info, stream)
    matches = 0
    for obs in observed:
        predicted = mask_output(gen.next_raw(), info['output_bits'], info['output_select'])
        if predicted != obs:
            break
        matches += 1
    return matches, gen


def predict_and_validate(gen, info, stream, oracle=ORACLE):
    bits = info['output_bits']
    predicted = mask_output(gen.next_raw(), bits, info['output_select'])
    cand_hex = format(predicted, '0{}x'.format(hex_width(bits)))
    resp = requests.post(oracle + '/validate', json={'candidate': cand_hex, 'stream': stream}, timeout=5)
    return cand_hex, resp.json()


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument('--samples', type=int, default=8, help='number of outputs to collect')
    parser.add_argument('--stream', type=int, default=0, help='stream index to replay')
    parser.add_argument('--oracle', default=ORACLE)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    t0 = time.time()
    info = fetch_seed_info(args.oracle)
    logger.info(f"[replay] seed={info['seed']} streams={info['stream_count']} mode={info['partition_mode']}")
    obs = query_oracle(args.samples, args.stream, args.oracle)
    matches, gen = replay(info, args.stream, obs)
    if matches != len(obs):
        # the oracle stream was advanced by someone else before we read it
        logger.error(f"[replay] local stream diverged after {matches} of {len(obs)} outputs")
        return 1
    logger.info(f"[replay] reproduced {matches} outputs of stream {args.stream}")
    cand_hex, result = predict_and_validate(gen, info, args.stream, args.oracle)
    logger.info(f"[replay] predicted next {cand_hex}, validate response: {result}")
    logger.info(f"[replay] Done in {time.time() - t0:.2f}s")
    return 0 if result.get('ok') else 1


if __name__ == '__main__':
    raise SystemExit(main())
