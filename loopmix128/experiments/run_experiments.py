# loopmix128/experiments/run_experiments.py
# Sweep surrogate widths and fast_loop rotations, measure the fast_loop cycle
# through zero and how many slow_loop advances it triggers, save as CSV.

import argparse
import csv
import os
import time

from loopmix128.analysis import fast_cycle_length, slow_bumps
from loopmix128.rng import GR, LoopParams, State

FIELDS = ['bits', 'fast_rotation', 'increment', 'cycle_length', 'coverage', 'full_period', 'slow_bumps']


def increments_for(bits, count):
    # odd increments spread over the width, starting from GR truncated
    mask = (1 << bits) - 1
    start = (GR & mask) | 1
    return sorted({(start + 2 * i * 0x9d) & mask | 1 for i in range(count)})


def run_single(bits, fast_rotation, increment):
    params = LoopParams(bits, increment, 59 % bits, fast_rotation)
    length = fast_cycle_length(params, 0)
    bumps, _ = slow_bumps(State(0, 1, 1), length, params)
    return {
        'bits': bits,
        'fast_rotation': fast_rotation,
        'increment': increment,
        'cycle_length': length,
        'coverage': length / (1 << bits),
        'full_period': int(length == 1 << bits),
        'slow_bumps': bumps,
    }


def sweep(bits_list, increments_per_width):
    for bits in bits_list:
        for rot in range(bits):
            for inc in increments_for(bits, increments_per_width):
                yield run_single(bits, rot, inc)


def write_csv(rows, csv_path):
    os.makedirs(os.path.dirname(csv_path) or '.', exist_ok=True)
    n = 0
    with open(csv_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
            n += 1
    return n


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--bits_list', type=str, default='4,6,8,10,12', help='comma list')
    parser.add_argument('--increments', type=int, default=8, help='odd increments per width')
    parser.add_argument('--out_dir', type=str, default='results')
    args = parser.parse_args()

    bits_list = [int(x) for x in args.bits_list.split(',')]
    csv_path = os.path.join(args.out_dir, f'cycles_{int(time.time())}.csv')
    n = write_csv(sweep(bits_list, args.increments), csv_path)
    print(f"Experiments complete: {n} rows saved at:", csv_path)
