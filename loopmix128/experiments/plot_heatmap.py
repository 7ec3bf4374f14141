# loopmix128/experiments/plot_heatmap.py
"""
Heatmap of fast_loop zero-cycle coverage: x axis = word width (bits),
y axis = fast_loop rotation, cell = mean of cycle_length / 2**bits over the
swept increments. A cell of 1.00 means every increment gave a full period.

CSV expected columns (as written by run_experiments.py): bits, fast_rotation, coverage

Usage:
    python -m loopmix128.experiments.plot_heatmap --csv results/cycles_XXXX.csv --out heatmap.png
"""

import argparse
import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

REQUIRED = {'bits', 'fast_rotation', 'coverage'}


def prepare_pivot(df):
    agg = df.groupby(['fast_rotation', 'bits'], as_index=False)['coverage'].mean()
    pivot = agg.pivot(index='fast_rotation', columns='bits', values='coverage')
    return pivot.sort_index(ascending=True)


def plot_heatmap(pivot, title='fast_loop zero-cycle coverage', out_file=None, annotate=True, show=True):
    rows = pivot.index.tolist()
    cols = pivot.columns.tolist()
    data = pivot.values  # NaN where a rotation does not exist at that width

    fig, ax = plt.subplots(figsize=(0.8 * len(cols) + 3, 0.4 * len(rows) + 2))
    im = ax.imshow(data, aspect='auto', interpolation='nearest', vmin=0.0, vmax=1.0)

    ax.set_xticks(np.arange(len(cols)))
    ax.set_yticks(np.arange(len(rows)))
    ax.set_xticklabels(cols)
    ax.set_yticklabels(rows)
    ax.set_xlabel('Word width (bits)')
    ax.set_ylabel('fast_loop rotation')
    ax.set_title(title)

    if annotate:
        for i in range(len(rows)):
            for j in range(len(cols)):
                val = data[i, j]
                if np.isnan(val):
                    ax.text(j, i, 'N/A', ha='center', va='center', color='gray', fontsize=8)
                else:
                    ax.text(j, i, f"{val:.2f}", ha='center', va='center',
                            color='white' if val < 0.5 else 'black', fontsize=8)

    cbar = fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    cbar.set_label('Mean coverage (0-1)')

    fig.tight_layout()
    if out_file:
        os.makedirs(os.path.dirname(out_file) or '.', exist_ok=True)
        fig.savefig(out_file, dpi=150)
        print(f"Heatmap saved to {out_file}")
    if show:
        plt.show()
    return fig


def load_results(csv_path):
    df = pd.read_csv(csv_path)
    if not REQUIRED.issubset(set(df.columns)):
        raise SystemExit(f"CSV must contain columns: {REQUIRED}. Found: {df.columns.tolist()}")
    df['bits'] = df['bits'].astype(int)
    df['fast_rotation'] = df['fast_rotation'].astype(int)
    df['coverage'] = df['coverage'].astype(float)
    return df


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument('--csv', required=True, help='Path to cycles CSV')
    parser.add_argument('--out', default='results/heatmap_coverage.png', help='Output PNG path')
    parser.add_argument('--title', default='fast_loop zero-cycle coverage', help='Plot title')
    args = parser.parse_args(argv)

    pivot = prepare_pivot(load_results(args.csv))
    plot_heatmap(pivot, title=args.title, out_file=args.out, annotate=True)


if __name__ == '__main__':
    main()
