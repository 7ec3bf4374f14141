"""Cycle sweep CSV and heatmap rendering."""

import pandas as pd

from loopmix128.experiments import plot_heatmap, run_experiments


def test_run_single_weyl_row():
    row = run_experiments.run_single(8, 0, 0x15)
    assert row['cycle_length'] == 256
    assert row['full_period'] == 1
    assert row['coverage'] == 1.0
    assert row['slow_bumps'] == 1


def test_increments_are_odd_and_in_range():
    incs = run_experiments.increments_for(6, 8)
    assert incs
    assert all(i % 2 == 1 and 0 < i < 64 for i in incs)


def test_sweep_writes_csv(tmp_path):
    path = tmp_path / 'out' / 'cycles.csv'
    n = run_experiments.write_csv(run_experiments.sweep([4, 6], 3), str(path))
    df = pd.read_csv(path)
    assert len(df) == n
    assert list(df.columns) == run_experiments.FIELDS
    assert set(df['bits']) == {4, 6}
    assert (df['slow_bumps'] == 1).all()
    # only the unrotated (Weyl) rows reach a full period
    assert set(df.loc[df['full_period'] == 1, 'fast_rotation']) == {0}


def test_heatmap_from_sweep(tmp_path):
    csv_path = tmp_path / 'cycles.csv'
    run_experiments.write_csv(run_experiments.sweep([4, 6], 2), str(csv_path))
    pivot = plot_heatmap.prepare_pivot(plot_heatmap.load_results(str(csv_path)))
    assert list(pivot.columns) == [4, 6]
    assert pivot.loc[0, 4] == 1.0
    assert pd.isna(pivot.loc[5, 4])

    out = tmp_path / 'plots' / 'heat.png'
    fig = plot_heatmap.plot_heatmap(pivot, out_file=str(out), show=False)
    assert out.exists()
    assert fig is not None
