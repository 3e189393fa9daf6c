"""Tests for the sample dataset generators."""

import numpy as np
import pandas as pd
import pytest

from densitycharts import datasets


def test_bivariate_normal_correlation():
    df = datasets.bivariate_normal(n=4000, rho=0.8, seed=2)
    assert list(df.columns) == ["x", "y"]
    assert len(df) == 4000
    assert df["x"].corr(df["y"]) == pytest.approx(0.8, abs=0.05)


def test_generators_are_deterministic():
    pd.testing.assert_frame_equal(datasets.gaussian_mixture(seed=5), datasets.gaussian_mixture(seed=5))
    pd.testing.assert_frame_equal(datasets.measurements(seed=5), datasets.measurements(seed=5))
    assert not datasets.bivariate_normal(seed=1).equals(datasets.bivariate_normal(seed=2))


@pytest.mark.parametrize("rho", [-1.0, 1.0, 1.5])
def test_bivariate_normal_rejects_bad_rho(rho):
    with pytest.raises(ValueError):
        datasets.bivariate_normal(rho=rho)


def test_gaussian_mixture_split():
    df = datasets.gaussian_mixture(n=1000)
    assert (df["cluster"] == "a").sum() == 600
    assert (df["cluster"] == "b").sum() == 400


def test_measurements_columns():
    df = datasets.measurements(n=50)
    assert list(df.columns) == ["height", "weight", "age", "reaction_ms", "score", "group"]
    assert set(df["group"]) <= {"control", "treated"}


def test_peaks_grid_is_regular():
    df = datasets.peaks_grid(n=7)
    assert len(df) == 49
    assert df["x"].nunique() == 7
    assert df["y"].nunique() == 7
    assert df["x"].min() == -datasets.PEAKS_EXTENT
    assert df["x"].max() == datasets.PEAKS_EXTENT
    np.testing.assert_allclose(df["z"], datasets.peaks(df["x"], df["y"]))


def test_scattered_peaks_within_extent():
    df = datasets.scattered_peaks(n=100)
    assert len(df) == 100
    assert df["x"].abs().max() <= datasets.PEAKS_EXTENT
    assert df["y"].abs().max() <= datasets.PEAKS_EXTENT


@pytest.mark.parametrize(
    "func, n",
    [
        (datasets.bivariate_normal, 0),
        (datasets.gaussian_mixture, 1),
        (datasets.measurements, 0),
        (datasets.peaks_grid, 1),
        (datasets.scattered_peaks, 0),
    ],
)
def test_generators_reject_small_n(func, n):
    with pytest.raises(ValueError):
        func(n=n)


def test_load_csv(tmp_path):
    path = tmp_path / "table.csv"
    datasets.measurements(n=10).to_csv(path, index=False)
    df = datasets.load_csv(path)
    assert len(df) == 10
    assert "group" in df.columns


def test_load_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        datasets.load_csv(tmp_path / "missing.csv")
