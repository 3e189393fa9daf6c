"""Sample tables for the examples, the demo app and the tests.

Every generator is deterministic for a given seed (numpy default_rng).
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

from densitycharts.utils.logging import get_logger

logger = get_logger(__name__)

PEAKS_EXTENT = 3.0


def peaks(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """The classic 'peaks' test function: two maxima and a minimum on [-3, 3]^2."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    return (
        3 * (1 - x) ** 2 * np.exp(-(x ** 2) - (y + 1) ** 2)
        - 10 * (x / 5 - x ** 3 - y ** 5) * np.exp(-(x ** 2) - y ** 2)
        - np.exp(-((x + 1) ** 2) - y ** 2) / 3
    )


def bivariate_normal(n: int = 1000, rho: float = 0.6, seed: int = 0) -> pd.DataFrame:
    """n draws of a standard bivariate normal with correlation rho, columns x and y.

    Raises:
        ValueError: If n < 1 or rho is outside (-1, 1).
    """
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    if not -1.0 < rho < 1.0:
        raise ValueError(f"rho must be in (-1, 1), got {rho}")
    rng = np.random.default_rng(seed)
    cov = [[1.0, rho], [rho, 1.0]]
    xy = rng.multivariate_normal([0.0, 0.0], cov, size=n)
    return pd.DataFrame({"x": xy[:, 0], "y": xy[:, 1]})


def gaussian_mixture(n: int = 1000, seed: int = 0) -> pd.DataFrame:
    """Two well separated 2D clusters (60/40 split), columns x, y and cluster.

    Good for comparing a 2D histogram with a kernel density estimate.
    """
    if n < 2:
        raise ValueError(f"n must be at least 2, got {n}")
    rng = np.random.default_rng(seed)
    n_a = int(round(n * 0.6))
    n_b = n - n_a
    a = rng.multivariate_normal([-1.5, -1.0], [[0.6, 0.25], [0.25, 0.5]], size=n_a)
    b = rng.multivariate_normal([2.0, 1.5], [[0.4, -0.1], [-0.1, 0.8]], size=n_b)
    df = pd.DataFrame({
        "x": np.concatenate([a[:, 0], b[:, 0]]),
        "y": np.concatenate([a[:, 1], b[:, 1]]),
        "cluster": ["a"] * n_a + ["b"] * n_b,
    })
    return df.sample(frac=1.0, random_state=seed).reset_index(drop=True)


def measurements(n: int = 300, seed: int = 0) -> pd.DataFrame:
    """Several correlated numeric measurements plus a categorical group.

    Columns: height (cm), weight (kg), age (years), reaction_ms, score, group.
    weight rises with height, reaction_ms with age, score falls with reaction_ms.
    """
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    rng = np.random.default_rng(seed)
    group = rng.choice(["control", "treated"], size=n)
    height = rng.normal(170.0, 9.0, size=n)
    weight = 0.9 * (height - 100.0) + rng.normal(0.0, 6.0, size=n)
    age = rng.uniform(18.0, 80.0, size=n)
    reaction_ms = 220.0 + 1.8 * age + rng.normal(0.0, 25.0, size=n) - np.where(group == "treated", 15.0, 0.0)
    score = 100.0 - 0.15 * reaction_ms + rng.normal(0.0, 5.0, size=n)
    return pd.DataFrame({
        "height": height,
        "weight": weight,
        "age": age,
        "reaction_ms": reaction_ms,
        "score": score,
        "group": group,
    })


def peaks_grid(n: int = 50) -> pd.DataFrame:
    """Long-form x, y, z table of peaks() on an n x n regular grid over [-3, 3]^2."""
    if n < 2:
        raise ValueError(f"n must be at least 2, got {n}")
    axis = np.linspace(-PEAKS_EXTENT, PEAKS_EXTENT, n)
    xx, yy = np.meshgrid(axis, axis)
    return pd.DataFrame({
        "x": xx.ravel(),
        "y": yy.ravel(),
        "z": peaks(xx, yy).ravel(),
    })


def scattered_peaks(n: int = 400, seed: int = 0) -> pd.DataFrame:
    """n uniformly scattered samples of peaks() over [-3, 3]^2 (needs interpolation for a surface)."""
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    rng = np.random.default_rng(seed)
    x = rng.uniform(-PEAKS_EXTENT, PEAKS_EXTENT, size=n)
    y = rng.uniform(-PEAKS_EXTENT, PEAKS_EXTENT, size=n)
    return pd.DataFrame({"x": x, "y": y, "z": peaks(x, y)})


def load_csv(path: Union[str, Path]) -> pd.DataFrame:
    """Read a user table from CSV.

    Raises:
        FileNotFoundError: If path does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No such CSV file: {path}")
    df = pd.read_csv(path)
    logger.info(f"Loaded {len(df)} rows x {len(df.columns)} columns from {path}")
    return df
