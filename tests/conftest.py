"""
Shared fixtures: synthetic country indicator data.
"""

import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from happiness.data_loader import FEATURE_COLUMNS

RAW_COLUMNS = [
    "Code", "Name", "Region", "HappinessScore", "Population", "Area",
    "PopulationDensity", "Coastline", "NetMigration", "InfantMortality", "GDP",
    "Literacy", "Phones", "Arable", "Crops", "Other", "Climate", "Birthrate",
    "Deathrate", "Agriculture", "Industry", "Service",
]


def make_raw_countries(n_samples: int = 120, seed: int = 42) -> pd.DataFrame:
    """Raw rows laid out like the input CSV; the score is driven by GDP."""
    rng = np.random.RandomState(seed)

    gdp = rng.uniform(500, 50000, n_samples)
    literacy = rng.uniform(30, 100, n_samples)
    population = rng.uniform(1e5, 1e8, n_samples)
    population[::10] = np.nan

    df = pd.DataFrame({
        "Code": [f"C{i:03d}" for i in range(n_samples)],
        "Name": [f"Country {i}" for i in range(n_samples)],
        "Region": rng.choice(["EUROPE", "ASIA", "AFRICA"], n_samples),
        "HappinessScore": 3.0 + 3.0 * gdp / 50000 + 0.5 * literacy / 100
                          + rng.normal(0, 0.05, n_samples),
        "Population": population,
        "Area": rng.uniform(1e3, 1e7, n_samples),
        "PopulationDensity": rng.uniform(1, 1000, n_samples),
        "Coastline": rng.uniform(0, 50, n_samples),
        "NetMigration": rng.normal(0, 3, n_samples),
        "InfantMortality": rng.uniform(2, 150, n_samples),
        "GDP": gdp,
        "Literacy": literacy,
        "Phones": rng.uniform(1, 900, n_samples),
        "Arable": rng.uniform(0, 60, n_samples),
        "Crops": rng.uniform(0, 10, n_samples),
        "Other": rng.uniform(30, 100, n_samples),
        "Climate": rng.choice([0, 1, 2, 3], n_samples).astype(float),
        "Birthrate": rng.uniform(7, 50, n_samples),
        "Deathrate": rng.uniform(2, 30, n_samples),
        "Agriculture": rng.uniform(0, 0.8, n_samples),
        "Industry": rng.uniform(0, 0.8, n_samples),
        "Service": rng.uniform(0, 0.8, n_samples),
    })
    return df[RAW_COLUMNS]


@pytest.fixture
def raw_countries():
    """Raw country rows in file column order."""
    return make_raw_countries()


@pytest.fixture
def countries(raw_countries):
    """Country records in the loaded schema."""
    return raw_countries[["Code", "Name", "HappinessScore"] + FEATURE_COLUMNS].copy()


@pytest.fixture
def countries_csv(tmp_path, raw_countries):
    """Country records written as an input CSV."""
    path = tmp_path / "input.csv"
    raw_countries.to_csv(path, index=False)
    return path
