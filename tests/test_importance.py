"""
Test Suite for Feature Importance Module
=======================================
"""

import pytest
import numpy as np
import pandas as pd

from happiness.data_loader import FEATURE_COLUMNS, LABEL_COLUMN
from happiness.importance import (
    calculate_feature_correlation, calculate_feature_importance,
    report_feature_importance, print_feature_importance
)
from happiness.model import HappinessScoreModel
from happiness.stats import compute_correlation_coefficient


@pytest.fixture
def fitted(countries):
    return HappinessScoreModel(n_estimators=30, random_state=0).fit(countries)


class TestFeatureCorrelation:
    """Tests for calculate_feature_correlation."""

    def test_skips_missing_pairs(self, countries):
        corr = calculate_feature_correlation(countries, 'Population', LABEL_COLUMN)

        present = countries.dropna(subset=['Population'])
        expected = compute_correlation_coefficient(present['Population'], present[LABEL_COLUMN])
        assert corr == pytest.approx(expected)
        assert not np.isnan(corr)

    def test_strong_driver(self, countries):
        assert calculate_feature_correlation(countries, 'GDP', LABEL_COLUMN) > 0.9


class TestCalculateFeatureImportance:
    """Tests for calculate_feature_importance."""

    @pytest.fixture
    def report(self, fitted, countries):
        return calculate_feature_importance(fitted, countries, n_repeats=3, random_state=0)

    def test_columns(self, report):
        assert list(report.columns) == ['feature', 'r2_mean', 'r2_std', 'correlation']
        assert sorted(report['feature']) == sorted(FEATURE_COLUMNS)

    def test_sorted_descending(self, report):
        values = report['r2_mean'].tolist()
        assert values == sorted(values, reverse=True)
        assert (report['r2_mean'] >= 0).all()

    def test_dominant_feature_first(self, report):
        assert report.loc[0, 'feature'] == 'GDP'

    def test_correlation_is_model_independent(self, report, countries):
        gdp = report.set_index('feature').loc['GDP', 'correlation']
        expected = compute_correlation_coefficient(countries['GDP'], countries[LABEL_COLUMN])
        assert gdp == pytest.approx(expected)

    def test_missing_values_outside_imputed_columns(self, countries):
        countries.loc[countries.index[1:6], 'Literacy'] = np.nan
        model = HappinessScoreModel(n_estimators=20, random_state=0).fit(countries)

        report = calculate_feature_importance(model, countries, n_repeats=2, random_state=0)

        assert len(report) == len(FEATURE_COLUMNS)
        assert report['r2_mean'].notna().all()


class TestReportFeatureImportance:
    """Tests for report output."""

    def test_writes_outputs(self, fitted, countries, tmp_path):
        config = {'importance': {'n_repeats': 2, 'random_state': 0}}
        result = report_feature_importance(fitted, countries, config, output_dir=str(tmp_path))

        saved = pd.read_csv(result['csv_path'])
        assert len(saved) == len(FEATURE_COLUMNS)
        assert (tmp_path / "figures" / "feature_importance.png").exists()

    def test_without_output_dir(self, fitted, countries):
        result = report_feature_importance(fitted, countries, {'importance': {'n_repeats': 1}})

        assert result['csv_path'] is None
        assert len(result['report']) == len(FEATURE_COLUMNS)

    def test_print(self, capsys):
        report = pd.DataFrame([
            {'feature': 'GDP', 'r2_mean': 0.912345, 'r2_std': 0.01, 'correlation': 0.876},
            {'feature': 'Area', 'r2_mean': 0.0012345, 'r2_std': 0.0, 'correlation': -0.051},
        ])
        print_feature_importance(report)
        out = capsys.readouterr().out

        assert "R Squared Mean" in out
        assert "0.9123" in out
        assert "0.88" in out
        assert "-0.05" in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
