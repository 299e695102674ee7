"""
Test Suite for Preprocessing Module
=====================================

Tests for the train/test split and the feature pipeline steps.
"""

import pytest
import numpy as np
import pandas as pd
from sklearn.pipeline import Pipeline

from happiness.data_loader import FEATURE_COLUMNS
from happiness.preprocessing import (
    split_train_test, concatenate_features, build_feature_pipeline
)


class TestSplitTrainTest:
    """Tests for split_train_test."""

    @pytest.fixture
    def records(self):
        return pd.DataFrame({
            'Code': [f"C{i}" for i in range(100)],
            'value': np.arange(100, dtype=float)
        })

    def test_test_size(self, records):
        train, test = split_train_test(records, test_fraction=0.1, random_state=0)

        assert len(test) == 10
        assert len(train) == 90

    def test_partition(self, records):
        train, test = split_train_test(records, test_fraction=0.1, random_state=0)

        assert set(train.index).isdisjoint(test.index)
        assert len(train) + len(test) == len(records)
        assert set(train.index) | set(test.index) == set(records.index)

    def test_fixed_seed_is_reproducible(self, records):
        _, test_a = split_train_test(records, random_state=3)
        _, test_b = split_train_test(records, random_state=3)

        assert list(test_a.index) == list(test_b.index)

    def test_records_are_shuffled(self, records):
        _, test = split_train_test(records, random_state=0)
        assert list(test.index) != list(range(90, 100))

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.1, 1.5])
    def test_invalid_fraction(self, records, fraction):
        with pytest.raises(ValueError, match="test_fraction"):
            split_train_test(records, test_fraction=fraction)


class TestFeaturePipeline:
    """Tests for the imputation and concatenation steps."""

    @pytest.fixture
    def features(self):
        rng = np.random.RandomState(0)
        df = pd.DataFrame(rng.rand(20, len(FEATURE_COLUMNS)) * 100, columns=FEATURE_COLUMNS)
        df.loc[[2, 5], 'Population'] = np.nan
        return df

    def test_concatenate_order(self, features):
        shuffled = features[list(reversed(FEATURE_COLUMNS))]
        matrix = concatenate_features(shuffled, FEATURE_COLUMNS)

        assert matrix.shape == (20, len(FEATURE_COLUMNS))
        np.testing.assert_array_equal(matrix[:, 6], features['GDP'].values)

    def test_steps(self):
        steps = build_feature_pipeline(FEATURE_COLUMNS, ['Population'])
        assert [name for name, _ in steps] == ['impute', 'concatenate']

    def test_imputation_disabled(self):
        steps = build_feature_pipeline(FEATURE_COLUMNS, [])
        assert [name for name, _ in steps] == ['concatenate']

    def test_mean_imputation(self, features):
        pipeline = Pipeline(build_feature_pipeline(FEATURE_COLUMNS, ['Population']))
        matrix = pipeline.fit_transform(features)

        expected = features['Population'].mean()
        assert not np.isnan(matrix).any()
        assert matrix[2, 0] == pytest.approx(expected)
        assert matrix[5, 0] == pytest.approx(expected)
        # Positions follow the feature list after imputation
        np.testing.assert_array_almost_equal(matrix[:, 1:], features[FEATURE_COLUMNS[1:]].values)

    def test_unknown_imputation_column(self):
        with pytest.raises(ValueError, match="not features"):
            build_feature_pipeline(FEATURE_COLUMNS, ['HappinessScore'])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
