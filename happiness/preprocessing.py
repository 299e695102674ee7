"""
Data Preprocessing Module
=========================

Handles train/test splitting and the feature engineering steps that run
ahead of the regressor.

Functions:
    - split_train_test: Randomized train/test split of the records
    - concatenate_features: Assemble the positional feature matrix
    - build_feature_pipeline: Mean imputation + feature concatenation steps
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.impute import SimpleImputer
from sklearn.model_selection import train_test_split
from sklearn.preprocessing import FunctionTransformer

logger = logging.getLogger(__name__)


def split_train_test(
    df: pd.DataFrame,
    test_fraction: float = 0.1,
    random_state: Optional[int] = None
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Split records randomly into train and test sets.

    Unlike time series data, country records are independent and are
    shuffled before splitting. Pass random_state=None for a split that
    differs between runs.

    Args:
        df: Full dataset
        test_fraction: Fraction of records held out for testing
        random_state: Random seed (None for non-deterministic split)

    Returns:
        Tuple of (train_df, test_df)
    """
    if not 0.0 < test_fraction < 1.0:
        raise ValueError(f"test_fraction must be between 0 and 1, got {test_fraction}")

    train_df, test_df = train_test_split(
        df,
        test_size=test_fraction,
        random_state=random_state,
        shuffle=True
    )

    logger.info(
        f"Train/Test split: {len(train_df)} train samples, {len(test_df)} test samples"
    )

    return train_df, test_df


def concatenate_features(X: pd.DataFrame, feature_columns: Sequence[str]) -> np.ndarray:
    """
    Concatenate feature columns into a single numeric matrix.

    Column j of the result always holds feature_columns[j].

    Args:
        X: DataFrame holding at least the feature columns
        feature_columns: Ordered feature names

    Returns:
        Array of shape (n_samples, len(feature_columns))
    """
    return X[list(feature_columns)].to_numpy(dtype=float)


def build_feature_pipeline(
    feature_columns: Sequence[str],
    impute_columns: Optional[Sequence[str]] = None
) -> List[Tuple[str, Any]]:
    """
    Build the feature engineering steps of the training pipeline.

    Args:
        feature_columns: Ordered feature names
        impute_columns: Columns whose missing values are replaced by the
            column mean (empty or None disables imputation)

    Returns:
        List of (name, transformer) steps for a sklearn Pipeline
    """
    steps = []

    impute_columns = list(impute_columns or [])
    unknown = [c for c in impute_columns if c not in feature_columns]
    if unknown:
        raise ValueError(f"Imputation columns are not features: {unknown}")

    if impute_columns:
        imputer = ColumnTransformer(
            [("mean", SimpleImputer(strategy="mean", keep_empty_features=True), impute_columns)],
            remainder="passthrough",
            verbose_feature_names_out=False
        )
        imputer.set_output(transform="pandas")
        steps.append(("impute", imputer))
        logger.info(f"Mean imputation enabled for: {impute_columns}")

    steps.append((
        "concatenate",
        FunctionTransformer(
            concatenate_features,
            kw_args={"feature_columns": list(feature_columns)}
        )
    ))

    return steps


def print_split_summary(train_df: pd.DataFrame, test_df: pd.DataFrame) -> None:
    """Print a summary of the train/test split."""
    total = len(train_df) + len(test_df)
    print("\n" + "=" * 50)
    print("SPLIT SUMMARY")
    print("=" * 50)
    print(f"Training samples: {len(train_df)}")
    print(f"Test samples: {len(test_df)}")
    if total:
        print(f"Test fraction: {len(test_df) / total:.2f}")
    print("=" * 50 + "\n")
