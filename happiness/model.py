"""
Model Training Module
=====================

Handles model training using a tree ensemble regressor behind the feature
engineering pipeline.

Features:
    - RandomForestRegressor (default) or HistGradientBoostingRegressor
    - Mean imputation and feature concatenation ahead of the regressor
    - Direct access to the fitted regressor for feature importance
    - Model persistence (save/load)
    - Training progress logging
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional, List, Sequence
from datetime import datetime

import numpy as np
import pandas as pd
import joblib
from sklearn.ensemble import HistGradientBoostingRegressor, RandomForestRegressor
from sklearn.pipeline import Pipeline

from .data_loader import FEATURE_COLUMNS, LABEL_COLUMN
from .preprocessing import build_feature_pipeline

logger = logging.getLogger(__name__)

MODEL_TYPES = ("random_forest", "hist_gradient_boosting")


class HappinessScoreModel:
    """
    Happiness score regression model.

    Wraps a sklearn Pipeline (imputation -> concatenation -> regressor) and
    keeps a handle on the final regression stage.
    """

    def __init__(
        self,
        model_type: str = "random_forest",
        n_estimators: int = 100,
        max_leaf_nodes: Optional[int] = 20,
        min_samples_leaf: int = 10,
        max_iter: int = 100,
        learning_rate: float = 0.1,
        random_state: Optional[int] = None,
        n_jobs: int = 1,
        feature_columns: Optional[Sequence[str]] = None,
        label_column: str = LABEL_COLUMN,
        impute_columns: Optional[Sequence[str]] = ("Population",)
    ):
        """
        Initialize the model with hyperparameters.

        Args:
            model_type: 'random_forest' or 'hist_gradient_boosting'
            n_estimators: Number of trees (random forest)
            max_leaf_nodes: Maximum leaves per tree
            min_samples_leaf: Minimum samples required in a leaf
            max_iter: Number of boosting iterations (gradient boosting)
            learning_rate: Learning rate (gradient boosting)
            random_state: Random seed (None for non-deterministic training)
            n_jobs: Number of parallel jobs (random forest)
            feature_columns: Ordered feature names (default: FEATURE_COLUMNS)
            label_column: Name of the label column
            impute_columns: Features whose missing values are mean-imputed
        """
        if model_type not in MODEL_TYPES:
            raise ValueError(f"Unknown model type: {model_type}. Choose from: {MODEL_TYPES}")

        self.model_type = model_type
        self.n_estimators = n_estimators
        self.max_leaf_nodes = max_leaf_nodes
        self.min_samples_leaf = min_samples_leaf
        self.max_iter = max_iter
        self.learning_rate = learning_rate
        self.random_state = random_state
        self.n_jobs = n_jobs
        self.feature_columns: List[str] = list(feature_columns or FEATURE_COLUMNS)
        self.label_column = label_column
        self.impute_columns: List[str] = list(impute_columns or [])

        self.pipeline: Optional[Pipeline] = None
        self.training_info: Dict[str, Any] = {}
        self._is_fitted = False

    def _create_regressor(self):
        """Create the final regression stage."""
        if self.model_type == "hist_gradient_boosting":
            return HistGradientBoostingRegressor(
                max_iter=self.max_iter,
                learning_rate=self.learning_rate,
                max_leaf_nodes=self.max_leaf_nodes,
                min_samples_leaf=self.min_samples_leaf,
                random_state=self.random_state,
                verbose=0
            )
        return RandomForestRegressor(
            n_estimators=self.n_estimators,
            max_leaf_nodes=self.max_leaf_nodes,
            min_samples_leaf=self.min_samples_leaf,
            random_state=self.random_state,
            n_jobs=self.n_jobs
        )

    def _hyperparameters(self) -> Dict[str, Any]:
        return {
            'model_type': self.model_type,
            'n_estimators': self.n_estimators,
            'max_leaf_nodes': self.max_leaf_nodes,
            'min_samples_leaf': self.min_samples_leaf,
            'max_iter': self.max_iter,
            'learning_rate': self.learning_rate,
            'random_state': self.random_state,
            'n_jobs': self.n_jobs
        }

    @property
    def regressor(self):
        """The fitted final regression stage."""
        if not self._is_fitted:
            raise ValueError("Model must be trained first.")
        return self.pipeline.named_steps['regressor']

    def fit(self, df: pd.DataFrame) -> 'HappinessScoreModel':
        """
        Train the model on the provided records.

        Args:
            df: DataFrame holding the feature columns and the label column

        Returns:
            Self for method chaining
        """
        start_time = datetime.now()

        logger.info("=" * 60)
        logger.info("STARTING MODEL TRAINING")
        logger.info("=" * 60)

        labelled = df[df[self.label_column].notna()]
        dropped = len(df) - len(labelled)
        if dropped:
            logger.warning(f"Dropped {dropped} records without {self.label_column}")

        X = self._select_features(labelled)
        y = labelled[self.label_column].to_numpy(dtype=float)

        logger.info(f"Training data shape: X={X.shape}, y={y.shape}")
        logger.info(f"Hyperparameters:")
        for name, value in self._hyperparameters().items():
            logger.info(f"  - {name}: {value}")

        steps = build_feature_pipeline(self.feature_columns, self.impute_columns)
        steps.append(('regressor', self._create_regressor()))
        self.pipeline = Pipeline(steps)
        self.pipeline.fit(X, y)

        end_time = datetime.now()
        training_duration = (end_time - start_time).total_seconds()

        self.training_info = {
            'training_duration_seconds': training_duration,
            'n_samples': int(X.shape[0]),
            'n_features': int(X.shape[1]),
            'trained_at': end_time.isoformat(),
            'hyperparameters': self._hyperparameters()
        }

        regressor = self.pipeline.named_steps['regressor']
        if hasattr(regressor, 'n_iter_'):
            self.training_info['actual_iterations'] = int(regressor.n_iter_)
            logger.info(f"Actual boosting iterations: {regressor.n_iter_}")

        self._is_fitted = True

        logger.info("=" * 60)
        logger.info(f"MODEL TRAINING COMPLETE in {training_duration:.2f} seconds")
        logger.info("=" * 60)

        return self

    def _select_features(self, df: pd.DataFrame) -> pd.DataFrame:
        missing = [c for c in self.feature_columns if c not in df.columns]
        if missing:
            raise KeyError(f"Missing feature columns: {missing}")
        return df[self.feature_columns]

    def predict(self, df: pd.DataFrame) -> np.ndarray:
        """
        Predict happiness scores.

        Args:
            df: DataFrame holding the feature columns

        Returns:
            Predictions array of shape (n_samples,)
        """
        if not self._is_fitted:
            raise ValueError("Model must be trained before prediction. Call fit() first.")

        return self.pipeline.predict(self._select_features(df))

    def transform_features(self, df: pd.DataFrame) -> np.ndarray:
        """
        Run the feature engineering steps without the regressor.

        Args:
            df: DataFrame holding the feature columns

        Returns:
            Feature matrix of shape (n_samples, len(feature_columns)),
            column j holding feature_columns[j]
        """
        if not self._is_fitted:
            raise ValueError("Model must be trained first.")

        return self.pipeline[:-1].transform(self._select_features(df))

    def save(self, filepath: str) -> None:
        """
        Save the trained model to disk.

        Args:
            filepath: Path to save the model
        """
        if not self._is_fitted:
            raise ValueError("Cannot save untrained model.")

        state = {
            'pipeline': self.pipeline,
            'hyperparameters': self._hyperparameters(),
            'feature_columns': self.feature_columns,
            'label_column': self.label_column,
            'impute_columns': self.impute_columns,
            'training_info': self.training_info,
            '_is_fitted': self._is_fitted
        }

        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(state, filepath)
        logger.info(f"Model saved to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> 'HappinessScoreModel':
        """
        Load a trained model from disk.

        Args:
            filepath: Path to the saved model

        Returns:
            Loaded HappinessScoreModel instance
        """
        if not Path(filepath).exists():
            raise FileNotFoundError(f"Model file not found: {filepath}")

        state = joblib.load(filepath)

        model = cls(
            feature_columns=state['feature_columns'],
            label_column=state['label_column'],
            impute_columns=state['impute_columns'],
            **state['hyperparameters']
        )
        model.pipeline = state['pipeline']
        model.training_info = state['training_info']
        model._is_fitted = state['_is_fitted']

        logger.info(f"Model loaded from {filepath}")
        return model


def train_model(
    train_df: pd.DataFrame,
    config: Dict[str, Any],
    save_path: Optional[str] = None
) -> HappinessScoreModel:
    """
    Train a model using configuration parameters.

    Args:
        train_df: Training records
        config: Configuration dictionary
        save_path: Path to save the trained model (optional)

    Returns:
        Trained HappinessScoreModel
    """
    model_config = config.get('model', {})
    prep_config = config.get('preprocessing', {})

    model = HappinessScoreModel(
        model_type=model_config.get('type', 'random_forest'),
        n_estimators=model_config.get('n_estimators', 100),
        max_leaf_nodes=model_config.get('max_leaf_nodes', 20),
        min_samples_leaf=model_config.get('min_samples_leaf', 10),
        max_iter=model_config.get('max_iter', 100),
        learning_rate=model_config.get('learning_rate', 0.1),
        random_state=model_config.get('random_state'),
        n_jobs=model_config.get('n_jobs', 1),
        label_column=config.get('data', {}).get('label_column', LABEL_COLUMN),
        impute_columns=prep_config.get('impute_mean', ['Population'])
    )

    model.fit(train_df)

    if save_path:
        model.save(save_path)
        print(f"The model is saved to {save_path}\n")

    return model


def print_model_summary(model: HappinessScoreModel) -> None:
    """
    Print a summary of the trained model.

    Args:
        model: Trained model instance
    """
    regressor_name = type(model.regressor).__name__

    print("\n" + "=" * 50)
    print("MODEL SUMMARY")
    print("=" * 50)
    print(f"Model Type: Pipeline({' -> '.join(model.pipeline.named_steps)}) [{regressor_name}]")
    print(f"Label: {model.label_column}")
    print(f"Number of input features: {len(model.feature_columns)}")
    print(f"Mean-imputed features: {', '.join(model.impute_columns) or 'none'}")
    print(f"\nHyperparameters:")
    if model.model_type == "random_forest":
        print(f"  - n_estimators: {model.n_estimators}")
    else:
        print(f"  - max_iter: {model.max_iter}")
        print(f"  - learning_rate: {model.learning_rate}")
    print(f"  - max_leaf_nodes: {model.max_leaf_nodes}")
    print(f"  - min_samples_leaf: {model.min_samples_leaf}")

    if model.training_info:
        print(f"\nTraining Info:")
        print(f"  - Duration: {model.training_info.get('training_duration_seconds', 0.0):.2f}s")
        print(f"  - Samples: {model.training_info.get('n_samples', 'N/A')}")
        if 'actual_iterations' in model.training_info:
            print(f"  - Actual iterations: {model.training_info['actual_iterations']}")

    print("=" * 50 + "\n")
