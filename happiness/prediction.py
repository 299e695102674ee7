"""
Prediction Module
=================

Reloads the persisted model and scores a single hand-authored record.

The expected score is printed next to the prediction for a manual sanity
check; it is never asserted.
"""

import logging
from typing import Any, Dict, Optional

import pandas as pd

from .model import HappinessScoreModel

logger = logging.getLogger(__name__)

# Record of Italy
SAMPLE_RECORD = {
    'Population': 58133509,
    'Area': 301230,
    'PopulationDensity': 193,
    'Coastline': 2.52,
    'NetMigration': 2.07,
    'InfantMortality': 5.94,
    'GDP': 26700,
    'Literacy': 98.6,
    'Phones': 430.9,
    'Arable': 27.79,
    'Climate': 0,
    'Birthrate': 8.72,
    'Deathrate': 10.4,
}
EXPECTED_SCORE = 5.964


def predict_single(model: HappinessScoreModel, record: Dict[str, float]) -> float:
    """
    Predict the happiness score of one record.

    Args:
        model: Trained model
        record: Mapping of feature name to value

    Returns:
        Predicted happiness score
    """
    sample = pd.DataFrame([record], dtype=float)
    return float(model.predict(sample)[0])


def run_single_prediction(
    model_path: str,
    record: Optional[Dict[str, float]] = None,
    expected: Optional[float] = EXPECTED_SCORE
) -> Dict[str, Any]:
    """
    Load the model back from disk and score one record.

    Args:
        model_path: Path of the persisted model
        record: Record to score (default: SAMPLE_RECORD)
        expected: Known score to print alongside the prediction

    Returns:
        Dictionary with predicted, expected and model_path
    """
    logger.info("=" * 60)
    logger.info("STARTING SINGLE PREDICTION")
    logger.info("=" * 60)

    model = HappinessScoreModel.load(model_path)
    record = record if record is not None else SAMPLE_RECORD

    predicted = predict_single(model, record)
    logger.info(f"Predicted happiness score: {predicted:.4f}")

    return {
        'predicted': predicted,
        'expected': expected,
        'model_path': str(model_path)
    }


def print_prediction_result(result: Dict[str, Any]) -> None:
    """
    Print the single prediction table.

    Args:
        result: Result dictionary from run_single_prediction
    """
    expected = result.get('expected')
    expected_text = f"{expected:g}" if expected is not None else "N/A"

    print("Single prediction result:")
    print("-" * 30)
    print(f"{'Predicted':<14} {'Expected':<14}")
    print("-" * 30)
    print(f"{result['predicted']:<14.4f} {expected_text:<14}")
    print("-" * 30 + "\n")
