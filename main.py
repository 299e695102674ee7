#!/usr/bin/env python3
"""
Happiness Score Regression - Main Pipeline
==========================================

Trains a tree ensemble regressor to predict a country's happiness score
from socioeconomic indicators and explains the result.

Phases:
    1. Training - Random 90/10 split, model training and persistence
    2. Feature importance - Permutation importance + correlation coefficients
    3. Evaluation - R² and RMS error on the held-out records
    4. Prediction - Single sample scored by the model reloaded from disk

Usage:
    # Run complete pipeline
    python main.py

    # Run specific phase
    python main.py --phase evaluate

    # Run with custom data and config
    python main.py --data data/input/input.csv --config config/config.yaml
"""

import argparse
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional, Tuple

import pandas as pd

from happiness.data_loader import load_config, load_data, validate_data, print_data_summary, LABEL_COLUMN
from happiness.preprocessing import split_train_test, print_split_summary
from happiness.model import train_model, print_model_summary, HappinessScoreModel
from happiness.importance import report_feature_importance, print_feature_importance
from happiness.evaluation import evaluate_model, print_evaluation_report
from happiness.prediction import run_single_prediction, print_prediction_result

DEFAULT_DATA_PATH = "data/input/input.csv"
DEFAULT_MODEL_PATH = "data/model.joblib"
DEFAULT_REPORTS_PATH = "reports/"


def setup_logging(level: str = "INFO", log_to_file: bool = True) -> None:
    """Configure logging for the pipeline."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_to_file:
        handlers.append(
            logging.FileHandler(f'pipeline_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log')
        )

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def _model_path(config: Dict[str, Any]) -> str:
    return config.get('output', {}).get('model_path', DEFAULT_MODEL_PATH)


def _reports_path(config: Dict[str, Any]) -> Optional[str]:
    return config.get('output', {}).get('reports_path', DEFAULT_REPORTS_PATH)


def load_and_split(
    data_path: str,
    config: Dict[str, Any]
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """
    Load the dataset and split it into train and test records.

    Args:
        data_path: Path to input CSV file
        config: Configuration dictionary

    Returns:
        Tuple of (full_df, train_df, test_df)
    """
    print("\n📊 Loading data...")
    df = load_data(data_path)
    print_data_summary(df)

    is_valid, validation_report = validate_data(
        df, label_column=config.get('data', {}).get('label_column', LABEL_COLUMN)
    )
    if not is_valid:
        print("⚠️  Data validation warnings detected. Proceeding anyway...")

    prep_config = config.get('preprocessing', {})
    train_df, test_df = split_train_test(
        df,
        test_fraction=prep_config.get('test_fraction', 0.1),
        random_state=prep_config.get('random_state')
    )
    print_split_summary(train_df, test_df)

    return df, train_df, test_df


def run_training(train_df: pd.DataFrame, config: Dict[str, Any]) -> HappinessScoreModel:
    """
    Execute Phase 1: Model Training.

    Args:
        train_df: Training records
        config: Configuration dictionary

    Returns:
        Trained model
    """
    print("\n" + "=" * 70)
    print("PHASE 1: MODEL TRAINING")
    print("=" * 70)

    model = train_model(train_df, config, save_path=_model_path(config))

    print_model_summary(model)

    return model


def run_importance(
    model: HappinessScoreModel,
    train_df: pd.DataFrame,
    config: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Execute Phase 2: Feature Importance.

    Args:
        model: Trained model
        train_df: Records the importance is measured on
        config: Configuration dictionary

    Returns:
        Feature importance result dictionary
    """
    print("\n" + "=" * 70)
    print("PHASE 2: FEATURE IMPORTANCE")
    print("=" * 70)

    result = report_feature_importance(model, train_df, config, output_dir=_reports_path(config))

    print_feature_importance(result['report'])

    return result


def run_evaluation(
    model: HappinessScoreModel,
    test_df: pd.DataFrame,
    config: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Execute Phase 3: Model Evaluation.

    Args:
        model: Trained model
        test_df: Held-out records
        config: Configuration dictionary

    Returns:
        Evaluation result dictionary
    """
    print("\n" + "=" * 70)
    print("PHASE 3: MODEL EVALUATION")
    print("=" * 70)

    result = evaluate_model(model, test_df, output_dir=_reports_path(config), show_plots=False)

    print_evaluation_report(result['metrics'])

    return result


def run_prediction(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Execute Phase 4: Single Prediction with the model reloaded from disk.

    Args:
        config: Configuration dictionary

    Returns:
        Prediction result dictionary
    """
    print("\n" + "=" * 70)
    print("PHASE 4: SINGLE PREDICTION")
    print("=" * 70)

    result = run_single_prediction(_model_path(config))

    print_prediction_result(result)

    return result


def _setup_logging_from_config(config: Dict[str, Any], log_level: Optional[str] = None) -> None:
    log_config = config.get('logging', {})
    setup_logging(
        log_level or log_config.get('level', 'INFO'),
        log_config.get('log_to_file', True)
    )


def run_full_pipeline(
    data_path: str,
    config_path: str = "config/config.yaml",
    log_level: Optional[str] = None
) -> Dict[str, Any]:
    """
    Execute the complete pipeline.

    Args:
        data_path: Path to input CSV file
        config_path: Path to configuration file
        log_level: Overrides the configured logging level

    Returns:
        Dictionary containing all phase results
    """
    print("\n" + "=" * 70)
    print("HAPPINESS SCORE PIPELINE")
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 70)

    config = load_config(config_path)
    _setup_logging_from_config(config, log_level)

    df, train_df, test_df = load_and_split(data_path, config)

    results = {
        'config': config,
        'data_shape': df.shape,
        'n_train': len(train_df),
        'n_test': len(test_df)
    }

    results['model'] = run_training(train_df, config)
    results['importance'] = run_importance(results['model'], train_df, config)
    results['evaluation'] = run_evaluation(results['model'], test_df, config)
    results['prediction'] = run_prediction(config)

    print("\n" + "=" * 70)
    print("PIPELINE COMPLETE")
    print("=" * 70)
    print(f"  • Input data: {df.shape[0]} records")
    print(f"  • Model R²: {results['evaluation']['metrics']['r2']:.4f}")
    print(f"  • Model: {_model_path(config)}")
    print(f"Completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 70 + "\n")

    return results


def run_single_phase(
    phase: str,
    data_path: str,
    config_path: str = "config/config.yaml",
    log_level: Optional[str] = None
) -> Dict[str, Any]:
    """
    Execute a single phase of the pipeline.

    Args:
        phase: Phase to run ('train', 'importance', 'evaluate', 'predict')
        data_path: Path to input CSV file
        config_path: Path to configuration file
        log_level: Overrides the configured logging level

    Returns:
        Phase result dictionary
    """
    config = load_config(config_path)
    _setup_logging_from_config(config, log_level)

    # Scoring the sample only needs the persisted model
    if phase == 'predict':
        return run_prediction(config)

    if phase not in ('train', 'importance', 'evaluate'):
        raise ValueError(f"Unknown phase: {phase}. Choose from: train, importance, evaluate, predict")

    _, train_df, test_df = load_and_split(data_path, config)
    model = run_training(train_df, config)

    if phase == 'train':
        return {'model': model}
    elif phase == 'importance':
        return run_importance(model, train_df, config)
    else:
        return run_evaluation(model, test_df, config)


def main():
    """Main entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        description="Happiness Score Regression Pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py --phase importance
  python main.py --data data/input/input.csv --config config/custom.yaml
        """
    )

    parser.add_argument(
        '--data', '-d',
        type=str,
        default=DEFAULT_DATA_PATH,
        help=f'Path to the input CSV file (default: {DEFAULT_DATA_PATH})'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        default='config/config.yaml',
        help='Path to configuration file (default: config/config.yaml)'
    )

    parser.add_argument(
        '--phase', '-p',
        type=str,
        choices=['train', 'importance', 'evaluate', 'predict', 'all'],
        default='all',
        help='Phase to run (default: all)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    args = parser.parse_args()
    log_level = 'DEBUG' if args.verbose else None

    if args.phase != 'predict' and not Path(args.data).exists():
        print(f"Error: Data file not found: {args.data}")
        print("\nPlace the country indicators CSV at the specified location.")
        print("Expected format: CSV with header row; Code, Name, _, HappinessScore, then the indicator columns")
        sys.exit(1)

    if not Path(args.config).exists():
        print(f"Error: Config file not found: {args.config}")
        sys.exit(1)

    try:
        if args.phase == 'all':
            run_full_pipeline(args.data, args.config, log_level)
        else:
            run_single_phase(args.phase, args.data, args.config, log_level)

        return 0

    except Exception as e:
        logging.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\n❌ Pipeline failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
