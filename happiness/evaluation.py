"""
Model Evaluation Module
=======================

Provides evaluation metrics and visualizations for model performance on
held-out records.

Features:
    - R², RMSE and MAE calculation
    - Actual vs Predicted plot
    - Residual analysis
    - Evaluation report generation
"""

import logging
import json
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from sklearn.metrics import mean_squared_error, mean_absolute_error, r2_score

from .model import HappinessScoreModel

logger = logging.getLogger(__name__)


def calculate_metrics(y_true: np.ndarray, y_pred: np.ndarray) -> Dict[str, Any]:
    """
    Calculate regression metrics.

    Args:
        y_true: Ground truth values
        y_pred: Predicted values

    Returns:
        Dictionary with r2, rmse, mae and n_samples
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    return {
        'r2': float(r2_score(y_true, y_pred)),
        'rmse': float(np.sqrt(mean_squared_error(y_true, y_pred))),
        'mae': float(mean_absolute_error(y_true, y_pred)),
        'n_samples': int(len(y_true))
    }


def plot_actual_vs_predicted(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    figsize: Tuple[int, int] = (7, 6),
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Create an actual vs predicted scatter plot.

    Args:
        y_true: Ground truth values
        y_pred: Predicted values
        figsize: Figure size
        save_path: Path to save the figure

    Returns:
        Matplotlib Figure object
    """
    fig, ax = plt.subplots(figsize=figsize)

    ax.scatter(y_true, y_pred, alpha=0.6, s=30)

    # Perfect prediction line
    min_val = min(np.min(y_true), np.min(y_pred))
    max_val = max(np.max(y_true), np.max(y_pred))
    ax.plot([min_val, max_val], [min_val, max_val], 'r--', linewidth=2, label='Perfect')

    r2 = r2_score(y_true, y_pred)
    rmse = np.sqrt(mean_squared_error(y_true, y_pred))

    ax.set_xlabel('Actual happiness score')
    ax.set_ylabel('Predicted happiness score')
    ax.set_title(f'Actual vs Predicted\nR²={r2:.4f}, RMSE={rmse:.4f}', fontsize=12, fontweight='bold')
    ax.legend(loc='upper left', fontsize=8)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Actual vs Predicted plot saved to {save_path}")

    return fig


def plot_residuals(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    figsize: Tuple[int, int] = (8, 5),
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Create a residual distribution plot for model diagnostics.

    Args:
        y_true: Ground truth values
        y_pred: Predicted values
        figsize: Figure size
        save_path: Path to save the figure

    Returns:
        Matplotlib Figure object
    """
    residuals = np.asarray(y_true) - np.asarray(y_pred)

    fig, ax = plt.subplots(figsize=figsize)

    sns.histplot(residuals, kde=len(residuals) > 1, ax=ax, bins=20, alpha=0.7)

    ax.axvline(0, color='red', linestyle='--', linewidth=2, label='Zero')
    ax.axvline(np.mean(residuals), color='green', linestyle='--',
               linewidth=2, label=f'Mean: {np.mean(residuals):.4f}')

    ax.set_xlabel('Residual (Actual - Predicted)')
    ax.set_ylabel('Frequency')
    ax.set_title(f'Residual Analysis (Std: {np.std(residuals):.4f})', fontsize=12, fontweight='bold')
    ax.legend(fontsize=8)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Residuals plot saved to {save_path}")

    return fig


def evaluate_model(
    model: HappinessScoreModel,
    test_df: pd.DataFrame,
    output_dir: Optional[str] = None,
    show_plots: bool = False
) -> Dict[str, Any]:
    """
    Run the model over held-out records and report its accuracy.

    Args:
        model: Trained model
        test_df: Held-out records with labels
        output_dir: Directory for metrics JSON and figures (optional)
        show_plots: Whether to display plots interactively

    Returns:
        Dictionary containing metrics, predictions and file paths
    """
    logger.info("=" * 60)
    logger.info("STARTING MODEL EVALUATION")
    logger.info("=" * 60)

    labelled = test_df[test_df[model.label_column].notna()]
    y_true = labelled[model.label_column].to_numpy(dtype=float)
    y_pred = model.predict(labelled)

    logger.info("Calculating evaluation metrics...")
    metrics = calculate_metrics(y_true, y_pred)

    result = {
        'metrics': metrics,
        'y_true': y_true,
        'y_pred': y_pred,
        'figures': [],
        'metrics_file': None
    }

    if output_dir:
        output_dir = Path(output_dir)
        figures_dir = output_dir / "figures"
        metrics_dir = output_dir / "metrics"

        figures_dir.mkdir(parents=True, exist_ok=True)
        metrics_dir.mkdir(parents=True, exist_ok=True)

        metrics_file = metrics_dir / "evaluation_metrics.json"
        with open(metrics_file, 'w') as f:
            json.dump(metrics, f, indent=2)
        logger.info(f"Metrics saved to {metrics_file}")
        result['metrics_file'] = str(metrics_file)

        logger.info("Generating Actual vs Predicted plot...")
        plot_actual_vs_predicted(
            y_true, y_pred,
            save_path=str(figures_dir / "eval_actual_vs_predicted.png")
        )
        result['figures'].append("eval_actual_vs_predicted.png")

        logger.info("Generating residual analysis...")
        plot_residuals(
            y_true, y_pred,
            save_path=str(figures_dir / "eval_residuals.png")
        )
        result['figures'].append("eval_residuals.png")

        if show_plots:
            plt.show()
        else:
            plt.close('all')

    logger.info("=" * 60)
    logger.info("EVALUATION COMPLETE")
    logger.info(f"  R²: {metrics['r2']:.6f}")
    logger.info(f"  RMSE: {metrics['rmse']:.6f}")
    logger.info(f"  MAE: {metrics['mae']:.6f}")
    logger.info("=" * 60)

    return result


def print_evaluation_report(metrics: Dict[str, Any]) -> None:
    """
    Print a formatted evaluation report to console.

    Args:
        metrics: Metrics dictionary from calculate_metrics
    """
    print("Evaluation results:")
    print("-" * 40)
    print(f"{'R2 Score':<12} {'RMS loss':<12} {'MAE':<12}")
    print("-" * 40)
    print(f"{metrics['r2']:<12.2f} {metrics['rmse']:<12.2f} {metrics['mae']:<12.2f}")
    print("-" * 40)
    print(f"  • Samples evaluated: {metrics['n_samples']}")

    r2 = metrics['r2']
    if r2 > 0.9:
        print("  ✓ Excellent model performance (R² > 0.9)")
    elif r2 > 0.7:
        print("  ✓ Good model performance (R² > 0.7)")
    elif r2 > 0.5:
        print("  ⚠ Moderate model performance (R² > 0.5)")
    else:
        print("  ✗ Poor model performance (R² < 0.5)")

    print()
