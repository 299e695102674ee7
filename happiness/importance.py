"""
Feature Importance Module
=========================

Ranks features by permutation importance and pairs each with its Pearson
correlation against the label.

Features:
    - Permutation importance (mean R² change) on the fitted regressor
    - Model-independent correlation coefficient per feature
    - Console table, CSV export and bar chart
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from sklearn.inspection import permutation_importance

from .model import HappinessScoreModel
from .stats import compute_correlation_coefficient

logger = logging.getLogger(__name__)


def calculate_feature_correlation(
    df: pd.DataFrame,
    feature_column: str,
    label_column: str
) -> float:
    """
    Correlation between one feature and the label.

    Records where either value is missing are left out.

    Args:
        df: Records holding both columns
        feature_column: Feature name
        label_column: Label name

    Returns:
        Pearson correlation coefficient
    """
    pairs = df[[feature_column, label_column]].dropna()
    return compute_correlation_coefficient(pairs[feature_column], pairs[label_column])


def calculate_feature_importance(
    model: HappinessScoreModel,
    df: pd.DataFrame,
    n_repeats: int = 5,
    random_state: Optional[int] = None
) -> pd.DataFrame:
    """
    Compute the feature importance report.

    Permutation importance is measured on the final regression stage over
    the engineered feature matrix, so each importance lines up with the
    feature at the same position in model.feature_columns.

    Args:
        model: Trained model
        df: Records to permute (typically the training set)
        n_repeats: Number of permutations per feature
        random_state: Random seed for the permutations

    Returns:
        DataFrame with columns feature, r2_mean, r2_std, correlation,
        sorted by r2_mean descending
    """
    logger.info("=" * 60)
    logger.info("STARTING FEATURE IMPORTANCE")
    logger.info("=" * 60)

    labelled = df[df[model.label_column].notna()]
    X = model.transform_features(labelled)
    y = labelled[model.label_column].to_numpy(dtype=float)

    logger.info(f"Permuting {X.shape[1]} features over {X.shape[0]} records ({n_repeats} repeats)")

    result = permutation_importance(
        model.regressor,
        X,
        y,
        scoring="r2",
        n_repeats=n_repeats,
        random_state=random_state
    )

    rows = []
    for i, feature in enumerate(model.feature_columns):
        rows.append({
            'feature': feature,
            'r2_mean': float(abs(result.importances_mean[i])),
            'r2_std': float(result.importances_std[i]),
            'correlation': calculate_feature_correlation(labelled, feature, model.label_column)
        })

    report = (pd.DataFrame(rows)
                .sort_values('r2_mean', ascending=False, kind='stable')
                .reset_index(drop=True))

    logger.info(f"Most important feature: {report.loc[0, 'feature']}")
    return report


def plot_feature_importance(
    report: pd.DataFrame,
    figsize: Tuple[int, int] = (10, 6),
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Bar chart of permutation importance, annotated with correlations.

    Args:
        report: DataFrame from calculate_feature_importance
        figsize: Figure size
        save_path: Path to save the figure

    Returns:
        Matplotlib Figure object
    """
    fig, ax = plt.subplots(figsize=figsize)

    sns.barplot(data=report, x='r2_mean', y='feature', ax=ax, color='steelblue', alpha=0.8)
    ax.errorbar(report['r2_mean'], np.arange(len(report)), xerr=report['r2_std'],
                fmt='none', ecolor='black', capsize=3, linewidth=1)

    for i, corr in enumerate(report['correlation']):
        ax.text(report['r2_mean'].iloc[i], i, f"  r={corr:.2f}", va='center', fontsize=8)

    ax.set_xlabel('Mean R² change when permuted')
    ax.set_ylabel('Feature')
    ax.set_title('Permutation Feature Importance', fontsize=14, fontweight='bold')
    plt.tight_layout()

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Feature importance plot saved to {save_path}")

    return fig


def report_feature_importance(
    model: HappinessScoreModel,
    df: pd.DataFrame,
    config: Dict[str, Any],
    output_dir: Optional[str] = None
) -> Dict[str, Any]:
    """
    Compute, export and plot the feature importance report.

    Args:
        model: Trained model
        df: Records to permute
        config: Configuration dictionary
        output_dir: Directory for the CSV and figure (optional)

    Returns:
        Dictionary containing the report and file paths
    """
    imp_config = config.get('importance', {})

    report = calculate_feature_importance(
        model,
        df,
        n_repeats=imp_config.get('n_repeats', 5),
        random_state=imp_config.get('random_state')
    )

    result = {'report': report, 'csv_path': None, 'figure_path': None}

    if output_dir:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        csv_path = output_dir / "feature_importance.csv"
        report.to_csv(csv_path, index=False)
        logger.info(f"Feature importance saved to {csv_path}")
        result['csv_path'] = str(csv_path)

        figure_path = output_dir / "figures" / "feature_importance.png"
        plot_feature_importance(report, save_path=str(figure_path))
        plt.close('all')
        result['figure_path'] = str(figure_path)

    return result


def print_feature_importance(report: pd.DataFrame) -> None:
    """
    Print the feature importance table.

    Args:
        report: DataFrame from calculate_feature_importance
    """
    print("Feature importance:")
    print("-" * 64)
    print(f"{'Feature':<20} {'R Squared Mean':<18} {'Correlation Coefficient':<24}")
    print("-" * 64)

    for row in report.itertuples(index=False):
        print(f"{row.feature:<20} {row.r2_mean:<18.4g} {row.correlation:<24.2f}")

    print("-" * 64 + "\n")
