"""
Data Loader Module
==================

Handles configuration, CSV ingestion, validation, and basic data quality checks.

The input CSV is read positionally: the header row is skipped and each
column is mapped to a record field by its index, so header names in the
file do not matter.

Functions:
    - load_config: Load YAML configuration file
    - load_data: Load the country CSV into the standard schema
    - validate_data: Check data quality constraints
    - print_data_summary: Print basic statistics
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional, Tuple, List

import pandas as pd
import numpy as np
import yaml

logger = logging.getLogger(__name__)

LABEL_COLUMN = "HappinessScore"
ID_COLUMNS = ["Code", "Name"]
FEATURE_COLUMNS = [
    "Population", "Area", "PopulationDensity", "Coastline", "NetMigration",
    "InfantMortality", "GDP", "Literacy", "Phones", "Arable", "Climate",
    "Birthrate", "Deathrate",
]

# Position of each record field in the input CSV
COLUMN_POSITIONS = {
    "Code": 0,
    "Name": 1,
    "HappinessScore": 3,
    "Population": 4,
    "Area": 5,
    "PopulationDensity": 6,
    "Coastline": 7,
    "NetMigration": 8,
    "InfantMortality": 9,
    "GDP": 10,
    "Literacy": 11,
    "Phones": 12,
    "Arable": 13,
    "Climate": 16,
    "Birthrate": 17,
    "Deathrate": 18,
}


def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to the configuration file

    Returns:
        Dictionary containing configuration parameters

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    logger.info(f"Loaded configuration from {config_path}")
    return config or {}


def load_data(
    file_path: str,
    column_positions: Optional[Dict[str, int]] = None
) -> pd.DataFrame:
    """
    Load the country CSV and map its columns to the standard schema.

    Args:
        file_path: Path to the CSV file
        column_positions: Mapping of field name to column index
            (default: COLUMN_POSITIONS)

    Returns:
        DataFrame with columns Code, Name, HappinessScore and FEATURE_COLUMNS

    Raises:
        FileNotFoundError: If data file doesn't exist
        ValueError: If the file has too few columns or non-numeric values
    """
    file_path = Path(file_path)
    positions = column_positions or COLUMN_POSITIONS

    if not file_path.exists():
        raise FileNotFoundError(f"Data file not found: {file_path}")

    raw = pd.read_csv(file_path, header=0, sep=',')
    logger.info(f"Loaded data from {file_path}: {raw.shape[0]} rows × {raw.shape[1]} columns")

    required = max(positions.values()) + 1
    if raw.shape[1] < required:
        raise ValueError(
            f"Expected at least {required} columns, but found {raw.shape[1]}. "
            f"Columns: {list(raw.columns)}"
        )

    ordered = sorted(positions.items(), key=lambda item: item[1])
    df = raw.iloc[:, [pos for _, pos in ordered]].copy()
    df.columns = [name for name, _ in ordered]

    for col in ID_COLUMNS:
        if col in df.columns:
            df[col] = df[col].astype("string")

    numeric_cols = [c for c in df.columns if c not in ID_COLUMNS]
    for col in numeric_cols:
        try:
            df[col] = df[col].astype(float)
        except ValueError as e:
            raise ValueError(f"Column '{col}' contains non-numeric values: {e}") from e

    return df


def validate_data(
    df: pd.DataFrame,
    feature_columns: Optional[List[str]] = None,
    label_column: str = LABEL_COLUMN,
    strict: bool = False
) -> Tuple[bool, Dict[str, Any]]:
    """
    Validate data quality constraints for training.

    Checks:
        - Label and feature columns are present
        - Label has no missing values
        - Missing values in feature columns
        - Duplicate country codes

    Args:
        df: DataFrame to validate
        feature_columns: Expected feature columns (default: FEATURE_COLUMNS)
        label_column: Name of the label column
        strict: If True, raise errors on validation failure

    Returns:
        Tuple of (is_valid, validation_report)
    """
    feature_columns = feature_columns or FEATURE_COLUMNS
    report = {
        "total_rows": len(df),
        "total_columns": len(df.columns),
        "column_names": list(df.columns),
        "issues": []
    }

    # Check 1: Schema
    missing_cols = [c for c in feature_columns + [label_column] if c not in df.columns]
    if missing_cols:
        issue = f"Missing columns: {missing_cols}"
        report["issues"].append(issue)
        logger.warning(issue)

    # Check 2: Label must be present on every record
    if label_column in df.columns:
        missing_label = int(df[label_column].isnull().sum())
        if missing_label > 0:
            issue = f"Rows without {label_column}: {missing_label}"
            report["issues"].append(issue)
            logger.warning(issue)

    # Check 3: Missing feature values (imputed or tolerated by the trainer)
    present = [c for c in feature_columns if c in df.columns]
    missing_counts = df[present].isnull().sum()
    if missing_counts.sum() > 0:
        issue = f"Missing feature values: {int(missing_counts.sum())}"
        report["issues"].append(issue)
        report["missing_by_column"] = {
            col: int(n) for col, n in missing_counts[missing_counts > 0].items()
        }
        logger.warning(issue)

    # Check 4: Duplicate records
    if "Code" in df.columns:
        duplicates = int(df["Code"].dropna().duplicated().sum())
        if duplicates > 0:
            issue = f"Duplicate country codes found: {duplicates}"
            report["issues"].append(issue)
            logger.warning(issue)

    is_valid = len(report["issues"]) == 0
    report["is_valid"] = is_valid

    if strict and not is_valid:
        raise ValueError(f"Data validation failed: {report['issues']}")

    return is_valid, report


def print_data_summary(df: pd.DataFrame) -> None:
    """
    Print a formatted summary of the dataset to console.

    Args:
        df: DataFrame to summarize
    """
    print("\n" + "=" * 60)
    print("DATASET SUMMARY")
    print("=" * 60)
    print(f"Shape: {df.shape[0]} rows × {df.shape[1]} columns")
    print("\nColumn Information:")
    print("-" * 40)

    for col in df.columns:
        dtype = df[col].dtype
        non_null = df[col].count()
        null_pct = (1 - non_null / len(df)) * 100 if len(df) else 0.0
        print(f"  {col}: {dtype} | {non_null} non-null ({null_pct:.1f}% missing)")

    numeric = df.select_dtypes(include=[np.number])
    if not numeric.empty:
        print("\nBasic Statistics:")
        print("-" * 40)
        print(numeric.describe().round(4).to_string())
    print("=" * 60 + "\n")
