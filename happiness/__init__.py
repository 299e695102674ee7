"""
Happiness Score Regression
==========================

A machine learning pipeline predicting a country's happiness score from
socioeconomic indicators.

Modules:
    - data_loader: Configuration, CSV ingestion and validation
    - stats: Pearson correlation coefficient
    - preprocessing: Train/test split and feature pipeline
    - model: Tree ensemble regression model (train, persist, reload)
    - importance: Permutation feature importance report
    - evaluation: Model evaluation and metrics
    - prediction: Single-sample inference with the persisted model
"""

__version__ = "1.0.0"
__author__ = "Happiness Score Team"
