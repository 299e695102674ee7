"""
Test Suite for Prediction Module
================================
"""

import pytest

from happiness.data_loader import FEATURE_COLUMNS
from happiness.model import HappinessScoreModel
from happiness.prediction import (
    SAMPLE_RECORD, EXPECTED_SCORE, predict_single, run_single_prediction,
    print_prediction_result
)


@pytest.fixture
def model_path(countries, tmp_path):
    path = tmp_path / "model.joblib"
    HappinessScoreModel(n_estimators=20, random_state=0).fit(countries).save(str(path))
    return path


def test_sample_record_covers_features():
    assert list(SAMPLE_RECORD) == FEATURE_COLUMNS


def test_predict_single(countries):
    model = HappinessScoreModel(n_estimators=20, random_state=0).fit(countries)
    record = countries.iloc[0][FEATURE_COLUMNS].to_dict()

    assert predict_single(model, record) == pytest.approx(model.predict(countries.iloc[[0]])[0])


def test_run_single_prediction(model_path):
    result = run_single_prediction(str(model_path))

    assert isinstance(result['predicted'], float)
    assert result['expected'] == EXPECTED_SCORE
    assert result['model_path'] == str(model_path)


def test_run_single_prediction_missing_model(tmp_path):
    with pytest.raises(FileNotFoundError):
        run_single_prediction(str(tmp_path / "missing.joblib"))


def test_print_prediction_result(capsys):
    print_prediction_result({'predicted': 6.12345, 'expected': 5.964, 'model_path': 'm'})
    out = capsys.readouterr().out

    assert "Predicted" in out
    assert "6.1235" in out or "6.1234" in out
    assert "5.964" in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
