import json

import pandas as pd
import pytest

from weighted_knn.models.base.base import BaseModel
from weighted_knn.scripts import evaluate, train
from weighted_knn.utils import path


@pytest.fixture
def csv_files(tmp_path):
    train_df = pd.DataFrame({
        "x1": [0.0, 0.5, 1.0, 9.0, 9.5, 10.0],
        "colour": ["red", "red", "blue", "blue", "blue", "red"],
        "label": ["low", "low", "low", "high", "high", "high"],
    })
    test_df = pd.DataFrame({
        "x1": [0.2, 9.8],
        "colour": ["red", "blue"],
        "label": ["low", "high"],
    })
    train_path, test_path = tmp_path / "train.csv", tmp_path / "test.csv"
    train_df.to_csv(train_path, index=False)
    test_df.to_csv(test_path, index=False)
    return train_path, test_path


class TestTrain:

    def test_train_and_evaluate(self, csv_files, tmp_path, capsys):
        train_path, test_path = csv_files
        model_path = tmp_path / "out" / "ibklg.joblib"
        assert train.main([
            "--train", str(train_path), "--output", str(model_path), "-K", "3", "-X",
        ]) == 0
        assert "IB1 instance-based classifier" in capsys.readouterr().out

        config = json.loads((tmp_path / "out" / "ibklg.train_config.json").read_text())
        assert config["class_col"] == "label"
        assert config["classes"] == ["high", "low"]
        assert config["options"][:2] == ["-K", "3"]
        assert "-X" in config["options"]

        predictions = tmp_path / "pred.csv"
        assert evaluate.main([
            "--test", str(test_path), "--model-file", str(model_path),
            "--predictions", str(predictions),
        ]) == 0
        assert "Accuracy : 1.0" in capsys.readouterr().out
        assert pd.read_csv(predictions)["predicted"].tolist() == ["low", "high"]

    def test_config_applied_over_options(self, csv_files, tmp_path):
        train_path, _ = csv_files
        config_path = tmp_path / "params.json"
        config_path.write_text(json.dumps({"weighting": "gaussian", "sd": 0.5}))
        model_path = tmp_path / "model.joblib"
        assert train.main([
            "--train", str(train_path), "--output", str(model_path),
            "--config", str(config_path), "-K", "2",
        ]) == 0
        model = BaseModel.load(model_path)
        assert model.k == 2
        assert model.sd == 0.5
        assert "-G" in model.get_options()

    def test_bad_option(self, csv_files, tmp_path, capsys):
        train_path, _ = csv_files
        assert train.main([
            "--train", str(train_path), "--output", str(tmp_path / "m.joblib"), "-K", "zero",
        ]) == 1
        assert "Failed to create ibklg model" in capsys.readouterr().out

    def test_missing_train_file(self, tmp_path, capsys):
        assert train.main(["--train", str(tmp_path / "nope.csv")]) == 1
        assert "Error loading data" in capsys.readouterr().out

    def test_list_options(self, capsys):
        assert train.main(["--list-options"]) == 0
        out = capsys.readouterr().out
        assert "-K <number of neighbors>" in out
        assert "-A <search spec>" in out

    def test_train_required(self):
        with pytest.raises(SystemExit):
            train.main([])


class TestEvaluate:

    def test_numeric_target(self, tmp_path, capsys):
        df = pd.DataFrame({"x": [0.0, 1.0, 2.0, 3.0], "y": [10.0, 20.0, 30.0, 40.0]})
        df.to_csv(tmp_path / "num.csv", index=False)
        model_path = tmp_path / "num.joblib"
        assert train.main([
            "--train", str(tmp_path / "num.csv"), "--output", str(model_path), "-K", "2",
        ]) == 0
        capsys.readouterr()
        assert evaluate.main(["--test", str(tmp_path / "num.csv"), "--model-file", str(model_path)]) == 0
        out = capsys.readouterr().out
        assert "MAE" in out and "RMSE" in out

    def test_missing_model(self, csv_files, tmp_path, capsys):
        _, test_path = csv_files
        assert evaluate.main([
            "--test", str(test_path), "--model-file", str(tmp_path / "absent.joblib"),
        ]) == 1
        assert "Error loading model" in capsys.readouterr().out

    def test_no_labelled_rows(self, csv_files, tmp_path, capsys):
        train_path, _ = csv_files
        model_path = tmp_path / "m.joblib"
        assert train.main(["--train", str(train_path), "--output", str(model_path)]) == 0
        unlabelled = tmp_path / "unlabelled.csv"
        pd.DataFrame({"x1": [1.0], "colour": ["red"]}).to_csv(unlabelled, index=False)
        assert evaluate.main(["--test", str(unlabelled), "--model-file", str(model_path)]) == 1


class TestPaths:

    def test_model_artifact_under_project_root(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("")
        (tmp_path / "weighted_knn").mkdir()
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert path.project_root(nested) == tmp_path.resolve()
        assert path.model_artifact("ibklg", tmp_path) == tmp_path / "artifacts" / "ibklg.joblib"

    def test_train_config_beside_model(self, tmp_path):
        assert path.train_config_path(tmp_path / "m.joblib") == tmp_path / "m.train_config.json"
