# weighted_knn/utils/path.py
from pathlib import Path

# Folders that mark a project root
_ROOT_MARKERS = ("pyproject.toml", "weighted_knn")


def project_root(start: Path | None = None) -> Path:
    here = (start or Path.cwd()).resolve()
    # search current dir and all parents
    for base in [here, *here.parents]:
        if all((base / marker).exists() for marker in _ROOT_MARKERS):
            return base
    # Fallback: the starting directory
    return here


def artifacts_dir(root: Path | None = None) -> Path:
    return (root or project_root()) / "artifacts"


def model_artifact(model_name: str, root: Path | None = None) -> Path:
    return artifacts_dir(root) / f"{model_name}.joblib"


def train_config_path(model_path: str | Path) -> Path:
    model_path = Path(model_path)
    return model_path.with_name(f"{model_path.stem}.train_config.json")
