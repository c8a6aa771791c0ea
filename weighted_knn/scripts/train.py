# weighted_knn/scripts/train.py
import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from ..data.dataset import read_csv
from ..models.base.factory import ModelFactory
from ..utils.options import describe_options
from ..utils.path import model_artifact, train_config_path
from ..weighting import Weighting

MODEL_CHOICES = ModelFactory.choices()


def load_config(path: str | Path) -> dict:
    """Read model parameters from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        params = json.load(f)
    if not isinstance(params, dict):
        raise ValueError(f"{path} must hold a JSON object of model parameters")
    if "weighting" in params:
        params["weighting"] = Weighting.parse(params["weighting"])
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Train a weighted k-nearest-neighbours model. Arguments not listed "
                    "below are passed to the model as options, e.g. -K 5 -G -S 0.5 -X",
        allow_abbrev=False,
    )
    parser.add_argument("--train", type=str, help="Path to the training CSV")
    parser.add_argument("--class-col", type=str, default=None,
                        help="Name of the class column (default: last column)")
    parser.add_argument("--weight-col", type=str, default=None,
                        help="Optional column of instance weights")
    parser.add_argument("--nominal", nargs="+", default=[],
                        help="Numeric-looking columns to treat as nominal")
    parser.add_argument("--model", type=str, choices=MODEL_CHOICES, default="ibklg",
                        help=f"Name of the model to train. Choices: {MODEL_CHOICES}")
    parser.add_argument("--config", type=str, default=None,
                        help="JSON file with model parameters, applied on top of the options")
    parser.add_argument("--output", type=str, default=None,
                        help="Where to save the model (default: artifacts/<model>.joblib)")
    parser.add_argument("--list-options", action="store_true",
                        help="Print the model options and exit")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args, model_options = parser.parse_known_args(argv)
    if model_options[:1] == ["--"]:
        model_options = model_options[1:]

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_options:
        model = ModelFactory.create(args.model)
        if hasattr(model, "list_options"):
            print(describe_options(model.list_options()))
        return 0
    if not args.train:
        parser.error("--train is required")

    print(f"Starting training with {args.model} model...")
    print("Configuration:")
    print(f"   - Model: {args.model}")
    print(f"   - Train file: {args.train}")
    print(f"   - Class column: {args.class_col or '(last column)'}")
    print(f"   - Options: {' '.join(model_options) or '(defaults)'}")

    # Create the model and apply its configuration
    try:
        model = ModelFactory.create(args.model, options=model_options)
        if args.config:
            model.set_params(**load_config(args.config))
        print(f"Successfully created {args.model} model")
    except Exception as e:
        print(f"Failed to create {args.model} model: {e}")
        return 1

    # Load training data
    try:
        print(f"Loading data from {args.train}...")
        data = read_csv(args.train, args.class_col,
                        weight_column=args.weight_col, nominal_columns=args.nominal)
        print(f"Loaded {data.num_instances} instances with {data.num_attributes} attributes")
    except Exception as e:
        print(f"Error loading data: {e}")
        return 1

    # Train model
    try:
        print(f"Training {args.model} model...")
        model.fit(data)
        print("Model training completed!")
        print(model)
    except Exception as e:
        print(f"Error during model training: {e}")
        return 1

    # Save trained model and its configuration
    try:
        model_path = Path(args.output) if args.output else model_artifact(args.model)
        saved_path = model.save(model_path)
        print(f"Saved model -> {saved_path}")

        config_path = train_config_path(saved_path)
        train_config = {
            "model_name": args.model,
            "train_file": str(args.train),
            "class_col": data.class_attribute.name,
            "options": model.get_options() if hasattr(model, "get_options") else [],
            "classes": list(data.class_attribute.values),
            "train_samples": data.num_instances,
        }
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(train_config, f, ensure_ascii=False, indent=2)
        print(f"Saved training config -> {config_path}")
    except Exception as e:
        print(f"Error saving artifacts: {e}")
        return 1

    print("Training completed successfully!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
