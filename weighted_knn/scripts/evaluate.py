#evaluate.py
import argparse
import logging
import math
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    classification_report,
    mean_absolute_error,
    mean_squared_error,
)

from ..models.base.base import BaseModel


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Evaluate a trained model on a test CSV")
    parser.add_argument("--test", type=str, required=True, help="Path to the evaluation CSV")
    parser.add_argument("--model-file", type=str, required=True,
                        help="Path to the trained model file (joblib)")
    parser.add_argument("--weight-col", type=str, default=None,
                        help="Optional column of instance weights")
    parser.add_argument("--predictions", type=str, default=None,
                        help="Optional CSV to write predictions to")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load model
    try:
        model = BaseModel.load(args.model_file)
    except Exception as e:
        print(f"Error loading model: {e}")
        return 1
    header = model.header_

    # Load evaluation data with the training header
    try:
        df = pd.read_csv(args.test)
        data = header.encode_frame(df, weight_column=args.weight_col).without_missing_class()
    except Exception as e:
        print(f"Error loading evaluation data: {e}")
        return 1
    if data.num_instances == 0:
        print("No samples with a known class value to evaluate.")
        return 1

    y_pred = model.predict(data)
    y_true = data.y

    print(f"\n=== Evaluation on {data.num_instances} samples ===")
    if header.class_is_nominal:
        # NaN predictions count as errors
        decided = ~np.isnan(y_pred)
        y_pred_idx = np.where(decided, y_pred, -1).astype(int)
        y_true_idx = y_true.astype(int)
        print("Accuracy :", round(accuracy_score(y_true_idx, y_pred_idx), 4))
        labels = list(range(header.num_classes))
        print("\nPer-class report:\n", classification_report(
            y_true_idx, y_pred_idx, labels=labels,
            target_names=list(header.class_attribute.values), zero_division=0,
        ))
    else:
        print("MAE  :", round(mean_absolute_error(y_true, y_pred), 4))
        print("RMSE :", round(math.sqrt(mean_squared_error(y_true, y_pred)), 4))

    if args.predictions:
        out = pd.DataFrame({
            "actual": [header.class_label(v) for v in y_true],
            "predicted": [header.class_label(v) for v in y_pred],
        })
        out.to_csv(args.predictions, index=False)
        print(f"Saved predictions -> {args.predictions}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
