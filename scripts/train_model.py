#!/usr/bin/env python3
"""
Train a multi-class SVM on spoken-letter feature vectors and report test accuracy.

Usage (after `pip install -e .` from the repository root, so that
spoken_letters is importable):
    python3 scripts/train_model.py <training_file> <testing_file>

Both files hold one sample per line: the feature values followed by the
class label (1..26 for A..Z), comma separated. Row counts and the feature
count come from spoken_letters.config.DEFAULT_SCHEMA; grid search over C
with 10-fold cross-validation is on unless config.USE_GRID_SEARCH is False.

Exit status is 0 after a completed evaluation and non-zero if a dataset
cannot be loaded or training fails.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from spoken_letters.config import DEFAULT_SCHEMA, default_training_config
from spoken_letters.errors import SpokenLettersError
from spoken_letters.pipeline import run_pipeline


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Train and test an SVM on spoken-letter feature CSV files.")
    p.add_argument("training_file", type=Path, help="Training data CSV.")
    p.add_argument("testing_file", type=Path, help="Testing data CSV.")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    config = default_training_config()
    if config.search is not None:
        print("Training the SVM (SVM 'grid search' => may take some time!)", file=sys.stderr)
    try:
        result = run_pipeline(args.training_file, args.testing_file, schema=DEFAULT_SCHEMA, config=config)
    except SpokenLettersError as exc:
        raise SystemExit(f"ERROR: {exc}") from exc
    print(result.report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
