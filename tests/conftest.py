"""Pytest configuration and fixtures."""
import sys
from pathlib import Path

import numpy as np
import pytest

from spoken_letters.backends import SVMBackend
from spoken_letters.config import DatasetSchema

# Add scripts/ to path for the command-line entry point
scripts_path = Path(__file__).parent.parent / "scripts"
sys.path.insert(0, str(scripts_path))


def make_rows(per_class, n_classes, n_attrs, seed=0, spread=0.5):
    """Well separated clusters: class c sits around 10 * c on every axis."""
    rng = np.random.RandomState(seed)
    X, y = [], []
    for label in range(1, n_classes + 1):
        for _ in range(per_class):
            X.append(10.0 * label + rng.uniform(-spread, spread, size=n_attrs))
            y.append(label)
    return np.asarray(X), np.asarray(y)


def format_rows(X, y, trailing_comma=True):
    end = "," if trailing_comma else ""
    return "".join(
        ", ".join(f"{v:.4f}" for v in row) + f", {label}.{end}\n" for row, label in zip(X, y)
    )


class CentroidBackend(SVMBackend):
    """Nearest-centroid stand-in so trainer and harness can be exercised without a solver."""

    def __init__(self):
        self.calls = []

    def train(self, X, y, config):
        self.calls.append("train")
        labels = np.unique(y)
        return labels, np.stack([X[y == label].mean(axis=0) for label in labels])

    def cross_validate_train(self, X, y, config, folds):
        self.calls.append(("cross_validate_train", folds))
        return self.train(X, y, config), config.replace(C=config.search.c_grid.values()[0])

    def predict(self, model, features):
        labels, centroids = model
        return int(labels[np.argmin(((centroids - features) ** 2).sum(axis=1))])

    def support_vector_count(self, model):
        return 0


class ConstantBackend(CentroidBackend):
    """Always answers the first training label."""

    def predict(self, model, features):
        return int(model[0][0])


@pytest.fixture
def small_schema():
    """10 training rows (2 per class, 5 classes), 5 test rows, 3 attributes."""
    return DatasetSchema(training_samples=10, testing_samples=5, attributes_per_sample=3, number_of_classes=5)


@pytest.fixture
def dataset_files(tmp_path, small_schema):
    """Write the small train/test CSV pair and return their paths."""
    X_train, y_train = make_rows(2, 5, 3, seed=1)
    X_test, y_test = make_rows(1, 5, 3, seed=2)
    train_path = tmp_path / "train.data"
    test_path = tmp_path / "test.data"
    train_path.write_text(format_rows(X_train, y_train))
    test_path.write_text(format_rows(X_test, y_test))
    return train_path, test_path


@pytest.fixture
def write_csv(tmp_path):
    """Factory writing raw text to a file under tmp_path."""

    def _write(text, name="data.csv"):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write
