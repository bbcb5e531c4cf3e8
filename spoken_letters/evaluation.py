"""Test-set evaluation with per-class miss counts."""
from __future__ import annotations

import operator
from dataclasses import dataclass, field
from functools import reduce
from typing import Dict, Optional

import numpy as np
from joblib import Parallel, delayed, effective_n_jobs

from .data_processing import Dataset
from .log import get_logger
from .model_training import ClassifierHandle

logger = get_logger(__name__)

# labels pass through float32 inside the solver
FLT_EPSILON = float(np.finfo(np.float32).eps)


@dataclass(frozen=True)
class EvaluationPercentages:
    correct: float
    wrong: float
    false_positives: Dict[int, float]


@dataclass
class EvaluationAccumulator:
    """
    Running counts over the test set.

    false_positives[label] counts test samples whose true class was `label`
    but were predicted as something else. It is a miss count per true class,
    not a confusion matrix.
    """
    correct: int = 0
    wrong: int = 0
    false_positives: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def for_classes(cls, number_of_classes: int) -> "EvaluationAccumulator":
        return cls(false_positives={label: 0 for label in range(1, number_of_classes + 1)})

    @property
    def total(self) -> int:
        return self.correct + self.wrong

    def record(self, true_label: float, predicted: float) -> bool:
        """Tally one sample; returns True when the prediction matched."""
        if abs(predicted - true_label) >= FLT_EPSILON:
            self.wrong += 1
            label = int(round(true_label))
            self.false_positives[label] = self.false_positives.get(label, 0) + 1
            return False
        self.correct += 1
        return True

    def merge(self, other: "EvaluationAccumulator") -> "EvaluationAccumulator":
        """Combine two accumulators built over disjoint samples."""
        fp = dict(self.false_positives)
        for label, count in other.false_positives.items():
            fp[label] = fp.get(label, 0) + count
        return EvaluationAccumulator(correct=self.correct + other.correct, wrong=self.wrong + other.wrong,
                                     false_positives=fp)

    __add__ = merge

    def percentages(self, total: Optional[int] = None) -> EvaluationPercentages:
        total = self.total if total is None else total
        if total <= 0:
            raise ValueError("cannot compute percentages over zero samples")
        return EvaluationPercentages(
            correct=self.correct * 100.0 / total,
            wrong=self.wrong * 100.0 / total,
            false_positives={label: n * 100.0 / total for label, n in sorted(self.false_positives.items())},
        )


def _evaluate_range(model: ClassifierHandle, test_set: Dataset, rows: np.ndarray,
                    number_of_classes: int) -> EvaluationAccumulator:
    acc = EvaluationAccumulator.for_classes(number_of_classes)
    for i in rows:
        true_label = int(test_set.y[i])
        predicted = model.predict(test_set.X[i])
        acc.record(float(true_label), float(predicted))
        logger.debug("Testing sample %d -> class result %d (true %d)", i, predicted, true_label)
    return acc


def evaluate(model: ClassifierHandle, test_set: Dataset, number_of_classes: int,
             n_jobs: Optional[int] = 1) -> EvaluationAccumulator:
    """
    Predict every test sample in order and tally correct / wrong / per-class misses.

    With n_jobs != 1 contiguous chunks go to joblib threads, each with its own
    accumulator; the partial results are added together.
    """
    rows = np.arange(len(test_set))
    workers = min(effective_n_jobs(n_jobs), len(test_set)) if len(test_set) else 1
    if workers <= 1:
        return _evaluate_range(model, test_set, rows, number_of_classes)

    chunks = np.array_split(rows, workers)
    partials = Parallel(n_jobs=workers, prefer="threads")(
        delayed(_evaluate_range)(model, test_set, chunk, number_of_classes) for chunk in chunks
    )
    return reduce(operator.add, partials, EvaluationAccumulator.for_classes(number_of_classes))
