"""Plain-text summary of a finished evaluation."""
from __future__ import annotations

from typing import List

import numpy as np
import sklearn

from .evaluation import EvaluationAccumulator
from .model_training import ClassifierHandle


def class_letter(label: int) -> str:
    """1 -> 'A' ... 26 -> 'Z'; anything else is shown as the number."""
    if 1 <= label <= 26:
        return chr(ord("A") + label - 1)
    return str(label)


def version_banner() -> str:
    return f"scikit-learn version {sklearn.__version__} (numpy {np.__version__})"


def format_report(
    model: ClassifierHandle,
    accumulator: EvaluationAccumulator,
    training_source: str,
    testing_source: str,
    total: int,
) -> str:
    pct = accumulator.percentages(total)
    lines: List[str] = [
        version_banner(),
        f"Using training database: {training_source}",
        f"Using parameters {model.config.describe()} ({model.config.search_mode})",
        f"Number of support vectors for trained SVM = {model.support_vector_count}",
        "",
        f"Results on the testing database: {testing_source}",
        f"\tCorrect classification: {accumulator.correct} ({pct.correct:g}%)",
        f"\tWrong classifications: {accumulator.wrong} ({pct.wrong:g}%)",
    ]
    for label, count in sorted(accumulator.false_positives.items()):
        lines.append(
            f"\tClass (character {class_letter(label)}) false positives\t{count} "
            f"({pct.false_positives[label]:g}%)"
        )
    return "\n".join(lines)
