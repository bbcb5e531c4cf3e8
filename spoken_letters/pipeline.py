"""Load -> train -> evaluate -> report, run once."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .backends import SVMBackend
from .config import DEFAULT_SCHEMA, DatasetSchema, TrainingConfig, default_training_config
from .data_processing import load_dataset
from .evaluation import EvaluationAccumulator, evaluate
from .log import get_logger
from .model_training import ClassifierHandle, ClassifierTrainer
from .report import format_report

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    model: ClassifierHandle
    config: TrainingConfig  # effective, after any grid search
    accumulator: EvaluationAccumulator
    report: str


def run_pipeline(
    training_path: Union[str, Path],
    testing_path: Union[str, Path],
    schema: DatasetSchema = DEFAULT_SCHEMA,
    config: Optional[TrainingConfig] = None,
    backend: Optional[SVMBackend] = None,
    n_jobs: Optional[int] = 1,
) -> PipelineResult:
    """Any SpokenLettersError raised along the way ends the run; there is no retry."""
    config = config or default_training_config()

    train_set = load_dataset(
        training_path, schema.training_samples, schema.attributes_per_sample, schema.number_of_classes
    )
    test_set = load_dataset(
        testing_path, schema.testing_samples, schema.attributes_per_sample, schema.number_of_classes
    )

    model, config = ClassifierTrainer(backend).train(train_set, config)

    logger.info("Evaluating on %s", test_set.source)
    accumulator = evaluate(model, test_set, schema.number_of_classes, n_jobs=n_jobs)

    report = format_report(model, accumulator, train_set.source, test_set.source, len(test_set))
    return PipelineResult(model=model, config=config, accumulator=accumulator, report=report)
