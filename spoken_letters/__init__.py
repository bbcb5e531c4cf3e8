"""SVM training and evaluation for spoken-letter (A-Z) feature vectors."""
from .config import DatasetSchema, ParamGrid, SearchPolicy, TrainingConfig
from .data_processing import Dataset, load_dataset
from .errors import (
    FileUnavailable,
    MalformedRow,
    PredictionOnUntrainedModel,
    SpokenLettersError,
    TrainingFailed,
)
from .evaluation import EvaluationAccumulator, evaluate
from .model_training import ClassifierHandle, ClassifierTrainer
from .pipeline import PipelineResult, run_pipeline

__version__ = "0.2.0"
