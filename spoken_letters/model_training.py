"""Training orchestration for the spoken-letter classifier."""
from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np

from .backends import SklearnSVMBackend, SVMBackend
from .config import TrainingConfig
from .data_processing import Dataset
from .errors import PredictionOnUntrainedModel, TrainingFailed
from .log import get_logger

logger = get_logger(__name__)


class ClassifierHandle:
    """A trained model. Read-only once the trainer hands it out."""

    def __init__(self, backend: SVMBackend, model: Any, config: TrainingConfig):
        self._backend = backend
        self._model = model
        self._config = config

    @property
    def config(self) -> TrainingConfig:
        """Configuration the model was actually fitted with."""
        return self._config

    @property
    def is_trained(self) -> bool:
        return self._model is not None

    @property
    def support_vector_count(self) -> int:
        self._require_model()
        return self._backend.support_vector_count(self._model)

    def predict(self, features: np.ndarray) -> int:
        """Class label for one feature vector."""
        self._require_model()
        return self._backend.predict(self._model, features)

    def _require_model(self) -> None:
        if self._model is None:
            raise PredictionOnUntrainedModel("classifier handle holds no fitted model")


class ClassifierTrainer:
    """Fits a ClassifierHandle, optionally picking C (and kernel parameters) by grid search."""

    def __init__(self, backend: Optional[SVMBackend] = None):
        self.backend = backend or SklearnSVMBackend()

    def train(self, training_set: Dataset, config: TrainingConfig) -> Tuple[ClassifierHandle, TrainingConfig]:
        X, y = training_set.X, training_set.y
        logger.info(
            "Training SVM on %s (%d samples, %s)", training_set.source, len(training_set), config.search_mode
        )

        if config.search is None:
            model = self.backend.train(X, y, config)
            effective = config
        else:
            model, effective = self.backend.cross_validate_train(X, y, config, config.search.folds)
            logger.info("Using optimal parameters %s", effective.describe())

        if model is None:
            raise TrainingFailed("backend returned no model")
        handle = ClassifierHandle(self.backend, model, effective)
        n_sv = handle.support_vector_count
        if n_sv < 0:
            raise TrainingFailed(f"backend reported {n_sv} support vectors")
        logger.info("Number of support vectors for trained SVM = %d", n_sv)
        return handle, effective
