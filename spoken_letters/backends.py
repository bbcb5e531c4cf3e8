"""Margin-optimisation back-ends the trainer drives.

The trainer never talks to a solver directly; it goes through the four
operations of SVMBackend so another numerical library can be dropped in.
"""
from __future__ import annotations

import warnings
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Tuple

import numpy as np
from sklearn.exceptions import ConvergenceWarning
from sklearn.model_selection import GridSearchCV, KFold
from sklearn.multiclass import OneVsRestClassifier
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVC

from .config import TrainingConfig
from .errors import TrainingFailed
from .log import get_logger

logger = get_logger(__name__)


class SVMBackend(ABC):
    """Abstract solver capability: train, cross-validated train, predict, inspect."""

    @abstractmethod
    def train(self, X: np.ndarray, y: np.ndarray, config: TrainingConfig) -> Any:
        """Fit once with the hyper-parameters in `config`."""
        raise NotImplementedError

    @abstractmethod
    def cross_validate_train(
        self, X: np.ndarray, y: np.ndarray, config: TrainingConfig, folds: int
    ) -> Tuple[Any, TrainingConfig]:
        """Grid search with k-fold cross-validation, then refit on all of X."""
        raise NotImplementedError

    @abstractmethod
    def predict(self, model: Any, features: np.ndarray) -> int:
        raise NotImplementedError

    @abstractmethod
    def support_vector_count(self, model: Any) -> int:
        raise NotImplementedError


@contextmanager
def _solver_errors() -> Iterator[None]:
    """Turn solver rejections and non-convergence into TrainingFailed."""
    with warnings.catch_warnings():
        warnings.simplefilter("error", ConvergenceWarning)
        try:
            yield
        except ConvergenceWarning as exc:
            raise TrainingFailed(
                f"SVM optimisation did not converge: {exc}",
                hint="raise max_iter or loosen epsilon",
            ) from exc
        except ValueError as exc:
            raise TrainingFailed(f"SVM training rejected the configuration: {exc}") from exc


class SklearnSVMBackend(SVMBackend):
    """libsvm C-SVC through scikit-learn.

    Models are Pipelines with an optional "scaler" step and a "clf" step, the
    latter either an SVC (one-vs-one) or a OneVsRestClassifier over SVCs.
    """

    def build_pipeline(self, config: TrainingConfig) -> Pipeline:
        svc = SVC(
            C=config.C,
            kernel=config.kernel,
            degree=config.degree,
            gamma=config.gamma,
            coef0=config.coef0,
            tol=config.epsilon,
            max_iter=config.max_iter,
            class_weight=dict(config.class_weight) if config.class_weight else None,
            decision_function_shape=config.strategy,
        )
        clf = svc if config.strategy == "ovo" else OneVsRestClassifier(svc)
        steps: List[Tuple[str, Any]] = []
        if config.standardize:
            steps.append(("scaler", StandardScaler()))
        steps.append(("clf", clf))
        return Pipeline(steps=steps)

    @staticmethod
    def _param_prefix(config: TrainingConfig) -> str:
        return "clf__" if config.strategy == "ovo" else "clf__estimator__"

    def param_grid(self, config: TrainingConfig) -> Dict[str, List[Any]]:
        prefix = self._param_prefix(config)
        return {prefix + name: values for name, values in config.search.grids_for(config.kernel).items()}

    def train(self, X: np.ndarray, y: np.ndarray, config: TrainingConfig) -> Pipeline:
        pipe = self.build_pipeline(config)
        with _solver_errors():
            pipe.fit(X, y)
        return pipe

    def cross_validate_train(
        self, X: np.ndarray, y: np.ndarray, config: TrainingConfig, folds: int
    ) -> Tuple[Pipeline, TrainingConfig]:
        if config.search is None:
            raise ValueError("cross_validate_train needs a config with a search policy")
        param_grid = self.param_grid(config)
        n_points = int(np.prod([len(v) for v in param_grid.values()]))
        logger.info("Grid search: %d point(s) x %d folds over %s", n_points, folds, ", ".join(param_grid))

        # accuracy is 1 - misclassification rate; ties go to the first grid point
        search = GridSearchCV(
            estimator=self.build_pipeline(config),
            param_grid=param_grid,
            scoring="accuracy",
            cv=KFold(n_splits=folds, shuffle=True, random_state=config.random_state),
            n_jobs=config.search.n_jobs,
            refit=True,
            error_score="raise",
        )
        with _solver_errors():
            search.fit(X, y)

        prefix = self._param_prefix(config)
        best = {name[len(prefix):]: value for name, value in search.best_params_.items()}
        logger.info("Best cross-validated error %.4f with %s", 1.0 - search.best_score_, best)
        return search.best_estimator_, config.replace(**best)

    def predict(self, model: Pipeline, features: np.ndarray) -> int:
        sample = np.asarray(features, dtype=np.float64).reshape(1, -1)
        return int(model.predict(sample)[0])

    def support_vector_count(self, model: Pipeline) -> int:
        clf = model.named_steps["clf"]
        if isinstance(clf, OneVsRestClassifier):
            return int(sum(est.support_.shape[0] for est in clf.estimators_))
        return int(clf.support_.shape[0])
