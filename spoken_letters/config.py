"""Dataset schema and SVM training configuration."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

# N.B. classes are spoken alphabetic letters A-Z labelled 1 -> 26
NUMBER_OF_TRAINING_SAMPLES = 6238
NUMBER_OF_TESTING_SAMPLES = 1559
ATTRIBUTES_PER_SAMPLE = 617
NUMBER_OF_CLASSES = 26

# Set to False to train once with the parameters in default_training_config().
USE_GRID_SEARCH = True

KERNELS = ("linear", "poly", "rbf", "sigmoid")
STRATEGIES = ("ovo", "ovr")

# Kernel parameters that only mean something for a given kernel.
KERNEL_PARAMETERS: Dict[str, Tuple[str, ...]] = {
    "linear": (),
    "poly": ("degree", "gamma", "coef0"),
    "rbf": ("gamma",),
    "sigmoid": ("gamma", "coef0"),
}


def _ensure_positive(name: str, value: float) -> float:
    if value <= 0:
        raise ValueError(f"{name} must be positive, received {value!r}")
    return value


def _ensure_enum(name: str, value: str, options: Iterable[str]) -> str:
    if value not in options:
        allowed = ", ".join(sorted(options))
        raise ValueError(f"{name} must be one of {allowed}, received {value!r}")
    return value


@dataclass(frozen=True)
class DatasetSchema:
    """Row counts and shape shared by the loader, trainer and harness."""
    training_samples: int = NUMBER_OF_TRAINING_SAMPLES
    testing_samples: int = NUMBER_OF_TESTING_SAMPLES
    attributes_per_sample: int = ATTRIBUTES_PER_SAMPLE
    number_of_classes: int = NUMBER_OF_CLASSES

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            _ensure_positive(f.name, getattr(self, f.name))


DEFAULT_SCHEMA = DatasetSchema()


@dataclass(frozen=True)
class ParamGrid:
    """Log-spaced range: min_val * log_step**k for every k with value < max_val."""
    min_val: float
    max_val: float
    log_step: float

    def __post_init__(self) -> None:
        _ensure_positive("min_val", self.min_val)
        if self.max_val <= self.min_val:
            raise ValueError(f"max_val must exceed min_val ({self.min_val}), received {self.max_val!r}")
        if self.log_step <= 1:
            raise ValueError(f"log_step must be > 1, received {self.log_step!r}")

    def values(self) -> List[float]:
        out: List[float] = []
        k = 0
        while True:
            val = self.min_val * self.log_step ** k
            if val >= self.max_val:
                break
            out.append(val)
            k += 1
        return out

    def __contains__(self, value: float) -> bool:
        return any(abs(value - v) <= 1e-12 * max(1.0, abs(v)) for v in self.values())


# Default grids, same ranges libsvm-style auto training uses.
DEFAULT_C_GRID = ParamGrid(0.1, 500.0, 5.0)
DEFAULT_GAMMA_GRID = ParamGrid(1e-5, 0.6, 15.0)
DEFAULT_COEF0_GRID = ParamGrid(0.1, 300.0, 14.0)
DEFAULT_DEGREE_GRID = ParamGrid(1.0, 6.0, 2.0)


@dataclass(frozen=True)
class SearchPolicy:
    """Cross-validated grid search over C and, optionally, kernel parameters."""
    folds: int = 10
    c_grid: ParamGrid = DEFAULT_C_GRID
    gamma_grid: Optional[ParamGrid] = None
    coef0_grid: Optional[ParamGrid] = None
    degree_grid: Optional[ParamGrid] = None
    n_jobs: Optional[int] = 1

    def __post_init__(self) -> None:
        if self.folds < 2:
            raise ValueError(f"folds must be >= 2, received {self.folds!r}")

    @classmethod
    def for_kernel(cls, kernel: str, folds: int = 10, n_jobs: Optional[int] = 1) -> "SearchPolicy":
        """Policy that also searches every parameter the kernel uses."""
        params = KERNEL_PARAMETERS[_ensure_enum("kernel", kernel, KERNELS)]
        return cls(
            folds=folds,
            gamma_grid=DEFAULT_GAMMA_GRID if "gamma" in params else None,
            coef0_grid=DEFAULT_COEF0_GRID if "coef0" in params else None,
            degree_grid=DEFAULT_DEGREE_GRID if "degree" in params else None,
            n_jobs=n_jobs,
        )

    def grids_for(self, kernel: str) -> Dict[str, List[float]]:
        """Values to search, keyed by TrainingConfig field. Kernel choice is never searched."""
        grids: Dict[str, List[float]] = {"C": self.c_grid.values()}
        optional = {"gamma": self.gamma_grid, "coef0": self.coef0_grid, "degree": self.degree_grid}
        for name in KERNEL_PARAMETERS[kernel]:
            grid = optional[name]
            if grid is None:
                continue
            values = grid.values()
            if name == "degree":
                values = sorted({int(round(v)) for v in values})
            grids[name] = values
        return grids


@dataclass(frozen=True)
class TrainingConfig:
    """
    SVM family, kernel, hyper-parameters and search policy for one run.

    `search=None` trains once with the values given here; otherwise the
    values of the searched parameters are replaced by the winning ones.
    """
    strategy: str = "ovo"  # one-vs-one (libsvm C-SVC) or one-vs-rest
    kernel: str = "linear"
    degree: int = 3  # poly only
    gamma: Union[float, str] = "scale"  # poly / rbf / sigmoid
    coef0: float = 0.0  # poly / sigmoid
    C: float = 10.0
    max_iter: int = -1  # -1: stop on epsilon only
    epsilon: float = 1e-6
    class_weight: Optional[Mapping[int, float]] = None
    search: Optional[SearchPolicy] = None
    standardize: bool = False
    random_state: int = 0

    def __post_init__(self) -> None:
        _ensure_enum("strategy", self.strategy, STRATEGIES)
        _ensure_enum("kernel", self.kernel, KERNELS)
        _ensure_positive("C", self.C)
        _ensure_positive("epsilon", self.epsilon)
        if self.max_iter == 0 or self.max_iter < -1:
            raise ValueError(f"max_iter must be positive or -1, received {self.max_iter!r}")
        if self.degree < 0:
            raise ValueError(f"degree must be >= 0, received {self.degree!r}")
        if isinstance(self.gamma, str):
            _ensure_enum("gamma", self.gamma, ("scale", "auto"))
        elif self.gamma < 0:
            raise ValueError(f"gamma must be >= 0, received {self.gamma!r}")
        if self.class_weight is not None:
            if self.strategy != "ovo":
                raise ValueError("class_weight is only supported with the 'ovo' strategy")
            for label, weight in self.class_weight.items():
                _ensure_positive(f"class_weight[{label}]", weight)

    @property
    def search_mode(self) -> str:
        return "fixed" if self.search is None else "grid-search"

    def replace(self, **changes) -> "TrainingConfig":
        return dataclasses.replace(self, **changes)

    def describe(self) -> str:
        gamma = self.gamma if isinstance(self.gamma, str) else f"{self.gamma:g}"
        return (
            f"kernel {self.kernel} ({self.strategy}), degree {self.degree}, gamma {gamma}, "
            f"coef0 {self.coef0:g}, C {self.C:g}"
        )


def default_training_config() -> TrainingConfig:
    """Linear C-SVC with C = 10; grid search over C when USE_GRID_SEARCH is set."""
    return TrainingConfig(search=SearchPolicy() if USE_GRID_SEARCH else None)
