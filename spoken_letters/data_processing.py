"""Loading of fixed-shape comma-separated feature datasets."""
from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple, Union

import numpy as np

from .errors import FileUnavailable, MalformedRow
from .log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Sample:
    features: np.ndarray  # [attributes_per_sample]
    label: int


@dataclass(frozen=True)
class Dataset:
    """In-memory dataset read from one CSV file."""
    X: np.ndarray  # [n_samples, attributes_per_sample], float32
    y: np.ndarray  # [n_samples], int
    source: str

    def __len__(self) -> int:
        return int(self.X.shape[0])

    @property
    def attributes_per_sample(self) -> int:
        return int(self.X.shape[1])

    def samples(self) -> Iterator[Sample]:
        for features, label in zip(self.X, self.y):
            yield Sample(features=features, label=int(label))


def parse_row(
    line: str,
    attributes_per_sample: int,
    number_of_classes: int,
    *,
    path: Union[str, Path] = "<string>",
    line_no: int = 1,
) -> Tuple[List[float], int]:
    """
    Parse one data line into (features, label).

    Tokens are comma separated with optional surrounding whitespace; a single
    terminating comma is allowed. The last token is the class label.
    """
    if not line.strip():
        raise MalformedRow(path, line_no, "blank line where a sample was expected")

    tokens = [tok.strip() for tok in line.split(",")]
    if tokens[-1] == "":
        tokens.pop()

    expected = attributes_per_sample + 1
    if len(tokens) != expected:
        raise MalformedRow(path, line_no, f"expected {expected} values, found {len(tokens)}")

    values: List[float] = []
    for col, tok in enumerate(tokens, start=1):
        try:
            val = float(tok)
        except ValueError:
            raise MalformedRow(path, line_no, f"column {col}: {tok!r} is not a number") from None
        if not math.isfinite(val):
            raise MalformedRow(path, line_no, f"column {col}: {tok!r} is not finite")
        values.append(val)

    label_val = values.pop()
    if not label_val.is_integer() or not 1 <= label_val <= number_of_classes:
        raise MalformedRow(
            path, line_no, f"class label {label_val:g} is not an integer in 1..{number_of_classes}"
        )
    return values, int(label_val)


def load_dataset(
    path: Union[str, Path],
    expected_rows: int,
    attributes_per_sample: int,
    number_of_classes: int,
) -> Dataset:
    """
    Read exactly `expected_rows` samples from `path`.

    A file that cannot be opened raises FileUnavailable; a bad or missing row
    raises MalformedRow. Lines after the declared rows are ignored.
    """
    path = Path(path)
    try:
        f = path.open("r")
    except OSError as exc:
        raise FileUnavailable(path, exc.strerror or str(exc)) from exc

    features: List[List[float]] = []
    labels: List[int] = []
    ignored = 0
    with f:
        try:
            for line_no, line in enumerate(f, start=1):
                if len(features) < expected_rows:
                    row, label = parse_row(
                        line, attributes_per_sample, number_of_classes, path=path, line_no=line_no
                    )
                    features.append(row)
                    labels.append(label)
                elif line.strip():
                    ignored += 1
        except UnicodeDecodeError as exc:
            raise MalformedRow(path, len(features) + 1, f"not a text file ({exc.reason})") from exc

    if len(features) < expected_rows:
        raise MalformedRow(
            path, len(features) + 1, f"file ends after {len(features)} of {expected_rows} declared rows"
        )
    if ignored:
        logger.warning("Ignored %d line(s) after the %d declared rows in %s", ignored, expected_rows, path)

    X = np.asarray(features, dtype=np.float32).reshape(expected_rows, attributes_per_sample)
    y = np.asarray(labels, dtype=np.int64)
    X.setflags(write=False)
    y.setflags(write=False)
    logger.info("Loaded %d samples x %d attributes from %s", X.shape[0], X.shape[1], path)
    return Dataset(X=X, y=y, source=str(path))
