"""Error hierarchy for the spoken-letter training pipeline.

Every stage raises one of these and none of them is recovered internally:
the command-line entry point turns them into a non-zero exit status.
"""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Optional, Union


class SpokenLettersError(RuntimeError):
    """Base error for all pipeline failures."""

    def __init__(self, message: str, *, hint: Optional[str] = None) -> None:
        final_message = message
        if hint:
            final_message = f"{message}\n{self._format_hint(hint)}"
        super().__init__(final_message)
        self.message = message
        self.hint = hint

    @staticmethod
    def _format_hint(hint: str) -> str:
        return textwrap.indent(f"Hint: {hint}", prefix="  ")


class FileUnavailable(SpokenLettersError):
    """Raised when a dataset file cannot be opened."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"cannot read file {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class MalformedRow(SpokenLettersError):
    """Raised when a dataset row is missing, truncated or unparseable."""

    def __init__(self, path: Union[str, Path], line_no: int, reason: str) -> None:
        super().__init__(
            f"{path}:{line_no}: {reason}",
            hint="each row holds the feature values followed by the class label, comma separated",
        )
        self.path = Path(path)
        self.line_no = line_no
        self.reason = reason


class TrainingFailed(SpokenLettersError):
    """Raised when the solver rejects the configuration or does not converge."""


class PredictionOnUntrainedModel(SpokenLettersError):
    """Raised when a classifier handle is asked to predict without a fitted model."""
