from __future__ import annotations

from typing import List, Optional


class PipelineError(Exception):
    """Base class for failures surfaced by /generate-csv."""

    status_code: int = 500


class FetchExhausted(PipelineError):
    def __init__(
        self,
        label: str,
        attempts: int,
        last_error: str,
        status_code: Optional[int] = None,
    ):
        self.label = label
        self.attempts = attempts
        self.last_error = last_error
        if status_code is not None:
            self.status_code = status_code
        super().__init__(f"Failed to fetch {label} after {attempts} attempts: {last_error}")


class EmptySource(PipelineError):
    def __init__(self, labels: List[str]):
        self.labels = list(labels)
        super().__init__(
            "Invalid or empty response received from: " + ", ".join(self.labels)
        )


class WriteFailed(PipelineError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"CSV file operation failed: {reason}")


class UnexpectedFailure(PipelineError):
    pass
