"""Domain exceptions for conversion and CLI diagnostics."""

from __future__ import annotations

from pathlib import Path


class ConversionStageError(RuntimeError):
    """Raised when a specific conversion stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped conversion error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class EmptyInputError(ConversionStageError):
    """Raised when input text is empty after trimming whitespace."""

    def __init__(self, source: Path | None = None) -> None:
        """Initialize an empty-input error, naming the source file when known."""

        detail = (
            "Input text is empty."
            if source is None
            else f"Input file `{source}` is empty."
        )
        super().__init__(
            stage="input",
            detail=detail,
            hint="Provide a file with non-whitespace text content.",
        )
        self.source = source
