"""Custom exceptions for shownotes.

Errors are split by how far they are allowed to travel:

Exception Hierarchy:
    ShowNotesError (base)
    ├── RunScopedError - abort the whole invocation
    │   ├── DependencyMissingError - required external tool or package absent
    │   ├── CredentialMissingError - required API key absent
    │   ├── InvalidSelectionError - malformed RSS or channel selection parameters
    │   └── PromptFileError - unreadable custom prompt file
    └── ItemScopedError - abort the current item only; batches continue
        ├── MetadataExtractionError
        ├── AcquisitionError
        ├── UnsupportedFormatError
        ├── TranscriptionFailedError
        │   └── TranscriptionTimeoutError
        ├── FeedFetchError
        │   └── FeedFetchTimeoutError
        ├── NoMatchingItemsError
        ├── LLMGenerationError
        └── ItemFailedError - raised by the orchestrator, wraps the stage cause
"""

from typing import Optional


class ShowNotesError(Exception):
    """Base exception for all shownotes errors.

    Attributes:
        message: Human-readable error message
        stage: Pipeline stage or component that failed (e.g., "audio", "Deepgram")
        suggestion: Optional suggestion for resolving the error
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.stage = stage
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with stage and suggestion."""
        parts = [f"[{self.stage}] {self.message}" if self.stage else self.message]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " ".join(parts)


class RunScopedError(ShowNotesError):
    """Fatal for the whole run; propagates to the CLI boundary."""


class ItemScopedError(ShowNotesError):
    """Fatal for one item; batch drivers log it and continue."""


class DependencyMissingError(RunScopedError):
    """Raised when a required external tool or Python package is unavailable.

    Example:
        >>> raise DependencyMissingError(
        ...     message="yt-dlp not found on PATH",
        ...     stage="audio",
        ...     dependency="yt-dlp",
        ...     suggestion="Install with: pip install yt-dlp"
        ... )
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        dependency: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.dependency = dependency
        if dependency and dependency not in message:
            message = f"{message} (dependency: {dependency})"
        super().__init__(message=message, stage=stage, suggestion=suggestion)


class CredentialMissingError(RunScopedError):
    """Raised before any network call when a backend's API key is not configured."""

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        env_var: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.env_var = env_var
        if env_var and suggestion is None:
            suggestion = f"Set the {env_var} environment variable or add it to .env"
        super().__init__(message=message, stage=stage, suggestion=suggestion)


class InvalidSelectionError(RunScopedError):
    """Raised when RSS or channel selection parameters conflict or are out of range."""


class PromptFileError(RunScopedError):
    """Raised when a custom prompt file cannot be read."""


class MetadataExtractionError(ItemScopedError):
    """Raised when video metadata cannot be resolved or a required field is empty."""


class AcquisitionError(ItemScopedError):
    """Raised when the downloader or transcoder exits with a failure.

    Attributes:
        stderr: Captured standard error of the external tool, if any
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        stderr: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.stderr = stderr
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message=message, stage=stage, suggestion=suggestion)


class UnsupportedFormatError(ItemScopedError):
    """Raised when a local media file has an unknown or undetectable format."""


class TranscriptionFailedError(ItemScopedError):
    """Raised when a transcription backend fails or reports an error status."""


class TranscriptionTimeoutError(TranscriptionFailedError):
    """Raised when a polled transcription job does not finish in time."""


class FeedFetchError(ItemScopedError):
    """Raised when the RSS feed cannot be fetched or parsed."""


class FeedFetchTimeoutError(FeedFetchError):
    """Raised when the RSS feed request exceeds its timeout."""


class NoMatchingItemsError(ItemScopedError):
    """Raised when a feed has no processable items after filtering or selection."""


class LLMGenerationError(ItemScopedError):
    """Raised when an LLM provider call fails or returns nothing."""


class ItemFailedError(ItemScopedError):
    """Raised by the orchestrator when a stage fails for one item.

    Attributes:
        item: Identifier of the failing item (title, URL or path)
        cause: Underlying exception raised by the stage
    """

    def __init__(self, stage: str, item: str, cause: BaseException) -> None:
        self.item = item
        self.cause = cause
        super().__init__(message=f"{item}: {cause}", stage=stage)
