# -*- coding: utf-8 -*-
"""
src/markdownocr/errors.py

Exception taxonomy for the capture-to-recognition pipeline.

Every stage-local failure is converted into exactly one of these types before
it reaches the result window. `SelectionCancelled` is deliberately not a
`MarkdownOCRError`: a cancelled selection stops the pipeline silently.
"""

from typing import Optional

REMEDIATION_HINT = (
    "Please make sure:\n"
    "1. The Ollama service is running (ollama serve)\n"
    "2. The model is installed (ollama pull {model})\n"
    "3. The service address is correct ({base_url})"
)


class MarkdownOCRError(Exception):
    """Base class for all user-visible pipeline failures."""


class CaptureError(MarkdownOCRError):
    """The display surface could not be read. Fatal."""


class SelectionCancelled(Exception):
    """The user cancelled the region selection. Not an error."""


class PreprocessError(MarkdownOCRError):
    """Cropping, transforming or encoding the selected region failed."""


class RecognitionError(MarkdownOCRError):
    """
    Base class for failures of the OCR backend call.

    Attributes:
        elapsed_seconds (float): Wall-clock time spent on the attempt, measured
                                 the same way as for a successful result.
    """

    def __init__(self, message: str, elapsed_seconds: float = 0.0):
        super().__init__(message)
        self.elapsed_seconds = elapsed_seconds

    def hint(self, model: str, base_url: str) -> str:
        """Returns the remediation text shown under the error message."""
        return REMEDIATION_HINT.format(model=model, base_url=base_url)


class BackendUnreachableError(RecognitionError):
    """Connection refused, DNS failure or any other transport-level failure."""

    def __init__(self, endpoint: str, reason: str = "", elapsed_seconds: float = 0.0):
        message = f"Could not connect to the Ollama backend at {endpoint}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, elapsed_seconds)
        self.endpoint = endpoint


class RecognitionTimeoutError(RecognitionError, TimeoutError):
    """The backend did not answer within the configured deadline."""

    def __init__(self, timeout: float, elapsed_seconds: float = 0.0):
        super().__init__(
            f"The Ollama request timed out after {timeout:g} seconds. "
            "Check the network connection and the service status.",
            elapsed_seconds,
        )
        self.timeout = timeout


class BackendRejectedError(RecognitionError):
    """The backend answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str, elapsed_seconds: float = 0.0):
        super().__init__(
            f"Ollama API request failed (status code: {status_code}): {body}",
            elapsed_seconds,
        )
        self.status_code = status_code
        self.body = body


class IncompleteResponseError(RecognitionError):
    """The backend returned `done: false` although a complete result was requested."""

    def __init__(self, elapsed_seconds: float = 0.0):
        super().__init__("The Ollama API response is incomplete (done is not true).", elapsed_seconds)


class MalformedResponseError(RecognitionError):
    """The response body could not be parsed into the expected structure."""

    def __init__(self, reason: str, body: Optional[str] = None, elapsed_seconds: float = 0.0):
        super().__init__(f"Failed to parse the Ollama API response: {reason}", elapsed_seconds)
        self.body = body
