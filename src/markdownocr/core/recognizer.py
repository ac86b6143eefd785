# -*- coding: utf-8 -*-
"""
src/markdownocr/core/recognizer.py

Ollama client for the recognition step.

Sends one preprocessed image to the local Ollama `/api/generate` endpoint,
measures how long the round trip takes and maps every way the call can go
wrong onto the typed errors in `markdownocr.errors`. A single attempt is made;
nothing is retried.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from ..config import GENERATE_ENDPOINT, BackendSettings
from ..errors import (
    BackendRejectedError,
    BackendUnreachableError,
    IncompleteResponseError,
    MalformedResponseError,
    RecognitionTimeoutError,
)
from .image_processor import EncodedPayload

logger = logging.getLogger(__name__)

# Telemetry fields Ollama adds to a generate response; logged, never interpreted.
TELEMETRY_FIELDS = (
    "total_duration",
    "load_duration",
    "prompt_eval_count",
    "prompt_eval_duration",
    "eval_count",
    "eval_duration",
)


@dataclass(frozen=True)
class RecognitionResult:
    """
    Outcome of a successful OCR attempt.

    Attributes:
        text (str): Recognized text with surrounding whitespace removed. May be empty.
        elapsed_seconds (float): Time from request dispatch until the response
                                 body was parsed.
        success (bool): Always True; failures are raised, not returned.
        telemetry (dict): Timing and token counters reported by the backend.
    """

    text: str
    elapsed_seconds: float
    success: bool = True
    telemetry: Dict[str, Any] = field(default_factory=dict, compare=False)


class OllamaRecognizer:
    """
    Recognition client for Ollama (local inference server).
    """

    def __init__(
        self,
        settings: BackendSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the recognizer.

        Args:
            settings: Immutable backend configuration for this run.
            transport: Optional httpx transport. Tests pass an
                       `httpx.MockTransport` here to stand in for the backend.
        """
        self.settings = settings
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.base_url,
            timeout=httpx.Timeout(timeout),
            transport=self._transport,
        )

    def build_request(self, payload: EncodedPayload) -> Dict[str, Any]:
        """Builds the JSON body of a non-streaming generate request."""
        return {
            "model": self.settings.model,
            "prompt": self.settings.prompt,
            "stream": False,
            "images": [payload.base64],
        }

    async def recognize(self, payload: EncodedPayload) -> RecognitionResult:
        """
        Send one image to Ollama and return the recognized text.

        Args:
            payload: The preprocessed, PNG-encoded region.

        Returns:
            RecognitionResult with the trimmed text and the elapsed time.

        Raises:
            RecognitionTimeoutError: The backend did not answer within the timeout.
            BackendUnreachableError: The endpoint could not be reached.
            BackendRejectedError: The backend answered with a non-2xx status.
            IncompleteResponseError: The response did not have `done: true`.
            MalformedResponseError: The body was not the expected JSON object.
        """
        request = self.build_request(payload)
        endpoint = self.settings.generate_url
        timeout = self.settings.timeout

        logger.info(f"Sending OCR request to {endpoint}")
        logger.info(f"Using model: {self.settings.model}")

        start = time.perf_counter()

        def elapsed() -> float:
            return time.perf_counter() - start

        try:
            # The client is closed on every exit path, including cancellation
            # by wait_for when the deadline passes.
            async with self._client(timeout) as client:
                response = await asyncio.wait_for(
                    client.post(GENERATE_ENDPOINT, json=request),
                    timeout=timeout,
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RecognitionTimeoutError(timeout, elapsed()) from e
        except httpx.DecodingError as e:
            raise MalformedResponseError(str(e), elapsed_seconds=elapsed()) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise BackendUnreachableError(endpoint, str(e), elapsed()) from e
        except Exception as e:
            # Transport internals (e.g. anyio task groups) can fail outside httpx's hierarchy.
            logger.debug(f"Unexpected transport failure: {e!r}")
            raise BackendUnreachableError(endpoint, str(e) or type(e).__name__, elapsed()) from e

        if not response.is_success:
            raise BackendRejectedError(response.status_code, response.text, elapsed())

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError(str(e), response.text, elapsed()) from e

        if not isinstance(body, dict):
            raise MalformedResponseError(
                f"expected a JSON object, got {type(body).__name__}", response.text, elapsed()
            )

        if body.get("done") is not True:
            raise IncompleteResponseError(elapsed())

        text = body.get("response")
        if text is None:
            # An absent text field counts as "nothing recognized", not as malformed.
            text = ""
        elif not isinstance(text, str):
            raise MalformedResponseError(
                f"'response' must be a string, got {type(text).__name__}", response.text, elapsed()
            )
        text = text.strip()

        elapsed_seconds = elapsed()
        telemetry = {key: body[key] for key in TELEMETRY_FIELDS if key in body}

        logger.info(f"OCR finished in {elapsed_seconds:.2f} seconds")
        if telemetry:
            logger.debug(f"Backend telemetry: {telemetry}")

        return RecognitionResult(text=text, elapsed_seconds=elapsed_seconds, telemetry=telemetry)

    async def is_backend_available(self) -> bool:
        """
        Best-effort reachability probe of the Ollama root URL.

        Advisory only: the result never gates `recognize`. Every failure is
        reported as False.
        """
        try:
            async with self._client(self.settings.probe_timeout) as client:
                response = await asyncio.wait_for(client.get("/"), timeout=self.settings.probe_timeout)
            return response.is_success
        except Exception as e:
            logger.debug(f"Backend probe of {self.settings.base_url} failed: {e!r}")
            return False

    def service_info(self) -> str:
        """Returns a human-readable summary of the backend configuration."""
        return (
            f"Ollama service address: {self.settings.base_url}\n"
            f"API endpoint: {GENERATE_ENDPOINT}\n"
            f"Model: {self.settings.model}\n"
            f"Request timeout: {self.settings.timeout:g} seconds"
        )
