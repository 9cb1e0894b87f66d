"""Best-effort extraction of error signals from agent stderr.

Agents built on the AI SDK print failures like::

    ProviderModelNotFoundError: ProviderModelNotFoundError
     data: {
      providerID: "acme",
      modelID: "x1",
    }

This is a heuristic over free text. Bump `CLASSIFIER_VERSION` whenever the
patterns change so consumers can tell which behaviour produced a signal.
"""

from __future__ import annotations

from dataclasses import dataclass
import re


CLASSIFIER_VERSION = 1

MAX_BUFFER_CHARS = 10_000
RETAINED_CHARS = 5_000

ERROR_PATTERN = re.compile(r"(\w+Error):\s*(\w+)?\s*\n?\s*data:\s*\{([^}]+)\}")
PROVIDER_PATTERN = re.compile(r'"?providerID"?:\s*"([^"]+)"')
MODEL_PATTERN = re.compile(r'"?modelID"?:\s*"([^"]+)"')


@dataclass(frozen=True)
class ErrorSignal:
    """A structured error recognized in the diagnostic stream."""

    error_type: str
    """Name of the error class, e.g. `ProviderModelNotFoundError`."""
    message: str
    """Human-readable classification."""
    provider_id: str | None = None
    model_id: str | None = None
    version: int = CLASSIFIER_VERSION


def classify(text: str) -> ErrorSignal | None:
    """Look for a structured error in `text`."""
    match = ERROR_PATTERN.search(text)
    if match is None:
        return None
    error_type = match.group(1)
    data = match.group(3)
    provider = m.group(1) if (m := PROVIDER_PATTERN.search(data)) else None
    model = m.group(1) if (m := MODEL_PATTERN.search(data)) else None
    if provider and model:
        message = f"Model not found: {provider}/{model}"
    else:
        message = f"Agent error: {error_type}"
    return ErrorSignal(error_type, message, provider_id=provider, model_id=model)


class DiagnosticBuffer:
    """Bounded accumulation of raw stderr text.

    Once the content grows past `max_chars`, only the trailing
    `retain_chars` characters are kept.
    """

    def __init__(self, max_chars: int = MAX_BUFFER_CHARS, retain_chars: int = RETAINED_CHARS):
        if retain_chars > max_chars:
            msg = "retain_chars must not exceed max_chars"
            raise ValueError(msg)
        self.max_chars = max_chars
        self.retain_chars = retain_chars
        self._text = ""

    def __len__(self) -> int:
        return len(self._text)

    @property
    def text(self) -> str:
        return self._text

    def append(self, chunk: str) -> None:
        self._text += chunk
        if len(self._text) > self.max_chars:
            self._text = self._text[-self.retain_chars :]

    def clear(self) -> None:
        self._text = ""


class DiagnosticClassifier:
    """Feeds stderr chunks into a buffer and reports recognized errors."""

    version = CLASSIFIER_VERSION

    def __init__(self, buffer: DiagnosticBuffer | None = None) -> None:
        self.buffer = buffer if buffer is not None else DiagnosticBuffer()

    def observe(self, chunk: str) -> ErrorSignal | None:
        """Append `chunk` and test the buffered text.

        A produced signal clears the buffer, so the same error is reported
        once. No match is the normal case and returns None.
        """
        self.buffer.append(chunk)
        signal = classify(self.buffer.text)
        if signal is not None:
            self.buffer.clear()
        return signal

    def reset(self) -> None:
        self.buffer.clear()
