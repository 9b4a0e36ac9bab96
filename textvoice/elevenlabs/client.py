"""ElevenLabs HTTP client utilities for voice listing and speech synthesis.

Responsibilities:
- Send minimal voice-listing and text-to-speech requests to ElevenLabs' REST API.
- Expose streamed speech responses as a finite iterator of byte chunks.
- Raise actionable provider exceptions for stage-level error mapping.
"""

from __future__ import annotations

import json
import re
import socket
from typing import Any, Iterator, Mapping

import requests


DEFAULT_BASE_URL = "https://api.elevenlabs.io"
VOICE_PAGE_SIZE = 100
_STREAM_CHUNK_BYTES = 8192


class ElevenLabsProviderError(RuntimeError):
    """Raised when an ElevenLabs request fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        provider_code: str | None = None,
    ) -> None:
        """Initialize provider error metadata for stage-aware diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.provider_code = provider_code


class _ElevenLabsBaseClient:
    """Shared ElevenLabs HTTP settings and helpers used by endpoint clients."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize ElevenLabs HTTP client settings."""

        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _require_api_key(self) -> None:
        """Require API key presence before issuing ElevenLabs requests."""

        if not self.api_key:
            raise ElevenLabsProviderError(
                "Missing ElevenLabs API key. Set `ELEVENLABS_API_KEY`, use `--api-key`, "
                "or `--prompt-api-key`.",
                failure_kind="invalid_api_key",
            )

    def _headers(self, accept: str) -> dict[str, str]:
        """Return authenticated request headers."""

        return {
            "xi-api-key": self.api_key,
            "Accept": accept,
        }

    def _send(self, method: str, endpoint_path: str, **kwargs: Any) -> requests.Response:
        """Issue one request and map HTTP/transport failures consistently."""

        endpoint = f"{self.base_url}{endpoint_path}"
        send = requests.get if method == "GET" else requests.post
        try:
            response = send(endpoint, timeout=self.timeout_seconds, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as exc:
            provider_error = self._http_error_to_provider_error(exc)
            if exc.response is not None:
                exc.response.close()
            raise provider_error from exc
        except requests.RequestException as exc:
            raise self._transport_error(exc) from exc
        except TimeoutError as exc:
            raise ElevenLabsProviderError(
                "ElevenLabs request timed out.",
                failure_kind="timeout",
            ) from exc
        return response

    @classmethod
    def _transport_error(cls, exc: Exception) -> ElevenLabsProviderError:
        """Build a provider error for a network-layer failure."""

        failure_kind = cls._classify_transport_failure(exc)
        if failure_kind == "timeout":
            detail = "ElevenLabs request timed out."
        else:
            detail = (
                "ElevenLabs request transport error: "
                f"{cls._short_message(str(exc))}"
            )
        return ElevenLabsProviderError(detail, failure_kind=failure_kind)

    @staticmethod
    def _decode_error_body(exc: requests.HTTPError) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        response = exc.response
        if response is None:
            return ""
        try:
            return bytes(response.content).decode("utf-8", errors="replace").strip()
        except (TypeError, requests.RequestException):
            return ""

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact API-key-like tokens from provider error content."""

        redacted = re.sub(r"\bsk_[A-Za-z0-9]{8,}\b", "[redacted-key]", text)
        redacted = re.sub(
            r"(?i)xi-api-key[\"':= ]+[A-Za-z0-9_-]{12,}",
            "xi-api-key [redacted-key]",
            redacted,
        )
        return redacted

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @classmethod
    def _extract_provider_message(cls, body: str) -> tuple[str, str | None]:
        """Extract a concise provider-facing message and optional provider status code.

        ElevenLabs reports errors as `{"detail": {"status": ..., "message": ...}}`
        or `{"detail": "..."}`.
        """

        if not body:
            return "", None

        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact_sensitive_tokens(body)), None

        provider_code: str | None = None
        message: str | None = None
        if isinstance(payload, dict):
            detail = payload.get("detail")
            if isinstance(detail, dict):
                status_value = detail.get("status")
                if isinstance(status_value, str) and status_value.strip():
                    provider_code = status_value.strip()
                message_value = detail.get("message")
                if isinstance(message_value, str) and message_value.strip():
                    message = message_value.strip()
            elif isinstance(detail, str) and detail.strip():
                message = detail.strip()

        if message is None:
            message = body

        return cls._short_message(cls._redact_sensitive_tokens(message)), provider_code

    @staticmethod
    def _classify_http_failure(
        status_code: int,
        provider_message: str,
        provider_code: str | None,
    ) -> str:
        """Classify ElevenLabs HTTP errors into deterministic diagnostic kinds."""

        message_lower = provider_message.lower()
        normalized_code = provider_code.lower() if provider_code is not None else ""

        if status_code == 401 or normalized_code in {"invalid_api_key", "needs_authorization"}:
            return "invalid_api_key"
        if normalized_code == "quota_exceeded" or (
            status_code == 429 and "quota" in message_lower
        ):
            return "quota_exceeded"
        if normalized_code == "voice_not_found" or (
            status_code == 404 and "voice" in message_lower
        ):
            return "voice_not_found"
        if normalized_code == "model_not_found" or (
            "model" in message_lower
            and any(phrase in message_lower for phrase in ("not found", "does not exist", "invalid"))
        ):
            return "invalid_model"
        if status_code in {408, 504} or "timeout" in message_lower or "timed out" in message_lower:
            return "timeout"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @classmethod
    def _http_error_to_provider_error(cls, exc: requests.HTTPError) -> ElevenLabsProviderError:
        """Convert HTTP errors into normalized provider exceptions with metadata."""

        response = exc.response
        status_code = response.status_code if response is not None else 0
        reason = ""
        if response is not None and isinstance(getattr(response, "reason", None), str):
            reason = response.reason.strip()
        body = cls._decode_error_body(exc)
        provider_message, provider_code = cls._extract_provider_message(body)
        failure_kind = cls._classify_http_failure(status_code, provider_message, provider_code)

        headline = {
            "invalid_api_key": "ElevenLabs authentication failed",
            "quota_exceeded": "ElevenLabs quota is insufficient for this request",
            "voice_not_found": "ElevenLabs could not find the requested voice",
            "invalid_model": "ElevenLabs rejected the selected model",
            "timeout": "ElevenLabs request timed out",
        }.get(failure_kind, "ElevenLabs request failed")

        status_label = f"HTTP {status_code} {reason}" if reason else f"HTTP {status_code}"
        if provider_message:
            detail = f"{headline} ({status_label}): {provider_message}"
        else:
            detail = f"{headline} ({status_label})."

        return ElevenLabsProviderError(
            detail,
            failure_kind=failure_kind,
            status_code=status_code,
            provider_code=provider_code,
        )


class ElevenLabsVoicesClient(_ElevenLabsBaseClient):
    """Minimal requests-based client for the ElevenLabs voice listing endpoint."""

    def list_voices(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
        page_size: int = VOICE_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """Return raw voice entries from `GET /v2/voices`."""

        self._require_api_key()

        params: dict[str, str] = {}
        if search:
            params["search"] = search
        if category:
            params["category"] = category
        params["page_size"] = str(page_size)

        response = self._send(
            "GET",
            "/v2/voices",
            headers=self._headers("application/json"),
            params=params,
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ElevenLabsProviderError(
                "ElevenLabs returned invalid JSON payload for voice listing."
            ) from exc
        if not isinstance(payload, Mapping):
            raise ElevenLabsProviderError("ElevenLabs voice listing payload is not an object.")

        voices = payload.get("voices")
        if voices is None:
            return []
        if not isinstance(voices, list):
            raise ElevenLabsProviderError("ElevenLabs voice listing `voices` is not a list.")
        return [entry for entry in voices if isinstance(entry, Mapping)]


class ElevenLabsSpeechClient(_ElevenLabsBaseClient):
    """Minimal requests-based client for ElevenLabs text-to-speech synthesis."""

    def stream_speech(
        self,
        *,
        voice_id: str,
        body: Mapping[str, object],
        params: Mapping[str, str] | None = None,
    ) -> Iterator[bytes]:
        """Start a synthesis request and return its audio byte chunks.

        The request is issued eagerly so HTTP failures surface here; the returned
        iterator is finite, single-use, and closes the response when exhausted.
        """

        self._require_api_key()

        response = self._send(
            "POST",
            f"/v1/text-to-speech/{voice_id}",
            headers={**self._headers("audio/mpeg"), "Content-Type": "application/json"},
            params=dict(params or {}),
            json=dict(body),
            stream=True,
        )
        return self._iter_response_chunks(response)

    @classmethod
    def _iter_response_chunks(cls, response: requests.Response) -> Iterator[bytes]:
        """Yield non-empty response chunks, mapping mid-stream transport failures."""

        try:
            for chunk in response.iter_content(chunk_size=_STREAM_CHUNK_BYTES):
                if chunk:
                    yield chunk
        except requests.RequestException as exc:
            raise cls._transport_error(exc) from exc
        finally:
            response.close()
