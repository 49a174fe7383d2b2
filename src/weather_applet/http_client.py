"""Async JSON fetch capability handed to weather providers."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .i18n import _ as default_translator
from .redaction import sanitize_text
from .weather.base import ErrorSink, HttpErrorHandler, Translator
from .weather.models import AppletError, ErrorOutcome, HttpError


class HttpClient:
    """Thin `httpx.AsyncClient` wrapper that turns every failure into an `HttpError`.

    Failures never raise. The provider's `on_error` handler sees the error first; unless it
    answers `ErrorOutcome.SUPPRESSED`, a hard error is reported to the sink. Either way the
    caller gets `None`.
    """

    def __init__(
        self,
        errors: ErrorSink,
        logger: logging.Logger,
        *,
        timeout_seconds: float = 15.0,
        user_agent: str = "weather-applet/0.1",
        service_name: str | None = None,
        translate: Translator = default_translator,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.errors = errors
        self.logger = logger
        self.service_name = service_name
        self.translate = translate
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": user_agent,
            },
            transport=transport,
        )

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def load_json(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        method: str = "GET",
        on_error: HttpErrorHandler | None = None,
    ) -> Any:
        try:
            payload = await self._request_json(url, headers=headers, method=method)
        except _FetchFailed as failure:
            self._dispatch_error(failure.error, on_error)
            return None
        return payload

    async def _request_json(
        self,
        url: str,
        *,
        headers: dict[str, str] | None,
        method: str,
    ) -> Any:
        try:
            response = await self._client.request(method, url, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise _FetchFailed(
                HttpError(
                    code=status,
                    message="bad status code",
                    reason_phrase=exc.response.reason_phrase,
                    url=url,
                    data=sanitize_text(exc.response.text[:300]),
                )
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            # Transport and URL failures carry no status code.
            raise _FetchFailed(
                HttpError(
                    code=0,
                    message="no network response",
                    reason_phrase=type(exc).__name__,
                    url=url,
                    data=sanitize_text(str(exc)),
                )
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise _FetchFailed(
                HttpError(
                    code=-1,
                    message="bad api response - non-json",
                    reason_phrase=response.reason_phrase,
                    url=url,
                    data=sanitize_text(response.text[:300]),
                )
            ) from exc

    def _dispatch_error(self, error: HttpError, on_error: HttpErrorHandler | None) -> None:
        self.logger.debug(
            "HTTP %s failed for %s: %s (%s)",
            "request" if error.code <= 0 else f"status {error.code}",
            error.url,
            error.message,
            error.reason_phrase,
        )
        outcome = on_error(error) if on_error is not None else ErrorOutcome.PROPAGATE
        if outcome is ErrorOutcome.SUPPRESSED:
            return

        self.logger.error("Error calling URL %s: %s %s", error.url, error.code, error.message)
        self.errors.show_error(
            AppletError(
                type="hard",
                service=self.service_name,
                detail=error.message,
                message=self._user_message(error),
            )
        )

    def _user_message(self, error: HttpError) -> str:
        if error.code == 0:
            return self.translate("Make sure you are connected to the internet and try again")
        if error.code == -1:
            return self.translate("Weather service returned a response that could not be read")
        return self.translate("Weather service responded with HTTP status %(code)s") % {
            "code": error.code
        }


class _FetchFailed(Exception):
    def __init__(self, error: HttpError) -> None:
        super().__init__(error.message)
        self.error = error
