"""HTTP client for the Ideogram generate endpoint and image downloads."""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Iterable, Iterator, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import requests

from .config import ClientConfig
from .errors import (
    ApiError,
    FetchError,
    ProtocolError,
    RequestTimeoutError,
    TransportError,
)
from .models import GenerationRequest, GenerationResult
from .registry import (
    API_KEY_HEADER,
    ERROR_MESSAGE_KEYS,
    RESPONSE_IMAGES_KEY,
    RESPONSE_INLINE_KEY,
    RESPONSE_URL_KEY,
)
from .request import build_body

_RAW_PREVIEW_LIMIT = 2000


class IdeogramClient:
    """Issue one generate call and resolve the returned images to bytes.

    The session's connection pool is shared by the generate request and the
    follow-up image downloads. Nothing is retried: a generate call may bill
    the account and is not idempotent.
    """

    def __init__(
        self, config: ClientConfig, *, session: requests.Session | None = None
    ) -> None:
        self.config = config
        self.session = session if session is not None else requests.Session()

    def __enter__(self) -> IdeogramClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def generate(
        self, request: GenerationRequest, body: dict[str, Any] | None = None
    ) -> list[GenerationResult]:
        """POST ``request`` and return one result per generated image.

        ``body`` is the output of ``build_body``; it is built here when the
        caller has not prepared it already. Inline image payloads are decoded
        before returning, so a malformed one fails the whole call.
        """

        if body is None:
            body = build_body(request)
        headers = {API_KEY_HEADER: self.config.api_key}

        try:
            response = self.session.post(
                self.config.api_url,
                headers=headers,
                timeout=self.config.timeout,
                **body,
            )
        except requests.Timeout as exc:
            raise RequestTimeoutError(
                f"request timed out after {self.config.timeout:g}s"
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(f"request failed: {exc}") from exc

        if not response.ok:
            raise _api_error(response)

        results = _parse_results(response)
        if len(results) != request.num_images:
            raise ProtocolError(
                f"expected {request.num_images} image(s) in response, "
                f"got {len(results)}",
                raw=_preview(response.text),
            )
        return results

    def fetch_images(
        self, results: Iterable[GenerationResult]
    ) -> Iterator[tuple[int, bytes | FetchError]]:
        """Yield ``(index, bytes or FetchError)`` for each result, in order.

        Inline payloads were decoded by ``generate``. URL downloads run concurrently,
        one worker per image, while results are still yielded in index order.
        """

        ordered = sorted(results, key=lambda result: result.index)
        remote = [r for r in ordered if r.inline is None and r.url is not None]
        with ThreadPoolExecutor(max_workers=max(1, len(remote))) as executor:
            futures = {r.index: executor.submit(self._download, r) for r in remote}
            for result in ordered:
                yield result.index, _resolve(result, futures.get(result.index))

    def _download(self, result: GenerationResult) -> bytes:
        try:
            response = self.session.get(result.url, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.Timeout as exc:
            raise FetchError(
                result.index, f"timed out after {self.config.timeout:g}s"
            ) from exc
        except requests.RequestException as exc:
            raise FetchError(result.index, str(exc)) from exc
        return response.content


def _resolve(
    result: GenerationResult, future: Future[bytes] | None
) -> bytes | FetchError:
    if result.inline is not None:
        return result.inline
    if future is None:
        return FetchError(
            result.index,
            "response entry has no image URL "
            "(the image may have been withheld by the safety filter)",
        )
    try:
        return future.result()
    except FetchError as exc:
        return exc


def _parse_results(response: requests.Response) -> list[GenerationResult]:
    try:
        body = response.json()
    except ValueError as exc:
        raise ProtocolError(
            "failed to parse API response as JSON", raw=_preview(response.text)
        ) from exc

    images = body.get(RESPONSE_IMAGES_KEY) if isinstance(body, Mapping) else None
    if not isinstance(images, list):
        raise ProtocolError(
            f"API response has no '{RESPONSE_IMAGES_KEY}' list",
            raw=_preview(response.text),
        )

    results: list[GenerationResult] = []
    for index, entry in enumerate(images, start=1):
        if not isinstance(entry, Mapping):
            raise ProtocolError(
                f"image entry {index} is not an object", raw=_preview(response.text)
            )
        url = entry.get(RESPONSE_URL_KEY)
        inline = entry.get(RESPONSE_INLINE_KEY)
        data = None
        if isinstance(inline, str) and inline:
            try:
                data = base64.b64decode(inline, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise ProtocolError(
                    f"image entry {index} has invalid inline image data: {exc}",
                    raw=_preview(response.text),
                ) from exc
        results.append(
            GenerationResult(
                index=index,
                url=url if isinstance(url, str) and url else None,
                inline=data,
            )
        )
    return results


def _api_error(response: requests.Response) -> ApiError:
    status = response.status_code
    text = response.text
    try:
        body = response.json()
    except ValueError:
        message = text.strip() or response.reason or "empty response body"
        return ApiError(status, message)

    if isinstance(body, Mapping):
        for key in ERROR_MESSAGE_KEYS:
            value = body.get(key)
            if isinstance(value, Mapping):
                value = value.get("message")
            if isinstance(value, str) and value.strip():
                return ApiError(status, value.strip())
    return ApiError(status, json.dumps(body, indent=2))


def _preview(text: str) -> str:
    if len(text) <= _RAW_PREVIEW_LIMIT:
        return text
    return text[:_RAW_PREVIEW_LIMIT] + "..."


__all__ = ["IdeogramClient"]
