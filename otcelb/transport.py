"""
Instrumented HTTP clients.

Every request sent through a client built by :class:`HTTPClientConfig` is
dumped to the ``otcelb`` logger before it leaves, and its response is dumped
when it comes back. Both lines carry the same correlation id so that a
request can be matched to its response in interleaved logs::

    client = HTTPClientConfig(log_prefix="[iam]", timeout=10).new()
    client.get("https://iam.eu-de.otc.t-systems.com/v3")

Note that dumps are complete, sensitive headers such as ``Authorization``
included. Treat the log output accordingly.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Optional

import httpx

from ._logging import log_dump_error, log_request, log_response

DEFAULT_CLIENT_TIMEOUT = 15.0


@dataclass(frozen=True)
class HTTPClientConfig:
    """Settings for an instrumented client.

    Attributes:
        log_prefix: Prepended to every request/response log line.
        timeout:    Overall per-request timeout in seconds, from sending the
                    request to the last byte of the response body. Zero or
                    negative means :data:`DEFAULT_CLIENT_TIMEOUT`. httpx's own
                    connect/read/write/pool timeouts are set to the same value.
    """

    log_prefix: str = ""
    timeout: float = 0.0

    @property
    def effective_timeout(self) -> float:
        if self.timeout <= 0:
            return DEFAULT_CLIENT_TIMEOUT
        return self.timeout

    def new(self, transport: Optional[httpx.BaseTransport] = None, **kwargs) -> httpx.Client:
        """
        Return an ``httpx.Client`` that logs every request and response.

        Args:
            transport: Transport to wrap (default: ``httpx.HTTPTransport()``).
            **kwargs:  Additional arguments passed to httpx.Client
        """
        return httpx.Client(
            transport=LoggingTransport(self.log_prefix, transport or httpx.HTTPTransport(), self.effective_timeout),
            timeout=self.effective_timeout,
            **kwargs,
        )

    def new_async(self, transport: Optional[httpx.AsyncBaseTransport] = None, **kwargs) -> httpx.AsyncClient:
        """Async twin of :meth:`new`."""
        return httpx.AsyncClient(
            transport=AsyncLoggingTransport(self.log_prefix, transport or httpx.AsyncHTTPTransport(), self.effective_timeout),
            timeout=self.effective_timeout,
            **kwargs,
        )


class LoggingTransport(httpx.BaseTransport):
    """
    Transport decorator that logs full request and response dumps.

    The wrapped transport does the actual work; requests and responses pass
    through unchanged apart from their bodies being read into memory.

    Caller hazard: if the wrapped transport raises an exception that carries
    a response (``exc.response``, as ``httpx.HTTPStatusError`` does), that
    response is logged and returned and the exception is dropped. Exceptions
    without a response propagate untouched and no response line is logged.

    With a ``timeout``, the whole exchange must finish within that many
    seconds, response body included, or ``httpx.ReadTimeout`` is raised and
    no response line is logged.
    """

    def __init__(self, log_prefix: str, transport: httpx.BaseTransport, timeout: Optional[float] = None):
        self.log_prefix = log_prefix
        self.timeout = timeout
        self._transport = transport

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        correlation_id = str(uuid.uuid4())
        deadline = _deadline(self.timeout)
        try:
            dump = dump_request(request)
        except Exception as exc:
            log_dump_error("request", exc)
            dump = b""
        log_request(self.log_prefix, correlation_id, dump)

        try:
            response = self._transport.handle_request(request)
        except Exception as exc:
            response = _response_from_error(exc)
            if response is None:
                raise

        if deadline is not None:
            if time.monotonic() > deadline:
                response.close()
                raise _timeout_error(request)
            response.stream = _DeadlineStream(response.stream, request, deadline)

        try:
            dump = dump_response(response)
        except httpx.TimeoutException:
            raise
        except Exception as exc:
            log_dump_error("response", exc)
            dump = b""
        log_response(self.log_prefix, correlation_id, dump)
        return response

    def close(self) -> None:
        self._transport.close()


class AsyncLoggingTransport(httpx.AsyncBaseTransport):
    """Async twin of :class:`LoggingTransport`, same semantics."""

    def __init__(self, log_prefix: str, transport: httpx.AsyncBaseTransport, timeout: Optional[float] = None):
        self.log_prefix = log_prefix
        self.timeout = timeout
        self._transport = transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        correlation_id = str(uuid.uuid4())
        deadline = _deadline(self.timeout)
        try:
            dump = await adump_request(request)
        except Exception as exc:
            log_dump_error("request", exc)
            dump = b""
        log_request(self.log_prefix, correlation_id, dump)

        try:
            response = await self._transport.handle_async_request(request)
        except Exception as exc:
            response = _response_from_error(exc)
            if response is None:
                raise

        if deadline is not None:
            if time.monotonic() > deadline:
                await response.aclose()
                raise _timeout_error(request)
            response.stream = _AsyncDeadlineStream(response.stream, request, deadline)

        try:
            dump = await adump_response(response)
        except httpx.TimeoutException:
            raise
        except Exception as exc:
            log_dump_error("response", exc)
            dump = b""
        log_response(self.log_prefix, correlation_id, dump)
        return response

    async def aclose(self) -> None:
        await self._transport.aclose()


# ── Overall deadline ───────────────────────────────────────


def _deadline(timeout: Optional[float]) -> Optional[float]:
    if timeout is None or timeout <= 0:
        return None
    return time.monotonic() + timeout


def _timeout_error(request: httpx.Request) -> httpx.ReadTimeout:
    return httpx.ReadTimeout("Overall request timeout exceeded", request=request)


class _DeadlineStream(httpx.SyncByteStream):
    """Response body stream that gives up once the exchange's deadline has passed."""

    def __init__(self, stream: httpx.SyncByteStream, request: httpx.Request, deadline: float):
        self._stream = stream
        self._request = request
        self._deadline = deadline

    def __iter__(self):
        for chunk in self._stream:
            if time.monotonic() > self._deadline:
                raise _timeout_error(self._request)
            yield chunk

    def close(self) -> None:
        self._stream.close()


class _AsyncDeadlineStream(httpx.AsyncByteStream):
    def __init__(self, stream: httpx.AsyncByteStream, request: httpx.Request, deadline: float):
        self._stream = stream
        self._request = request
        self._deadline = deadline

    async def __aiter__(self):
        async for chunk in self._stream:
            if time.monotonic() > self._deadline:
                raise _timeout_error(self._request)
            yield chunk

    async def aclose(self) -> None:
        await self._stream.aclose()


# ── Dumps ──────────────────────────────────────────────────


def dump_request(request: httpx.Request) -> bytes:
    """Serialize a request as HTTP/1.1 text: request line, headers, body."""
    return _request_head(request) + request.read()


def dump_response(response: httpx.Response) -> bytes:
    """
    Serialize a response as HTTP text: status line, headers, decoded body.

    The raw body is drained from the response stream and put back as an
    in-memory stream, so the caller reads the same bytes afterwards.
    """
    stream = response.stream
    try:
        body = b"".join(stream)
    finally:
        stream.close()
    response.stream = httpx.ByteStream(body)
    return _response_head(response) + _decoded(response, body)


async def adump_request(request: httpx.Request) -> bytes:
    return _request_head(request) + await request.aread()


async def adump_response(response: httpx.Response) -> bytes:
    stream = response.stream
    try:
        body = b"".join([part async for part in stream])
    finally:
        await stream.aclose()
    response.stream = httpx.ByteStream(body)
    return _response_head(response) + _decoded(response, body)


def _request_head(request: httpx.Request) -> bytes:
    line = b"%s %s HTTP/1.1\r\n" % (request.method.encode("ascii"), request.url.raw_path)
    return line + _headers(request.headers) + b"\r\n"


def _response_head(response: httpx.Response) -> bytes:
    line = "%s %d %s\r\n" % (response.http_version, response.status_code, response.reason_phrase)
    return line.encode("ascii", errors="replace") + _headers(response.headers) + b"\r\n"


def _headers(headers: httpx.Headers) -> bytes:
    return b"".join(b"%s: %s\r\n" % (key, value) for key, value in headers.raw)


def _decoded(response: httpx.Response, body: bytes) -> bytes:
    # undo Content-Encoding for the log only; the caller gets the raw stream
    if "content-encoding" not in response.headers:
        return body
    return httpx.Response(response.status_code, headers=response.headers, content=body).content


def _response_from_error(exc: Exception) -> Optional[httpx.Response]:
    response = getattr(exc, "response", None)
    if isinstance(response, httpx.Response):
        return response
    return None
