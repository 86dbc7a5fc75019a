"""
Exceptions raised by the otcelb client.

Turns raw error responses into typed exceptions. The cloud's services do not
agree on an error format; three shapes are recognised:

    {"error": {"code": "...", "message": "...", "title": "..."}}        (IAM)
    {"error_code": "...", "error_msg": "...", "request_id": "..."}      (API gateway, ELB)
    {"NeutronError": {"type": "...", "message": "...", "detail": ""}}   (network)
"""

import httpx


class OTCError(Exception):
    """Base exception for all otcelb errors."""

    def __init__(
        self,
        message: str,
        status_code: int = None,
        response: httpx.Response = None,
        code: str = "",
        request_id: str = "",
    ):
        self.message = message
        self.status_code = status_code
        self.response = response
        self.code = code
        self.request_id = request_id
        super().__init__(message)

    def __repr__(self) -> str:
        parts = [f"message={self.message!r}"]
        if self.status_code:
            parts.append(f"status_code={self.status_code}")
        if self.code:
            parts.append(f"code={self.code!r}")
        if self.request_id:
            parts.append(f"request_id={self.request_id!r}")
        return f"{self.__class__.__name__}({', '.join(parts)})"


class ConfigurationError(OTCError):
    """Required settings are missing or inconsistent."""
    pass


class AuthenticationError(OTCError):
    """Credentials were rejected, or the project could not be resolved."""
    pass


class PermissionError(OTCError):
    """Valid credentials but insufficient permissions."""
    pass


class NotFoundError(OTCError):
    """Requested resource does not exist."""
    pass


class EndpointNotFoundError(OTCError):
    """No service catalog entry matches the requested service and region."""
    pass


class RateLimitError(OTCError):
    """Request was throttled. Check retry_after before calling again."""

    def __init__(self, message: str, retry_after: float = None, **kwargs):
        self.retry_after = retry_after
        super().__init__(message, **kwargs)


class ValidationError(OTCError):
    """Request parameters were rejected by the service."""
    pass


class ServiceError(OTCError):
    """The service returned a 5xx error."""
    pass


def _parse_error_body(response: httpx.Response) -> tuple:
    """
    Parse an error response body.

    Returns (message, code, request_id).
    """
    try:
        body = response.json()
    except ValueError:
        return response.text, "", ""
    if not isinstance(body, dict):
        return response.text, "", ""

    error = body.get("error")
    if isinstance(error, dict):
        return error.get("message", response.text), str(error.get("code", "")), ""
    if "error_code" in body or "error_msg" in body:
        return body.get("error_msg", response.text), body.get("error_code", ""), body.get("request_id", "")
    neutron = body.get("NeutronError")
    if isinstance(neutron, dict):
        return neutron.get("message", response.text), neutron.get("type", ""), ""
    if isinstance(error, str):
        return error, "", ""
    return response.text, "", ""


def raise_for_status(response: httpx.Response) -> None:
    """
    Check response status and raise the matching otcelb exception.

    Use this instead of response.raise_for_status() for better error messages.
    """
    if response.is_success:
        return

    status = response.status_code
    message, code, body_req_id = _parse_error_body(response)
    request_id = (
        body_req_id
        or response.headers.get("x-request-id", "")
        or response.headers.get("x-openstack-request-id", "")
    )

    kwargs = {
        "status_code": status,
        "response": response,
        "code": code,
        "request_id": request_id,
    }

    if status == 401:
        raise AuthenticationError(f"Authentication failed: {message}", **kwargs)
    elif status == 403:
        raise PermissionError(f"Permission denied: {message}", **kwargs)
    elif status == 404:
        raise NotFoundError(f"Resource not found: {message}", **kwargs)
    elif status in (400, 422):
        raise ValidationError(f"Validation error: {message}", **kwargs)
    elif status == 429:
        retry_after_raw = response.headers.get("retry-after")
        raise RateLimitError(
            f"Rate limit exceeded: {message}",
            retry_after=float(retry_after_raw) if retry_after_raw else None,
            **kwargs,
        )
    elif 400 <= status < 500:
        raise OTCError(f"Client error ({status}): {message}", **kwargs)
    elif status >= 500:
        raise ServiceError(f"Service error ({status}): {message}", **kwargs)
