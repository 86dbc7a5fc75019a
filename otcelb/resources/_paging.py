from typing import Any, Dict

import httpx

from ..exceptions import OTCError
from ..types import Page


def clean_params(**params: Any) -> Dict[str, Any]:
    """Drop unset filters so they are not sent as empty query parameters."""
    return {key: value for key, value in params.items() if value is not None}


def single_page(resp: httpx.Response) -> Page:
    try:
        body = resp.json()
    except ValueError as exc:
        raise OTCError(f"Invalid JSON in listing from {resp.url}: {exc}", status_code=resp.status_code, response=resp) from exc
    return Page(url=str(resp.url), body=body)
