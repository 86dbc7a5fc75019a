"""Resource for classic ELB listeners."""

from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from ..types import Listener, Page
from ..exceptions import OTCError, raise_for_status
from ._paging import clean_params, single_page


class ListenersResource:
    """ELB v1 resource for listeners."""

    def __init__(self, client):
        self._client = client

    def list_pages(
        self,
        loadbalancer_id: Optional[str] = None,
        name: Optional[str] = None,
        protocol: Optional[str] = None,
        port: Optional[int] = None,
        **filters: Any,
    ) -> List[Page]:
        """
        Fetch every page of the listener listing.

        Args:
            loadbalancer_id: Only listeners of this load balancer
            name: Only listeners with this name
            protocol: HTTP, HTTPS, TCP or UDP
            port: Only listeners on this front-end port
            **filters: Any other query parameter the API accepts

        Returns:
            The raw pages; pass them to :func:`extract_listeners`.
        """
        params = clean_params(loadbalancer_id=loadbalancer_id, name=name, protocol=protocol, port=port, **filters)
        url = self._client.service_url("listeners")
        resp = self._client._http.get(url, params=params)
        raise_for_status(resp)
        return [single_page(resp)]

    def list(self, **filters: Any) -> List[Listener]:
        """List listeners, optionally filtered. See :meth:`list_pages`."""
        return extract_listeners(self.list_pages(**filters))


def extract_listeners(pages: Iterable[Page]) -> List[Listener]:
    """
    Turn listing pages into Listener models.

    The API answers with a bare JSON array; a ``{"listeners": [...]}``
    wrapper is accepted as well.
    """
    listeners: List[Listener] = []
    for page in pages:
        body = page.body
        if isinstance(body, dict):
            body = body.get("listeners")
        if not isinstance(body, list) or not all(isinstance(item, dict) for item in body):
            raise OTCError(f"Unexpected listener listing from {page.url}: {page.body!r}")
        try:
            listeners.extend(Listener(**item) for item in body)
        except ValidationError as exc:
            raise OTCError(f"Unexpected listener listing from {page.url}: {exc}") from exc
    return listeners
