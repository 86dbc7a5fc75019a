"""Resource for classic (v1) load balancers."""

from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from ..types import LoadBalancer, Page
from ..exceptions import OTCError, raise_for_status
from ._paging import clean_params, single_page


class LoadBalancersResource:
    """ELB v1 resource for load balancers."""

    def __init__(self, client):
        self._client = client

    def list_pages(
        self,
        id: Optional[str] = None,
        name: Optional[str] = None,
        status: Optional[str] = None,
        type: Optional[str] = None,
        vpc_id: Optional[str] = None,
        vip_address: Optional[str] = None,
        **filters: Any,
    ) -> List[Page]:
        """
        Fetch every page of the load balancer listing.

        Args:
            id: Only the load balancer with this ID
            name: Only load balancers with this name
            status: ACTIVE, PENDING_CREATE, ERROR, ...
            type: "Internal" or "External"
            vpc_id: Only load balancers in this VPC
            vip_address: Only the load balancer with this virtual IP
            **filters: Any other query parameter the API accepts

        Returns:
            The raw pages; pass them to :func:`extract_load_balancers`.
        """
        params = clean_params(
            id=id, name=name, status=status, type=type, vpc_id=vpc_id, vip_address=vip_address, **filters
        )
        url = self._client.service_url("loadbalancers")
        resp = self._client._http.get(url, params=params)
        raise_for_status(resp)
        return [single_page(resp)]

    def list(self, **filters: Any) -> List[LoadBalancer]:
        """List load balancers, optionally filtered. See :meth:`list_pages`."""
        return extract_load_balancers(self.list_pages(**filters))


def extract_load_balancers(pages: Iterable[Page]) -> List[LoadBalancer]:
    """Turn listing pages (``{"loadbalancers": [...], "instance_num": "N"}``) into models."""
    load_balancers: List[LoadBalancer] = []
    for page in pages:
        body = page.body
        items = body.get("loadbalancers") if isinstance(body, dict) else None
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise OTCError(f"Unexpected load balancer listing from {page.url}: {page.body!r}")
        try:
            load_balancers.extend(LoadBalancer(**item) for item in items)
        except ValidationError as exc:
            raise OTCError(f"Unexpected load balancer listing from {page.url}: {exc}") from exc
    return load_balancers
