"""Pydantic models for ELB v1 API responses."""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict


class OTCModel(BaseModel):
    """Base model: unknown fields are kept, dict-style access works too."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def __getitem__(self, item):
        return getattr(self, item)

    def __contains__(self, item):
        return item in self.model_dump()


class Listener(OTCModel):
    """A listener: the front-end protocol/port of a classic load balancer."""
    id: str
    name: str = ""
    description: str = ""
    loadbalancer_id: Optional[str] = None
    status: Optional[str] = None
    admin_state_up: Optional[bool] = None
    protocol: Optional[str] = None
    port: Optional[int] = None
    backend_protocol: Optional[str] = None
    backend_port: Optional[int] = None
    lb_algorithm: Optional[str] = None
    session_sticky: Optional[bool] = None
    tenant_id: Optional[str] = None
    create_time: Optional[str] = None
    update_time: Optional[str] = None

    def __repr__(self) -> str:
        return f"Listener(id={self.id!r}, name={self.name!r}, {self.protocol}:{self.port})"


class LoadBalancer(OTCModel):
    """A classic (v1) elastic load balancer."""
    id: str
    name: str = ""
    description: str = ""
    status: Optional[str] = None
    type: Optional[str] = None
    admin_state_up: Optional[int] = None
    vpc_id: Optional[str] = None
    vip_subnet_id: Optional[str] = None
    vip_address: Optional[str] = None
    security_group_id: Optional[str] = None
    bandwidth: Optional[int] = None
    az: Optional[str] = None
    tenantid: Optional[str] = None
    create_time: Optional[str] = None
    update_time: Optional[str] = None

    def __repr__(self) -> str:
        return f"LoadBalancer(id={self.id!r}, name={self.name!r}, type={self.type!r}, status={self.status!r})"


class Page(OTCModel):
    """One page of a list call, kept as the decoded JSON body."""
    url: str
    body: Any = None

    def __repr__(self) -> str:
        return f"Page(url={self.url!r})"


class CatalogEndpoint(OTCModel):
    """A single endpoint of a service catalog entry."""
    id: Optional[str] = None
    interface: str = "public"
    region: Optional[str] = None
    region_id: Optional[str] = None
    url: str


class CatalogEntry(OTCModel):
    """A service in the identity catalog, with its endpoints."""
    id: Optional[str] = None
    name: Optional[str] = None
    type: str
    endpoints: List[CatalogEndpoint] = []

    def endpoint_for(self, region: str, interface: str = "public") -> Optional[CatalogEndpoint]:
        for endpoint in self.endpoints:
            if endpoint.interface != interface:
                continue
            if region and region not in (endpoint.region, endpoint.region_id):
                continue
            return endpoint
        return None


class Project(OTCModel):
    """An IAM project."""
    id: str
    name: str = ""
    domain_id: Optional[str] = None
    enabled: Optional[bool] = None

    def __repr__(self) -> str:
        return f"Project(id={self.id!r}, name={self.name!r})"
