"""Provider client: AK/SK authentication, service catalog and ELB v1 access."""

from __future__ import annotations

from functools import cached_property
from typing import List, Optional, TYPE_CHECKING

import httpx
from pydantic import ValidationError

from ._logging import logger
from .auth import AKSKAuthOptions, AKSKSigner
from .exceptions import AuthenticationError, EndpointNotFoundError, OTCError, raise_for_status
from .transport import HTTPClientConfig
from .types import CatalogEntry, Project

if TYPE_CHECKING:
    from .resources.listeners import ListenersResource
    from .resources.loadbalancers import LoadBalancersResource

_PROJECT_PLACEHOLDERS = ("$(tenant_id)s", "%(tenant_id)s", "$(project_id)s", "%(project_id)s")


class ProviderClient:
    """
    Authenticated entry point to the cloud APIs.

    All traffic goes through one instrumented ``httpx.Client`` so every
    request and response ends up in the log:

        provider = ProviderClient("https://iam.eu-de.otc.t-systems.com/v3")
        provider.authenticate(AKSKAuthOptions(access_key="...", secret_key="...", project_name="eu-de"))
        elb = provider.elb_v1()
        elb.listeners.list()
    """

    def __init__(
        self,
        identity_endpoint: str,
        http_config: Optional[HTTPClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
        **kwargs,
    ):
        """
        Args:
            identity_endpoint: IAM v3 endpoint, e.g. https://iam.eu-de.otc.t-systems.com/v3
            http_config: Log prefix and timeout of the underlying client
            transport: Transport the logging transport wraps (default: real network)
            **kwargs: Additional arguments passed to httpx.Client
        """
        from . import __version__

        self.identity_endpoint = identity_endpoint.rstrip("/")
        self.http_config = http_config or HTTPClientConfig()
        self.project_id: Optional[str] = None
        self.region = ""
        self._catalog: Optional[List[CatalogEntry]] = None

        headers = {"Accept": "application/json", "User-Agent": f"otcelb/{__version__}"}
        self._http = self.http_config.new(transport=transport, headers=headers, **kwargs)

    def __repr__(self) -> str:
        return f"ProviderClient(identity_endpoint={self.identity_endpoint!r}, project_id={self.project_id!r})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """Close the underlying HTTP connection pool."""
        self._http.close()

    @property
    def is_authenticated(self) -> bool:
        return self._catalog is not None

    # ── Authentication ─────────────────────────────────────────

    def authenticate(self, options: AKSKAuthOptions) -> "ProviderClient":
        """
        Authenticate with an AK/SK pair.

        Every later request is signed with the pair. When only a project
        name is given it is resolved to an ID first. The service catalog is
        loaded so that service endpoints can be looked up by type and region.

        Raises:
            AuthenticationError: credentials rejected, or the project name
                matches no project or several.
        """
        if options.identity_endpoint:
            self.identity_endpoint = options.get_identity_endpoint()

        signer = AKSKSigner(options.access_key, options.secret_key)
        self._http.auth = signer

        project_id = options.project_id or self._resolve_project_id(options.project_name)
        signer.project_id = project_id

        self._catalog = self._load_catalog()
        self.project_id = project_id
        self.region = options.region
        logger.debug("Authenticated for project %s in region %s", project_id, options.region or "<any>")
        return self

    def _resolve_project_id(self, project_name: str) -> str:
        if not project_name:
            raise AuthenticationError("Either a project name or a project ID is required")
        resp = self._http.get(f"{self.identity_endpoint}/projects", params={"name": project_name})
        raise_for_status(resp)
        items = _json_object(resp).get("projects", [])
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise AuthenticationError(f"Unexpected project listing: {resp.text}", response=resp)
        try:
            projects = [Project(**item) for item in items]
        except ValidationError as exc:
            raise AuthenticationError(f"Unexpected project listing: {exc}", response=resp) from exc
        if not projects:
            raise AuthenticationError(f"No project named {project_name!r}")
        if len(projects) > 1:
            raise AuthenticationError(f"Project name {project_name!r} is ambiguous: {projects!r}")
        logger.debug("Resolved project %s to %s", project_name, projects[0].id)
        return projects[0].id

    def _load_catalog(self) -> List[CatalogEntry]:
        resp = self._http.get(f"{self.identity_endpoint}/auth/catalog")
        raise_for_status(resp)
        catalog = _json_object(resp).get("catalog")
        if not isinstance(catalog, list) or not all(isinstance(entry, dict) for entry in catalog):
            raise AuthenticationError(f"Unexpected service catalog: {resp.text}", response=resp)
        try:
            return [CatalogEntry(**entry) for entry in catalog]
        except ValidationError as exc:
            raise AuthenticationError(f"Unexpected service catalog: {exc}", response=resp) from exc

    # ── Endpoints ──────────────────────────────────────────────

    def endpoint_url(self, service_type: str, region: Optional[str] = None, interface: str = "public") -> str:
        """
        Look a service endpoint up in the catalog.

        Project placeholders in the catalog URL are filled in.

        Raises:
            AuthenticationError: called before :meth:`authenticate`.
            EndpointNotFoundError: no entry for the service in the region.
        """
        if self._catalog is None:
            raise AuthenticationError("Not authenticated: call authenticate() first")
        region = region or self.region
        for entry in self._catalog:
            if entry.type != service_type:
                continue
            endpoint = entry.endpoint_for(region, interface)
            if endpoint is not None:
                url = endpoint.url
                for placeholder in _PROJECT_PLACEHOLDERS:
                    url = url.replace(placeholder, self.project_id)
                return url.rstrip("/")
        raise EndpointNotFoundError(
            f"No {interface} endpoint for service {service_type!r} in region {region or '<any>'!r}"
        )

    def elb_v1(self, region: Optional[str] = None, endpoint_override: Optional[str] = None) -> "ELBClient":
        """
        Return a client for the classic ELB v1 API.

        Args:
            region: Region to use (default: the region authenticated with)
            endpoint_override: Skip the catalog and use this endpoint
        """
        if not self.is_authenticated:
            raise AuthenticationError("Not authenticated: call authenticate() first")
        url = endpoint_override or self.endpoint_url("elb", region)
        if self.project_id not in url:
            url = f"{url.rstrip('/')}/v1.0/{self.project_id}"
        return ELBClient(self._http, url)


def _json_object(resp: httpx.Response) -> dict:
    body = resp.json()
    if not isinstance(body, dict):
        raise AuthenticationError(f"Unexpected identity response from {resp.url}: {resp.text}", response=resp)
    return body


class ELBClient:
    """Service client for the classic ELB v1 API, bound to one endpoint."""

    def __init__(self, http: httpx.Client, endpoint: str):
        if not endpoint:
            raise OTCError("ELB endpoint must not be empty")
        self._http = http
        self.endpoint = endpoint.rstrip("/")
        self.resource_base = self.endpoint + "/elbaas/"

    def __repr__(self) -> str:
        return f"ELBClient(endpoint={self.endpoint!r})"

    def service_url(self, *parts: str) -> str:
        return self.resource_base + "/".join(parts)

    @cached_property
    def listeners(self) -> "ListenersResource":
        from .resources.listeners import ListenersResource
        return ListenersResource(self)

    @cached_property
    def loadbalancers(self) -> "LoadBalancersResource":
        from .resources.loadbalancers import LoadBalancersResource
        return LoadBalancersResource(self)
