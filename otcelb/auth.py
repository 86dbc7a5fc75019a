"""AK/SK credentials and the SDK-HMAC-SHA256 request signer."""

import hashlib
import hmac
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generator, List, Optional
from urllib.parse import quote

import httpx

ALGORITHM = "SDK-HMAC-SHA256"
DATE_FORMAT = "%Y%m%dT%H%M%SZ"
HEADER_DATE = "X-Sdk-Date"
HEADER_PROJECT = "X-Project-Id"
HEADER_DOMAIN = "X-Domain-Id"

# Only these headers take part in the signature when present; anything the
# HTTP stack adds later (user-agent, accept-encoding, ...) is left out.
SIGNABLE_HEADERS = ("content-type", "host", "x-domain-id", "x-project-id", "x-sdk-date")


@dataclass
class AKSKAuthOptions:
    """Everything needed to authenticate with an access key / secret key pair.

    At least one of ``project_name`` and ``project_id`` must be set; the name
    is resolved to an id during authentication.
    """

    access_key: str
    secret_key: str = field(repr=False)
    identity_endpoint: str = ""
    project_name: str = ""
    project_id: str = ""
    region: str = ""

    def get_identity_endpoint(self) -> str:
        return self.identity_endpoint.rstrip("/")


class AKSKSigner(httpx.Auth):
    """
    httpx auth flow that signs every request with the AK/SK pair.

        signer = AKSKSigner("AK", "SK", project_id="0123...")
        httpx.get(url, auth=signer)
    """

    requires_request_body = True

    def __init__(self, access_key: str, secret_key: str, project_id: Optional[str] = None, domain_id: Optional[str] = None):
        self.access_key = access_key
        self._secret_key = secret_key.encode("utf-8")
        self.project_id = project_id
        self.domain_id = domain_id

    def __repr__(self) -> str:
        return f"AKSKSigner(access_key={self.access_key!r}, project_id={self.project_id!r})"

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        self.sign(request)
        yield request

    def sign(self, request: httpx.Request) -> None:
        """Add the date, scope and Authorization headers to ``request``."""
        if HEADER_DATE not in request.headers:
            request.headers[HEADER_DATE] = datetime.now(timezone.utc).strftime(DATE_FORMAT)
        if self.project_id and HEADER_PROJECT not in request.headers:
            request.headers[HEADER_PROJECT] = self.project_id
        if self.domain_id and HEADER_DOMAIN not in request.headers:
            request.headers[HEADER_DOMAIN] = self.domain_id

        signed_headers = signed_header_names(request)
        canonical = canonical_request(request, signed_headers)
        string_to_sign = "%s\n%s\n%s" % (
            ALGORITHM,
            request.headers[HEADER_DATE],
            hashlib.sha256(canonical.encode("utf-8")).hexdigest(),
        )
        signature = hmac.new(self._secret_key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()
        request.headers["Authorization"] = "%s Access=%s, SignedHeaders=%s, Signature=%s" % (
            ALGORITHM,
            self.access_key,
            ";".join(signed_headers),
            signature,
        )


def signed_header_names(request: httpx.Request) -> List[str]:
    return sorted(name for name in SIGNABLE_HEADERS if name in request.headers)


def canonical_request(request: httpx.Request, signed_headers: List[str]) -> str:
    headers = "".join(
        "%s:%s\n" % (name, request.headers[name].strip()) for name in signed_headers
    )
    return "\n".join([
        request.method.upper(),
        canonical_uri(request.url),
        canonical_query_string(request.url),
        headers,
        ";".join(signed_headers),
        hashlib.sha256(request.content).hexdigest(),
    ])


def canonical_uri(url: httpx.URL) -> str:
    path = "/".join(_escape(segment) for segment in url.path.split("/"))
    if not path.endswith("/"):
        path += "/"
    return path


def canonical_query_string(url: httpx.URL) -> str:
    pairs = []
    for key in sorted(set(url.params.keys())):
        for value in sorted(url.params.get_list(key)):
            pairs.append("%s=%s" % (_escape(key), _escape(value)))
    return "&".join(pairs)


def _escape(value: str) -> str:
    return quote(value, safe="~")
