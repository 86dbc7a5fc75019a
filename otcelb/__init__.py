"""
otcelb: classic ELB listing for Open Telekom Cloud, with full HTTP logging.

Usage:

    from otcelb import AKSKAuthOptions, HTTPClientConfig, ProviderClient

    provider = ProviderClient(
        "https://iam.eu-de.otc.t-systems.com/v3",
        http_config=HTTPClientConfig(log_prefix="[elb]", timeout=10),
    )
    provider.authenticate(AKSKAuthOptions(access_key="AK", secret_key="SK", project_name="eu-de"))
    elb = provider.elb_v1()
    listeners = elb.listeners.list()
    load_balancers = elb.loadbalancers.list()

Or from the shell: ``otcelb --project eu-de --access-key AK --secret-key SK``.
"""

__version__ = "0.1.0"

from .auth import AKSKAuthOptions, AKSKSigner
from .client import ELBClient, ProviderClient
from .transport import (
    DEFAULT_CLIENT_TIMEOUT,
    AsyncLoggingTransport,
    HTTPClientConfig,
    LoggingTransport,
    dump_request,
    dump_response,
)
from .types import Listener, LoadBalancer, Page
from .resources import extract_listeners, extract_load_balancers
from .exceptions import (
    OTCError,
    ConfigurationError,
    AuthenticationError,
    PermissionError,
    NotFoundError,
    EndpointNotFoundError,
    RateLimitError,
    ValidationError,
    ServiceError,
)

__all__ = [
    # Clients
    "ProviderClient",
    "ELBClient",
    # Auth
    "AKSKAuthOptions",
    "AKSKSigner",
    # HTTP logging
    "HTTPClientConfig",
    "LoggingTransport",
    "AsyncLoggingTransport",
    "DEFAULT_CLIENT_TIMEOUT",
    "dump_request",
    "dump_response",
    # Types
    "Listener",
    "LoadBalancer",
    "Page",
    "extract_listeners",
    "extract_load_balancers",
    # Exceptions
    "OTCError",
    "ConfigurationError",
    "AuthenticationError",
    "PermissionError",
    "NotFoundError",
    "EndpointNotFoundError",
    "RateLimitError",
    "ValidationError",
    "ServiceError",
    # Metadata
    "__version__",
]
