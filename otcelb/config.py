"""Settings for the command-line tool, resolved once at startup."""

import os
from dataclasses import dataclass
from typing import Optional

from .auth import AKSKAuthOptions
from .exceptions import ConfigurationError
from .transport import HTTPClientConfig

DEFAULT_IDENTITY_ENDPOINT = "https://iam.eu-de.otc.t-systems.com/v3"
DEFAULT_REGION = "eu-de"


@dataclass(frozen=True)
class CLIConfig:
    identity_endpoint: str = DEFAULT_IDENTITY_ENDPOINT
    project_name: str = ""
    project_id: str = ""
    region: str = DEFAULT_REGION
    access_key: str = ""
    secret_key: str = ""
    log_prefix: str = ""
    timeout: float = 0.0

    @classmethod
    def from_args(cls, args) -> "CLIConfig":
        """
        Build the config from parsed arguments.

        Unset arguments fall back to OTC_IDENTITY_ENDPOINT, OTC_PROJECT_NAME,
        OTC_PROJECT_ID, OTC_REGION, OTC_ACCESS_KEY and OTC_SECRET_KEY.
        """
        return cls(
            identity_endpoint=_pick(args.identity_endpoint, "OTC_IDENTITY_ENDPOINT", DEFAULT_IDENTITY_ENDPOINT),
            project_name=_pick(args.project, "OTC_PROJECT_NAME"),
            project_id=_pick(args.project_id, "OTC_PROJECT_ID"),
            region=_pick(args.region, "OTC_REGION", DEFAULT_REGION),
            access_key=_pick(args.access_key, "OTC_ACCESS_KEY"),
            secret_key=_pick(args.secret_key, "OTC_SECRET_KEY"),
            log_prefix=args.log_prefix or "",
            timeout=args.timeout or 0.0,
        )

    def validate(self) -> None:
        if not self.project_name and not self.project_id:
            raise ConfigurationError("At least one between project name and project ID should be given")
        if not self.access_key or not self.secret_key:
            raise ConfigurationError("access key and secret key should be given")

    def auth_options(self) -> AKSKAuthOptions:
        return AKSKAuthOptions(
            identity_endpoint=self.identity_endpoint,
            project_name=self.project_name,
            project_id=self.project_id,
            region=self.region,
            access_key=self.access_key,
            secret_key=self.secret_key,
        )

    def http_config(self) -> HTTPClientConfig:
        return HTTPClientConfig(log_prefix=self.log_prefix, timeout=self.timeout)

    def __repr__(self) -> str:
        # keep the secret key out of logs and tracebacks
        return (
            f"CLIConfig(identity_endpoint={self.identity_endpoint!r}, project_name={self.project_name!r}, "
            f"project_id={self.project_id!r}, region={self.region!r}, access_key={self.access_key!r})"
        )


def _pick(value: Optional[str], env_var: str, default: str = "") -> str:
    return value or os.environ.get(env_var) or default
