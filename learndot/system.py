"""Learndot backend systems (production, staging and sandbox)."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from typing_extensions import deprecated

from .exceptions import ConfigurationError


class Environment(str, Enum):
    """Names of the backend deployments the client can talk to."""

    PRODUCTION = "production"
    STAGING = "staging"
    SANDBOX = "sandbox"


@dataclass(frozen=True)
class System:
    """A Learndot deployment, identified by its REST base URL."""

    environment: Environment
    base_url: str

    def url_for(self, endpoint: str) -> str:
        """Join an endpoint path such as ``/manage/contact`` to the base URL."""
        return self.base_url.rstrip("/") + "/" + endpoint.lstrip("/")

    @staticmethod
    @deprecated("Pass an Environment or System instead of a staging flag")
    def from_staging_flag(staging: Union[bool, str]) -> "System":
        """Resolve the legacy ``staging`` flag, which mixed booleans and strings.

        ``False`` selects production and ``True`` selects staging; the
        environment names are accepted as well.
        """
        if staging is False:
            return PRODUCTION
        if staging is True:
            return STAGING
        return get_system(staging)


PRODUCTION = System(Environment.PRODUCTION, "https://learn.puppet.com/api/rest/v2")
STAGING = System(
    Environment.STAGING, "https://puppetlabs-staging.trainingrocket.com/api/rest/v2"
)
SANDBOX = System(
    Environment.SANDBOX, "https://puppetlabs-sandbox.trainingrocket.com/api/rest/v2"
)

_SYSTEMS = {system.environment: system for system in (PRODUCTION, STAGING, SANDBOX)}


def get_system(value: Union[System, Environment, str]) -> System:
    """Return the System for a System, Environment or environment name.

    Raises:
        ConfigurationError: if the value does not name a known deployment.
    """
    if isinstance(value, System):
        return value
    # bool is rejected here; the legacy flag goes through System.from_staging_flag
    if isinstance(value, str):
        try:
            return _SYSTEMS[Environment(value.strip().lower())]
        except ValueError:
            pass
    raise ConfigurationError(
        f"Unknown Learndot environment {value!r}; expected one of "
        f"{', '.join(env.value for env in Environment)}"
    )
