"""API token lookup and request header construction."""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from .exceptions import CredentialError, LoginStrategyUnavailable

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "LEARNDOT_TOKEN"
TOKEN_FILE_ENV_VAR = "LEARNDOT_TOKEN_FILE"
DEFAULT_TOKEN_FILE = "~/.learndot_token"

# Both header names are honoured by the backend; older deployments only read
# the first one.
AUTH_HEADERS = ("TrainingRocket-Authorization", "Learndot Enterprise-Authorization")


def token_path() -> Path:
    """Location of the token file, honouring ``LEARNDOT_TOKEN_FILE``."""
    return Path(os.environ.get(TOKEN_FILE_ENV_VAR, DEFAULT_TOKEN_FILE)).expanduser()


class Auth:
    """Holds the API token and builds the headers sent with every request."""

    def __init__(self, token: str) -> None:
        if not token or not token.strip():
            raise CredentialError("API token must not be empty")
        self.token = token.strip()

    def __repr__(self) -> str:
        return "Auth(token='***')"

    @classmethod
    def login(cls, strategy: str = "all") -> "Auth":
        """Build an Auth from a token found with the given strategy.

        Parameters:
            strategy: ``"environment"`` reads ``LEARNDOT_TOKEN``; ``"file"``
                reads the token file; ``"all"`` tries both, in that order.

        Raises:
            CredentialError: if no strategy produced a token.
        """
        return cls(get_token(strategy))

    def get_headers(self) -> Dict[str, str]:
        headers = {name: self.token for name in AUTH_HEADERS}
        headers["Content-Type"] = "application/json"
        headers["Accept"] = "application/json; charset=utf-8"
        return headers


def _token_from_environment() -> str:
    token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    if not token:
        raise LoginStrategyUnavailable(f"{TOKEN_ENV_VAR} is not set")
    return token


def _token_from_file() -> str:
    path = token_path()
    try:
        token = path.read_text().strip()
    except OSError as err:
        raise LoginStrategyUnavailable(f"Cannot read token file {path}", err) from err
    if not token:
        raise LoginStrategyUnavailable(f"Token file {path} is empty")
    return token


_STRATEGIES = {
    "environment": _token_from_environment,
    "file": _token_from_file,
}


def get_token(strategy: str = "all") -> str:
    """Return the API token, looking in the environment and then the token file.

    Raises:
        ValueError: if the strategy name is unknown.
        CredentialError: if the token could not be obtained.
    """
    if strategy == "all":
        strategies = list(_STRATEGIES)
    elif strategy in _STRATEGIES:
        strategies = [strategy]
    else:
        raise ValueError(
            f"Unknown token strategy {strategy!r}; expected 'all' or one of "
            f"{', '.join(_STRATEGIES)}"
        )

    for name in strategies:
        try:
            token = _STRATEGIES[name]()
        except LoginStrategyUnavailable as err:
            logger.debug(err)
            continue
        logger.debug("Using API token from %s strategy", name)
        return token

    raise CredentialError(
        f"API token (in env variable {TOKEN_ENV_VAR} or {token_path()}) not readable"
    )
