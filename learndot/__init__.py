"""learndot: a Python client for the Learndot record-management API.

Quick Start:
    ```python
    from learndot import API

    # Token from LEARNDOT_TOKEN or ~/.learndot_token
    api = API(system="staging")

    # Every page of matching records, keyed by id
    contacts = api.search("contact", {"email": "jane@example.com"})

    total = api.count("course")
    api.update("contact", {"name": "Jane"}, id=42)
    ```

Main Classes:
    - `API`: search, count, create and update entity records
    - `System`: a backend deployment; `PRODUCTION`, `STAGING`, `SANDBOX`
    - `FixedDelay` / `NoDelay`: pause applied after each request
"""

import logging
from importlib.metadata import PackageNotFoundError, version

from .api import API
from .auth import Auth, get_token
from .exceptions import (
    BackendError,
    ConfigurationError,
    CredentialError,
    DeadlineExceeded,
    LearndotError,
    LoginStrategyUnavailable,
    TransportError,
)
from .pagination import PAGE_SIZE, PageResponse, paginate, total_pages
from .system import PRODUCTION, SANDBOX, STAGING, Environment, System, get_system
from .throttle import DelayStrategy, FixedDelay, NoDelay
from .transport import Transport, TransportResponse

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # api.py
    "API",
    # auth.py
    "Auth",
    "get_token",
    # system.py
    "System",
    "Environment",
    "get_system",
    "PRODUCTION",
    "STAGING",
    "SANDBOX",
    # pagination.py
    "PAGE_SIZE",
    "PageResponse",
    "paginate",
    "total_pages",
    # throttle.py
    "DelayStrategy",
    "FixedDelay",
    "NoDelay",
    # transport.py
    "Transport",
    "TransportResponse",
    # exceptions.py
    "LearndotError",
    "CredentialError",
    "LoginStrategyUnavailable",
    "ConfigurationError",
    "TransportError",
    "DeadlineExceeded",
    "BackendError",
]

try:
    __version__ = version("learndot")
except PackageNotFoundError:
    __version__ = "0.0.0"
