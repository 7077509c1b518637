"""Entity operations against the Learndot ``/manage`` endpoints."""

import logging
from typing import Any, Dict, Mapping, Optional, Union

import requests

from .auth import Auth
from .pagination import PageResponse, Record, paginate
from .system import PRODUCTION, Environment, System, get_system
from .throttle import DEFAULT_DELAY, DelayStrategy, FixedDelay
from .transport import Transport, TransportResponse

log = logging.getLogger(__name__)


def _entity_endpoint(entity: str, *parts: Any) -> str:
    if not isinstance(entity, str) or not entity.strip():
        raise ValueError("entity must be a non-empty string")
    return "/".join(["/manage", entity.strip(), *(str(part) for part in parts)])


class API:
    """Client for the Learndot record-management API.

    Examples:
        >>> api = API(system="staging")  # doctest: +SKIP
        >>> contacts = api.search("contact", {"email": "jane@example.com"})  # doctest: +SKIP
        >>> api.count("contact")  # doctest: +SKIP
        1234

    Parameters:
        token: API token. Looked up from ``LEARNDOT_TOKEN`` or the token file
            when omitted.
        system: The deployment to talk to, as a System, an Environment or its
            name. Defaults to production.
        debug: Log requests and responses at DEBUG level. Only this client
            is affected. The library installs no handler, so configure one
            (e.g. ``logging.basicConfig()``) to see the output.
        logger: Logger to use instead of the ``learndot.api`` module logger.
        delay: Strategy applied after every request; defaults to a one
            second pause to stay under the backend's rate limit.
        timeout: Network timeout for each request, in seconds.
        deadline: Optional limit, in seconds, for a whole paginated search.
        session: A ``requests.Session`` to send requests with.

    Raises:
        CredentialError: if no token was given and none could be found.
        ConfigurationError: if ``system`` does not name a known deployment.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        system: Union[System, Environment, str] = PRODUCTION,
        debug: bool = False,
        logger: Optional[logging.Logger] = None,
        delay: Optional[DelayStrategy] = None,
        timeout: float = 30,
        deadline: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if logger is None:
            # debug only ever changes the level of a logger private to this client
            logger = log.getChild(f"client{id(self)}") if debug else log
        self.logger = logger
        if debug:
            self.logger.setLevel(logging.DEBUG)

        self.system = get_system(system)
        self.auth = Auth(token) if token is not None else Auth.login()
        self.headers = self.auth.get_headers()
        self.deadline = deadline
        self.transport = Transport(
            session=session,
            delay=delay if delay is not None else FixedDelay(seconds=DEFAULT_DELAY),
            timeout=timeout,
            logger=self.logger,
        )

    def __repr__(self) -> str:
        return f"API(system={self.system.environment.value!r})"

    def __enter__(self) -> "API":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    def search(
        self,
        entity: str,
        conditions: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Union[Dict[Any, Record], Any]:
        """Search an entity collection.

        Without a ``page`` in ``query`` every page is fetched and the records
        are returned keyed by id. With an explicit ``page`` only that page is
        requested and its decoded body is returned as is.
        """
        endpoint = _entity_endpoint(entity, "search")
        conditions = dict(conditions or {})
        query = dict(query or {})
        query.setdefault("asc", False)
        query.setdefault("or", False)

        if "page" in query:
            return self._post(endpoint, conditions, query).body

        def fetch_page(index: int) -> PageResponse:
            params = {**query, "page": index}
            return PageResponse.from_json(self._post(endpoint, conditions, params).body)

        return paginate(fetch_page, logger=self.logger, deadline=self.deadline)

    def count(self, entity: str, conditions: Optional[Mapping[str, Any]] = None) -> int:
        """Number of records matching ``conditions``, or 0 if the backend did not say."""
        endpoint = _entity_endpoint(entity, "search")
        body = self._post(endpoint, dict(conditions or {})).body
        return PageResponse.from_json(body).size or 0

    def update(self, entity: str, conditions: Mapping[str, Any], id: Any) -> Any:
        """Update record ``id``.

        Kept apart from ``create`` so that a missing id can never turn an
        update into a new record.
        """
        if id is None or str(id).strip() == "":
            raise ValueError("update requires a record id")
        endpoint = _entity_endpoint(entity, id)
        return self._post(endpoint, dict(conditions)).body

    def create(self, entity: str, conditions: Mapping[str, Any]) -> Any:
        endpoint = _entity_endpoint(entity)
        return self._post(endpoint, dict(conditions)).body

    def _post(
        self,
        endpoint: str,
        conditions: Mapping[str, Any],
        query: Optional[Mapping[str, Any]] = None,
    ) -> TransportResponse:
        url = self.system.url_for(endpoint)
        return self.transport.post(url, self.headers, params=query or {}, body=conditions)
