"""Tests for the entity operations in learndot.api.

HTTP traffic is mocked with ``responses``; the rate-limit pause is disabled
through the ``api`` fixture.
"""

import json
import logging
from unittest.mock import Mock, patch

import pytest
import responses
from learndot import API, PRODUCTION, STAGING
from learndot.exceptions import (
    BackendError,
    ConfigurationError,
    CredentialError,
    DeadlineExceeded,
)
from learndot.throttle import NoDelay

from tests.helpers import make_records, manage_url, query_of


def page_callback(size, records, fail_on=None):
    """responses callback serving ``records`` 25 per page, keyed by ?page=."""

    def callback(request):
        page = int(query_of(request)["page"])
        if page == fail_on:
            return (500, {}, json.dumps({"error": "boom"}))
        chunk = records[(page - 1) * 25 : page * 25]
        return (200, {"Content-Type": "application/json"}, json.dumps(
            {"size": size, "results": chunk}
        ))

    return callback


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("LEARNDOT_TOKEN", "from-env")

        api = API(delay=NoDelay())

        assert api.auth.token == "from-env"
        assert api.system is PRODUCTION

    def test_missing_token_fails_at_construction(self):
        with pytest.raises(CredentialError):
            API()

    def test_unknown_system_fails_at_construction(self):
        with pytest.raises(ConfigurationError):
            API(token="t", system="qa")

    def test_system_by_name(self):
        assert API(token="t", system="Staging").system is STAGING

    def test_debug_sets_logger_level(self):
        logger = Mock()

        API(token="t", debug=True, logger=logger)

        logger.setLevel.assert_called_once_with(10)

    def test_debug_client_does_not_change_other_clients(self):
        noisy = API(token="t", debug=True)
        quiet = API(token="t")

        assert noisy.logger.level == logging.DEBUG
        assert noisy.logger is not quiet.logger
        assert quiet.logger is logging.getLogger("learndot.api")
        assert quiet.logger.level == logging.NOTSET
        assert quiet.logger.getEffectiveLevel() == logging.getLogger().getEffectiveLevel()

    def test_repr_hides_token(self):
        api = API(token="secret", system=STAGING)

        assert "secret" not in repr(api)
        assert "secret" not in repr(api.auth)


# =============================================================================
# search
# =============================================================================


@responses.activate
def test_search_aggregates_all_pages(api):
    url = manage_url("contacts", "search")
    responses.add_callback(
        responses.POST, url, callback=page_callback(30, make_records(1, 30))
    )

    result = api.search("contacts", {"name": "Jane"}, {})

    assert len(result) == 30
    assert sorted(result) == list(range(1, 31))
    assert [query_of(c.request)["page"] for c in responses.calls] == ["1", "2"]
    for call in responses.calls:
        assert json.loads(call.request.body) == {"name": "Jane"}


@responses.activate
def test_search_sends_default_query_options(api):
    url = manage_url("course", "search")
    responses.add_callback(
        responses.POST, url, callback=page_callback(1, make_records(1, 1))
    )

    api.search("course")

    assert query_of(responses.calls[0].request) == {
        "asc": "false",
        "or": "false",
        "page": "1",
    }


@responses.activate
def test_search_keeps_caller_query_options(api):
    url = manage_url("course", "search")
    responses.add_callback(
        responses.POST, url, callback=page_callback(1, make_records(1, 1))
    )
    query = {"asc": True, "orderBy": "name"}

    api.search("course", {}, query)

    sent = query_of(responses.calls[0].request)
    assert sent["asc"] == "true"
    assert sent["or"] == "false"
    assert sent["orderBy"] == "name"
    # the caller's dict is left alone
    assert query == {"asc": True, "orderBy": "name"}


@responses.activate
def test_search_with_explicit_page_returns_raw_page(api):
    url = manage_url("contacts", "search")
    body = {"size": 80, "results": make_records(26, 50)}
    responses.add(responses.POST, url, json=body)

    result = api.search("contacts", {}, {"page": 2})

    assert result == body
    assert len(responses.calls) == 1
    assert query_of(responses.calls[0].request)["page"] == "2"


@responses.activate
def test_search_aborts_when_a_page_fails(api):
    url = manage_url("contacts", "search")
    responses.add_callback(
        responses.POST, url, callback=page_callback(60, make_records(1, 60), fail_on=2)
    )

    with pytest.raises(BackendError) as excinfo:
        api.search("contacts")

    assert excinfo.value.status_code == 500
    assert len(responses.calls) == 2


@responses.activate
def test_search_pause_after_every_request():
    delay = Mock()
    api = API(token="t", system=STAGING, delay=delay)
    url = STAGING.url_for("/manage/contacts/search")
    responses.add_callback(
        responses.POST, url, callback=page_callback(60, make_records(1, 60), fail_on=3)
    )

    with pytest.raises(BackendError):
        api.search("contacts")

    # two good pages plus the failed one
    assert delay.after_request.call_count == 3


@responses.activate
def test_search_exact_multiple_requests_trailing_page(api):
    url = manage_url("contacts", "search")
    responses.add_callback(
        responses.POST, url, callback=page_callback(50, make_records(1, 50))
    )

    result = api.search("contacts")

    assert len(result) == 50
    assert len(responses.calls) == 3


@responses.activate
def test_search_deadline_stops_pagination():
    api = API(token="t", system=STAGING, delay=NoDelay(), deadline=1.0)
    url = STAGING.url_for("/manage/contacts/search")
    responses.add_callback(
        responses.POST, url, callback=page_callback(60, make_records(1, 60))
    )

    with patch("learndot.pagination.time") as clock:
        clock.monotonic.side_effect = [0.0, 0.5, 2.0]
        with pytest.raises(DeadlineExceeded) as excinfo:
            api.search("contacts")

    assert excinfo.value.deadline == 1.0
    assert len(responses.calls) == 2


# =============================================================================
# count
# =============================================================================


@responses.activate
def test_count(api):
    responses.add(
        responses.POST,
        manage_url("contacts", "search"),
        json={"size": 1234, "results": make_records(1, 25)},
    )

    assert api.count("contacts", {"name": "Jane"}) == 1234
    assert len(responses.calls) == 1
    assert json.loads(responses.calls[0].request.body) == {"name": "Jane"}


@pytest.mark.parametrize("body", [{"results": []}, {"size": "many"}, {"size": None}])
@responses.activate
def test_count_falls_back_to_zero(api, body):
    responses.add(responses.POST, manage_url("contacts", "search"), json=body)

    assert api.count("contacts") == 0


# =============================================================================
# create / update
# =============================================================================


@responses.activate
def test_create_posts_to_collection(api):
    responses.add(responses.POST, manage_url("contacts"), json={"id": 7})

    assert api.create("contacts", {"name": "Jane"}) == {"id": 7}
    request = responses.calls[0].request
    assert request.url.split("?")[0] == manage_url("contacts")
    assert json.loads(request.body) == {"name": "Jane"}


@responses.activate
def test_update_posts_to_record(api):
    responses.add(responses.POST, manage_url("contacts", 42), json={"id": 42})

    assert api.update("contacts", {"name": "Jane"}, id=42) == {"id": 42}
    assert responses.calls[0].request.url.split("?")[0] == manage_url("contacts", 42)


@responses.activate
def test_create_and_update_never_share_a_path(api):
    responses.add(responses.POST, manage_url("contacts"), json={})
    responses.add(responses.POST, manage_url("contacts", 42), json={})

    api.create("contacts", {})
    api.update("contacts", {}, 42)

    create_path, update_path = (c.request.url.split("?")[0] for c in responses.calls)
    assert create_path.endswith("/manage/contacts")
    assert update_path.endswith("/manage/contacts/42")
    assert create_path != update_path


@pytest.mark.parametrize("bad_id", [None, "", "  "])
def test_update_requires_an_id(api, bad_id):
    with pytest.raises(ValueError):
        api.update("contacts", {"name": "Jane"}, bad_id)


@pytest.mark.parametrize("entity", ["", "   ", None])
def test_entity_name_is_required(api, entity):
    with pytest.raises(ValueError):
        api.create(entity, {})


@responses.activate
def test_headers_on_every_request(api):
    responses.add(responses.POST, manage_url("contacts"), json={})

    api.create("contacts", {})

    headers = responses.calls[0].request.headers
    assert headers["TrainingRocket-Authorization"] == "test-token"
    assert headers["Learndot Enterprise-Authorization"] == "test-token"
    assert headers["Content-Type"] == "application/json"
    assert headers["Accept"] == "application/json; charset=utf-8"
