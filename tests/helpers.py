"""Helpers shared by the unit and integration tests."""

from urllib.parse import parse_qs, urlparse

from learndot import SANDBOX


def manage_url(*parts):
    return SANDBOX.url_for("/".join(["/manage", *map(str, parts)]))


def query_of(request):
    """Flatten the query string of a recorded request into a dict."""
    return {key: values[-1] for key, values in parse_qs(urlparse(request.url).query).items()}


def make_records(start, stop, **fields):
    return [{"id": i, "name": f"record {i}", **fields} for i in range(start, stop + 1)]
