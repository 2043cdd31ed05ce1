"""Shared HTTP session: JSON accept header, no transport-level retries."""

import requests

DEFAULT_HEADERS = {"accept": "application/json"}


def make_session() -> requests.Session:
    """New session with the default headers. Retries are handled by metforecast.retry."""
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    return session
