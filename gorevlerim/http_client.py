"""Shared HTTP session for the task store."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a shared requests.Session.

    Retries are disabled: a failed store call is terminal for its request.
    """
    global _session
    if _session is None:
        _session = requests.Session()
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        _session.mount("http://", adapter)
        _session.mount("https://", adapter)
    return _session
