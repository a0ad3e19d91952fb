import pytest
import requests

from credential_hygiene.helpers import init_logger
from credential_hygiene.models import CredentialEntry


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Duck-typed stand-in for requests.Session recording every GET."""

    def __init__(self, responses=None, exc: Exception | None = None):
        # prefix -> FakeResponse
        self.responses = responses or {}
        self.exc = exc
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        prefix = url.rsplit("/", 1)[-1]
        return self.responses.get(prefix, FakeResponse(200, ""))


class FakeOracle:
    """Breach checker answering from a fixed password -> count table."""

    def __init__(self, counts=None):
        self.counts = counts or {}
        self.checked = []

    def new_cache(self):
        return {}

    def check_breach(self, password, cache):
        if password in cache:
            return cache[password]
        self.checked.append(password)
        cache[password] = self.counts.get(password, 0)
        return cache[password]


class FakeStore:
    def __init__(self, records, failing_ids=()):
        self.records = list(records)
        self.failing_ids = set(failing_ids)
        self.deleted = []

    def list_credentials(self):
        return list(self.records)

    def delete_credential(self, credential_id):
        if credential_id in self.failing_ids:
            raise RuntimeError("store unavailable")
        self.deleted.append(credential_id)
        return True


@pytest.fixture
def logger():
    return init_logger("test_credential_hygiene", "DEBUG")


@pytest.fixture
def make_entry():
    counter = {"n": 0}

    def _make(name=None, url=None, username=None, password=None, id=None):
        counter["n"] += 1
        return CredentialEntry(
            id=id or f"id-{counter['n']}",
            name=name or f"item {counter['n']}",
            username=username,
            password=password,
            url=url,
        )

    return _make


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def timeout_error():
    return requests.Timeout("read timed out")
