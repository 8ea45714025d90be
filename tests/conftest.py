"""
Shared pytest fixtures for the push client tests.

Provides a fake session standing in for the authenticated API client,
and sample subscription payloads in the API's shape.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest

from datasift_push.core.config import PushConfig, reset_config, set_config


Response = Union[Dict[str, Any], Exception, Callable[[str, Dict[str, str]], Any]]


class FakeSession:
    """Records every call and answers from a queue of canned responses.

    A queued exception is raised instead of returned; a queued callable
    is called with the endpoint and parameters.
    """

    def __init__(self, *responses: Response):
        self.responses: List[Response] = list(responses)
        self.calls: List[Tuple[str, Dict[str, str]]] = []

    def queue(self, *responses: Response) -> "FakeSession":
        self.responses.extend(responses)
        return self

    def call_api(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        self.calls.append((endpoint, dict(params)))
        if not self.responses:
            raise AssertionError(f"Unexpected API call: {endpoint} {params}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(endpoint, params)
        return response

    @property
    def last_call(self) -> Optional[Tuple[str, Dict[str, str]]]:
        return self.calls[-1] if self.calls else None


def make_subscription_data(**overrides: Any) -> Dict[str, Any]:
    """A well-formed subscription object as the API returns it."""
    data = {
        "id": 42,
        "name": "My Sub",
        "created_at": 1000,
        "status": "active",
        "hash_type": "stream",
        "hash": "abc123",
        "output_type": "http",
        "output_params": {},
    }
    data.update(overrides)
    return data


@pytest.fixture(autouse=True)
def default_config():
    """Pin the configuration to its defaults for every test."""
    set_config(PushConfig())
    yield
    reset_config()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def subscription_data() -> Dict[str, Any]:
    return make_subscription_data()


@pytest.fixture
def make_data() -> Callable[..., Dict[str, Any]]:
    return make_subscription_data
