"""Shared fixtures: a fake Gitee API served through httpx.MockTransport."""

import json

import httpx
import pytest

from gitee import GiteeClient, ListDefaults

API_PREFIX = "/api/v5"
TOKEN = "test-token"


class FakeGitee:
    """Routes (method, path) to canned responses and records every request."""

    def __init__(self):
        self.routes: dict[tuple[str, str], list] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses) -> None:
        """Queue responses for a route; the last one repeats."""
        self.routes[(method, path)] = list(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={"message": "Not Found"})
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(reply, httpx.Response):
            return reply
        if isinstance(reply, Exception):
            raise reply
        return httpx.Response(200, json=reply)

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if (method is None or r.method == method)
            and (path is None or r.url.path.removeprefix(API_PREFIX) == path)
        ]


def body_of(request: httpx.Request) -> dict:
    return json.loads(request.content)


@pytest.fixture
def fake():
    return FakeGitee()


@pytest.fixture
def client(fake):
    return GiteeClient(token=TOKEN, transport=httpx.MockTransport(fake.handler))


@pytest.fixture
def small_page_client(fake):
    """Client whose list endpoints fetch two rows per page."""
    return GiteeClient(
        token=TOKEN,
        defaults=ListDefaults(per_page=2),
        transport=httpx.MockTransport(fake.handler),
    )
