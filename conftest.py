import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient


ROOT = Path(__file__).resolve().parent
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from user_service.user_events.app import app, get_github_client, get_publisher
from user_service.user_events.config import Settings
from user_service.user_events.github_client import GitHubClient, create_http_client


ADA = {
    "login": "ada",
    "id": 1815,
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "type": "User",
    "site_admin": False,
    "public_repos": 2,
    "created_at": "2011-01-25T18:44:36Z",
}


class FakeGitHub:
    """Simula la API de GitHub: path -> respuesta o excepción"""

    def __init__(self) -> None:
        self.routes = {}
        self.requests = []

    def user(self, profile, followers=(), repos=()) -> None:
        login = profile["login"]
        self.routes[f"/users/{login}"] = httpx.Response(200, json=profile)
        self.routes[f"/users/{login}/followers"] = httpx.Response(
            200, json=[{"login": name, "id": index} for index, name in enumerate(followers)]
        )
        self.routes[f"/users/{login}/repos"] = httpx.Response(
            200, json=[{"name": name, "id": index, "private": False} for index, name in enumerate(repos)]
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(route, Exception):
            raise route
        return route

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def github() -> FakeGitHub:
    fake = FakeGitHub()
    fake.user(ADA, followers=["babbage", "menabrea"], repos=["analytical-engine", "notes"])
    return fake


@pytest.fixture
def client(github: FakeGitHub):
    http_client = create_http_client(Settings(), transport=github.transport())
    app.dependency_overrides[get_github_client] = lambda: GitHubClient(http_client)
    app.dependency_overrides[get_publisher] = lambda: None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
