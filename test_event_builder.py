import asyncio

from user_service.user_events.builder import (
    EventBuilder, assemble_user_info_event, route_repos, split_name
)
from user_service.user_events.config import Settings
from user_service.user_events.models import GitHubRepo, GitHubUser, ProfileUpdateRequest


PROFILE = GitHubUser(login="ada", id=1815, name="Ada Lovelace", email="ada@example.com")


def test_split_name():
    assert split_name("Ada Lovelace") == ("Ada", "Lovelace")
    assert split_name("Ada") == ("Ada", "")
    assert split_name("") == ("", "")
    assert split_name(None) == ("", "")


def test_route_repos():
    assert route_repos(["babbage"], ["repo-a", "repo-b"]) == ["repo-a", "repo-b"]
    assert route_repos(["babbage"], ["repo-a", "repo-b"], legacy=True) == ["babbage", "repo-b"]
    assert route_repos(["babbage"], [], legacy=True) == []


def test_assemble_without_overrides_uses_profile():
    event = assemble_user_info_event(
        PROFILE,
        [GitHubUser(login="babbage", id=2)],
        [GitHubRepo(name="notes")],
    )

    assert event.meta.type == "UserInfoChanged"
    assert event.meta.event_id != event.meta.trace_id
    assert event.payload.email == "ada@example.com"
    assert (event.payload.first_name, event.payload.last_name) == ("Ada", "Lovelace")
    assert event.payload.followers == ["babbage"]
    assert event.payload.repos == ["notes"]


def test_assemble_with_overrides_ignores_profile_fields():
    overrides = ProfileUpdateRequest(email="", first_name="Augusta", time_zone_id="UTC")

    event = assemble_user_info_event(PROFILE, [], [], overrides, service_id="profiles")

    assert event.meta.service_id == "profiles"
    assert event.payload.id == 1815
    assert event.payload.username == "ada"
    assert event.payload.email == ""
    assert event.payload.first_name == "Augusta"
    assert event.payload.last_name == ""
    assert event.payload.time_zone_id == "UTC"


def test_created_at_is_epoch_nanoseconds():
    event = assemble_user_info_event(PROFILE, [], [])

    # posterior a 2020-01-01 en nanosegundos
    assert event.meta.created_at > 1_577_836_800 * 10**9


class StubGitHub:
    def __init__(self):
        self.calls = []

    async def get_followers(self, login):
        self.calls.append(("followers", login))
        return [GitHubUser(login="babbage", id=2), GitHubUser(login="menabrea", id=3)]

    async def get_repos(self, login):
        self.calls.append(("repos", login))
        return [GitHubRepo(name="analytical-engine")]


def test_event_builder_fetches_followers_then_repos():
    github = StubGitHub()
    builder = EventBuilder(github, Settings(service_name="user-service"))

    event = asyncio.run(builder.build(PROFILE))

    assert github.calls == [("followers", "ada"), ("repos", "ada")]
    assert event.payload.followers == ["babbage", "menabrea"]
    assert event.payload.repos == ["analytical-engine"]


def test_event_builder_honours_legacy_setting():
    builder = EventBuilder(StubGitHub(), Settings(legacy_repo_routing=True))

    event = asyncio.run(builder.build(PROFILE))

    assert event.payload.repos == ["babbage", "menabrea", "analytical-engine"]
