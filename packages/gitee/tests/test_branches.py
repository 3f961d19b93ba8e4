import logging

import pytest
from pydantic import ValidationError

from conftest import body_of

BRANCH = {
    "name": "main",
    "protected": True,
    "commit": {"sha": "c0ffee", "commit": {"message": "Initial commit"}},
}


def test_list_branches(small_page_client, fake):
    fake.add(
        "GET",
        "/repos/me/demo/branches",
        [BRANCH, {"name": "dev", "commit": {"sha": "d3v"}}],
        [{"name": "old"}],
    )
    branches = small_page_client.list_branches(owner="me", repo="demo")

    assert [b.name for b in branches] == ["main", "dev", "old"]
    assert [b.commit_sha for b in branches] == ["c0ffee", "d3v", None]
    assert branches[0].source == BRANCH


def test_get_commit_by_id(client, fake):
    fake.add(
        "GET",
        "/repos/me/demo/commits/abc123",
        {"sha": "abc123", "commit": {"message": "Fix bug"}},
    )
    commit = client.get_commit_by_id(owner="me", repo="demo", sha="abc123")
    assert commit.sha == "abc123"
    assert commit.message == "Fix bug"


def test_get_ref_commit_tag(client, fake):
    release = {"tag_name": "v1.0", "target_commitish": "t4g"}
    fake.add("GET", "/repos/me/demo/releases/tags/v1.0", release)
    commit = client.get_ref_commit(owner="me", repo="demo", ref="refs/tags/v1.0")

    assert commit.sha == "t4g"
    assert commit.message == "v1.0"
    assert commit.source == release


@pytest.mark.parametrize("ref", ["refs/heads/main", "main"])
def test_get_ref_commit_branch(client, fake, ref):
    fake.add("GET", "/repos/me/demo/branches/main", BRANCH)
    commit = client.get_ref_commit(owner="me", repo="demo", ref=ref)

    assert commit.sha == "c0ffee"
    assert commit.message == "Initial commit"
    assert len(fake.calls("GET", "/repos/me/demo/branches/main")) == 1


def test_get_ref_commit_requires_ref(client, fake):
    with pytest.raises(ValidationError):
        client.get_ref_commit(owner="me", repo="demo", ref="")
    assert fake.requests == []


def test_set_protection_branch_makes_two_calls(client, fake):
    fake.add("PUT", "/repos/me/demo/branches/main/protection", BRANCH)
    fake.add("PUT", "/repos/me/demo/branches/main/setting", {})
    client.set_protection_branch(owner="me", repo="demo", branch="main")

    protection, setting = fake.requests
    assert protection.url.path.endswith("/protection")
    assert body_of(protection)["branch"] == "main"
    settings = body_of(setting)
    assert settings["wildcard"] == "main"
    assert settings["pusher"] == "admin"
    assert settings["merger"] == "admin"


def test_get_protection_branch(client, fake):
    fake.add("GET", "/repos/me/demo/branches/main", BRANCH)
    assert client.get_protection_branch(owner="me", repo="demo", branch="main").protected is True


def test_get_protection_branch_is_logged(client, fake, caplog):
    fake.add("GET", "/repos/me/demo/branches/main", BRANCH)
    with caplog.at_level(logging.INFO, logger="gitee.client"):
        client.get_protection_branch(owner="me", repo="demo", branch="main")
    assert "Fetching protection of main in me/demo" in caplog.text
