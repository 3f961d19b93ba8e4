import pytest
from pydantic import ValidationError

from gitee import GiteeConfig, ListDefaults, get_token
from gitee import config as config_module
from gitee.models import pick


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("GITEE_TOKEN", raising=False)
    monkeypatch.delenv("GITEE_ACCESS_TOKEN", raising=False)
    return monkeypatch


def test_explicit_token_wins(clean_env):
    clean_env.setenv("GITEE_TOKEN", "env")
    assert get_token("explicit") == "explicit"


def test_env_token_order(clean_env):
    clean_env.setenv("GITEE_ACCESS_TOKEN", "second")
    assert get_token() == "second"
    clean_env.setenv("GITEE_TOKEN", "first")
    assert get_token() == "first"


def test_no_token(clean_env):
    assert get_token() is None


def test_dotenv_is_only_loaded_on_request(clean_env):
    calls = []

    def fake_load_dotenv():
        calls.append(True)
        clean_env.setenv("GITEE_TOKEN", "from-dotenv")
        return True

    clean_env.setattr(config_module, "load_dotenv", fake_load_dotenv)
    assert get_token() is None
    assert get_token(use_dotenv=True) == "from-dotenv"
    assert calls == [True]


def test_config_requires_token():
    with pytest.raises(ValidationError, match="Access token is required"):
        GiteeConfig(access_token="  ")


def test_list_defaults_are_fresh_per_call():
    defaults = ListDefaults()
    first = defaults.as_params()
    first["page"] = 5
    assert defaults.as_params() == {"per_page": 100, "page": 1, "sort": "updated"}


def test_list_defaults_reject_zero_page_size():
    with pytest.raises(ValidationError):
        ListDefaults(per_page=0)


def test_pick():
    data = {"owner": {"login": "me"}, "commit": None}
    assert pick(data, "owner.login") == "me"
    assert pick(data, "owner.avatar_url") is None
    assert pick(data, "commit.sha") is None
    assert pick(None, "id", default="x") == "x"
