from datetime import date

import pytest

from relnotes.config import get_input, load_settings, parse_scopes
from relnotes.errors import ConfigError

BASE_ENV = {
    "GITHUB_TOKEN": "ghs_env",
    "GITHUB_REPOSITORY": "acme/shop",
    "GITHUB_REF": "refs/tags/web-v1.0.0",
    "INPUT_APPLICATION_NAME": "web",
}


def test_parse_scopes_drops_blanks():
    assert parse_scopes("  api , , web ,") == ["api", "web"]
    assert parse_scopes("") == []
    assert parse_scopes(None) == []


def test_get_input_prefers_action_input_then_fallback():
    env = {"INPUT_TOKEN": " from-input ", "GITHUB_TOKEN": "from-env"}
    assert get_input("token", env, "GITHUB_TOKEN") == "from-input"
    assert get_input("token", {"GITHUB_TOKEN": "from-env"}, "GITHUB_TOKEN") == "from-env"
    assert get_input("token", {"INPUT_TOKEN": "  "}, "GITHUB_TOKEN") == ""


def test_load_settings_defaults_to_release_mode():
    s = load_settings({}, env=BASE_ENV)
    assert s.mode == "release"
    assert s.target == "update-release"
    assert s.token == "ghs_env"
    assert s.owner == "acme" and s.repo == "shop"
    assert s.ref == "refs/tags/web-v1.0.0"
    assert s.dependent_scopes == []
    assert s.release_date is None


def test_cli_overrides_win_over_inputs():
    env = dict(BASE_ENV, INPUT_SCOPE="api", INPUT_DEPENDENT_SCOPES="a,b")
    s = load_settings(
        {"scope": "web", "dependent_scopes": None, "date": "2024-01-31"}, env=env
    )
    assert s.scope == "web"
    assert s.dependent_scopes == ["a", "b"]
    assert s.release_date == date(2024, 1, 31)


def test_default_target_follows_mode():
    s = load_settings({"mode": "tags"}, env=BASE_ENV)
    assert s.target == "create-release"
    s = load_settings({"mode": "local"}, env={"INPUT_APPLICATION_NAME": "web"})
    assert s.target == "print"
    assert s.needs_github is False


def test_application_name_is_required():
    env = dict(BASE_ENV)
    env.pop("INPUT_APPLICATION_NAME")
    with pytest.raises(ConfigError):
        load_settings({}, env=env)


def test_update_release_requires_release_mode():
    with pytest.raises(ConfigError):
        load_settings({"mode": "tags", "target": "update-release"}, env=BASE_ENV)


def test_remote_modes_require_token_and_repository():
    env = dict(BASE_ENV)
    env.pop("GITHUB_TOKEN")
    with pytest.raises(ConfigError):
        load_settings({}, env=env)
    with pytest.raises(ConfigError):
        load_settings({"repository": "not-a-repo"}, env=BASE_ENV)


def test_linear_requires_github_in_local_mode():
    env = {"INPUT_APPLICATION_NAME": "web", "LINEAR_API_KEY": "lin_key"}
    with pytest.raises(ConfigError):
        load_settings({"mode": "local"}, env=env)


def test_invalid_date_and_mode():
    with pytest.raises(ConfigError):
        load_settings({"date": "31.01.2024"}, env=BASE_ENV)
    with pytest.raises(ConfigError):
        load_settings({"mode": "nope"}, env=BASE_ENV)


def test_max_concurrency_floor():
    s = load_settings({}, env=dict(BASE_ENV, MAX_CONCURRENCY="0"))
    assert s.max_concurrency == 1


def test_max_concurrency_must_be_integer():
    with pytest.raises(ConfigError) as ei:
        load_settings({}, env=dict(BASE_ENV, MAX_CONCURRENCY="many"))
    assert "MAX_CONCURRENCY" in str(ei.value)
