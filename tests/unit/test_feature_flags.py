import pytest

from cashnib.utils.feature_flags import (
    budget_alerts_enabled,
    describe_feature_flags,
    disabled_features,
    get_feature_flags,
    refresh_feature_flag_cache,
    transaction_import_enabled,
)


@pytest.fixture(autouse=True)
def clear_feature_flag_cache():
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


def test_feature_flags_default_true():
    flags = get_feature_flags()
    assert flags == {
        "budget_alerts_enabled": True,
        "goal_milestones_enabled": True,
        "transaction_anomalies_enabled": True,
        "transaction_import_enabled": True,
    }


def test_feature_flags_env_override(monkeypatch):
    monkeypatch.setenv("FEATURE_BUDGET_ALERTS_ENABLED", "false")
    monkeypatch.setenv("FEATURE_TRANSACTION_IMPORT_ENABLED", "0")
    refresh_feature_flag_cache()

    assert budget_alerts_enabled() is False
    assert transaction_import_enabled() is False
    assert get_feature_flags()["goal_milestones_enabled"] is True


def test_feature_flags_unrecognized_value_uses_default(monkeypatch):
    monkeypatch.setenv("FEATURE_BUDGET_ALERTS_ENABLED", "maybe")
    refresh_feature_flag_cache()
    assert budget_alerts_enabled() is True


def test_feature_flags_are_cached_until_refresh(monkeypatch):
    assert budget_alerts_enabled() is True
    monkeypatch.setenv("FEATURE_BUDGET_ALERTS_ENABLED", "off")
    assert budget_alerts_enabled() is True
    refresh_feature_flag_cache()
    assert budget_alerts_enabled() is False


def test_unrecognized_value_is_logged(monkeypatch, caplog):
    monkeypatch.setenv("FEATURE_GOAL_MILESTONES_ENABLED", "sometimes")
    refresh_feature_flag_cache()
    with caplog.at_level("WARNING", logger="cashnib.utils.feature_flags"):
        assert get_feature_flags()["goal_milestones_enabled"] is True
    assert "FEATURE_GOAL_MILESTONES_ENABLED" in caplog.text


def test_describe_and_disabled_features(monkeypatch):
    monkeypatch.setenv("FEATURE_TRANSACTION_ANOMALIES_ENABLED", "no")
    refresh_feature_flag_cache()

    described = {entry["key"]: entry for entry in describe_feature_flags()}
    assert set(described) == set(get_feature_flags())
    assert described["transaction_anomalies_enabled"]["enabled"] is False
    assert described["transaction_anomalies_enabled"]["env_var"] == "FEATURE_TRANSACTION_ANOMALIES_ENABLED"
    assert described["budget_alerts_enabled"]["description"]
    assert disabled_features() == ["transaction_anomalies_enabled"]
