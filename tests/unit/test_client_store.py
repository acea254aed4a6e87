import json
from unittest.mock import MagicMock

import pytest

from cashnib.client import ApiClient
from cashnib.client.store import PERSISTED_SLICES, Store


@pytest.fixture
def api():
    return MagicMock(spec=ApiClient)


def test_store_exposes_all_slices(api):
    store = Store(api)
    for name in ("auth", "transaction", "budget", "goal", "investment", "notification", "settings"):
        assert getattr(store, name).client is api


def test_save_and_load_round_trip(api, tmp_path):
    path = tmp_path / "state" / "store.json"
    store = Store(api, path=str(path))
    store.auth.token = "tok"
    store.auth.user = {"id": "u1"}
    store.settings.update_theme("dark")
    store.transaction.items = [{"id": "t1"}]

    store.save()
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert set(saved) == set(PERSISTED_SLICES)
    assert not (tmp_path / "state" / "store.json.tmp").exists()

    restored = Store(api, path=str(path))
    assert restored.load() is True
    assert restored.auth.token == "tok"
    assert restored.auth.user == {"id": "u1"}
    assert restored.settings.settings["theme"] == "dark"
    # Collections are refetched, not persisted
    assert restored.transaction.items == []
    api.set_token.assert_called_with("tok")


def test_load_missing_or_corrupt_file(api, tmp_path):
    store = Store(api, path=str(tmp_path / "missing.json"))
    assert store.load() is False

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert store.load(str(corrupt)) is False
    assert store.settings.settings["theme"] == "light"


def test_save_requires_path(api):
    with pytest.raises(ValueError):
        Store(api).save()
