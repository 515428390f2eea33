from unittest.mock import MagicMock

import pytest

from finance_reports.domain.visibility import HIDE_AMOUNTS_KEY, AmountVisibility, JsonPreferenceStore


@pytest.fixture
def store(tmp_path):
    return JsonPreferenceStore(data_path=str(tmp_path / "preferences.json"))


def test_amounts_visible_by_default(store):
    assert AmountVisibility(store).is_hidden() is False


def test_toggle_persists(store, tmp_path):
    visibility = AmountVisibility(store)

    assert visibility.toggle() is True

    reloaded = AmountVisibility(JsonPreferenceStore(data_path=str(tmp_path / "preferences.json")))
    assert reloaded.is_hidden() is True
    assert visibility.toggle() is False


def test_subscribers_receive_new_state(store):
    visibility = AmountVisibility(store)
    listener = MagicMock()
    unsubscribe = visibility.subscribe(listener)

    visibility.toggle()
    visibility.set_hidden(False)
    unsubscribe()
    visibility.toggle()

    assert [call.args[0] for call in listener.call_args_list] == [True, False]


def test_failing_listener_does_not_block_others(store):
    visibility = AmountVisibility(store)
    broken = MagicMock(side_effect=RuntimeError("boom"))
    healthy = MagicMock()
    visibility.subscribe(broken)
    visibility.subscribe(healthy)

    visibility.toggle()

    healthy.assert_called_once_with(True)


def test_string_flag_is_understood(store):
    store.set(HIDE_AMOUNTS_KEY, "true")
    assert AmountVisibility(store).is_hidden() is True


def test_corrupt_store_reads_as_empty(tmp_path):
    path = tmp_path / "preferences.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonPreferenceStore(data_path=str(path))

    assert store.get(HIDE_AMOUNTS_KEY) is None
