import json
import os
import threading
from collections.abc import Callable
from typing import Any

from finance_reports.logger import get_logger

logger = get_logger(__name__)

HIDE_AMOUNTS_KEY = "hideCurrency"

VisibilityListener = Callable[[bool], None]


class JsonPreferenceStore:
    def __init__(self, data_path: str = "preferences.json"):
        self.data_path = data_path
        self._values: dict[str, Any] = {}
        self._lock = threading.Lock()
        self.load()

    def load(self) -> None:
        if not os.path.exists(self.data_path):
            self._values = {}
            return
        try:
            with open(self.data_path, encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("[PREFS] Could not read %s (%s), starting empty.", self.data_path, exc)
            data = {}
        self._values = data if isinstance(data, dict) else {}

    def save(self) -> None:
        directory = os.path.dirname(self.data_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.data_path, "w", encoding="utf-8") as handle:
            json.dump(self._values, handle, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
            self.save()


class AmountVisibility:
    def __init__(self, store: JsonPreferenceStore):
        self.store = store
        self._listeners: list[VisibilityListener] = []
        self._lock = threading.Lock()

    def is_hidden(self) -> bool:
        value = self.store.get(HIDE_AMOUNTS_KEY, False)
        if isinstance(value, str):
            return value.lower() == "true"
        return bool(value)

    def set_hidden(self, hidden: bool) -> bool:
        self.store.set(HIDE_AMOUNTS_KEY, bool(hidden))
        logger.info("[PREFS] Amounts %s.", "hidden" if hidden else "visible")
        self._publish(bool(hidden))
        return bool(hidden)

    def toggle(self) -> bool:
        return self.set_hidden(not self.is_hidden())

    def subscribe(self, listener: VisibilityListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, hidden: bool) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(hidden)
            except Exception:
                logger.exception("[PREFS] Visibility listener failed.")
