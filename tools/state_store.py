"""
Key/value state storage
Four independent records, each replaced wholesale on save
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional
from pydantic import TypeAdapter, ValidationError
from models.schemas import (
    AppTheme,
    BudgetGoal,
    DEFAULT_BUDGET,
    Transaction,
    User,
)

logger = logging.getLogger(__name__)

STORAGE_KEY_USER = "fin_risk_radar_user"
STORAGE_KEY_DATA = "fin_risk_radar_transactions"
STORAGE_KEY_BUDGET = "fin_risk_radar_budget"
STORAGE_KEY_THEME = "fin_risk_radar_theme"

_transaction_list = TypeAdapter(list[Transaction])


class StateStore(ABC):
    """String key to JSON-compatible value storage"""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class InMemoryStateStore(StateStore):

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        # Values are kept serialized; reads always return a fresh copy
        self._data[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStateStore(StateStore):
    """All records kept in one JSON document on disk"""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            return json.load(f)

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[Any]:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class AppStateRepository:
    """
    Typed access to the persisted application state.

    Records that are missing or no longer validate fall back to their
    defaults instead of failing the load.
    """

    def __init__(self, store: StateStore):
        self.store = store

    def load_user(self) -> Optional[User]:
        raw = self.store.get(STORAGE_KEY_USER)
        if raw is None:
            return None
        try:
            return User.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable stored user record")
            return None

    def save_user(self, user: User) -> None:
        self.store.set(STORAGE_KEY_USER, user.model_dump(mode="json", by_alias=True))

    def load_transactions(self) -> list[Transaction]:
        raw = self.store.get(STORAGE_KEY_DATA)
        if raw is None:
            return []
        try:
            return _transaction_list.validate_python(raw)
        except ValidationError:
            logger.warning("Discarding unreadable stored transaction set")
            return []

    def save_transactions(self, transactions: list[Transaction]) -> None:
        self.store.set(
            STORAGE_KEY_DATA,
            _transaction_list.dump_python(transactions, mode="json", by_alias=True),
        )

    def load_budget(self) -> BudgetGoal:
        raw = self.store.get(STORAGE_KEY_BUDGET)
        if raw is None:
            return DEFAULT_BUDGET
        try:
            return BudgetGoal.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable stored budget goal")
            return DEFAULT_BUDGET

    def save_budget(self, goal: BudgetGoal) -> None:
        self.store.set(STORAGE_KEY_BUDGET, goal.model_dump(mode="json", by_alias=True))

    def load_theme(self) -> AppTheme:
        raw = self.store.get(STORAGE_KEY_THEME)
        try:
            return AppTheme(raw) if raw is not None else AppTheme.WHITE
        except ValueError:
            return AppTheme.WHITE

    def save_theme(self, theme: AppTheme) -> None:
        self.store.set(STORAGE_KEY_THEME, AppTheme(theme).value)

    def logout(self) -> None:
        """Forget the user's data; the theme preference survives"""
        self.store.remove(STORAGE_KEY_USER)
        self.store.remove(STORAGE_KEY_DATA)
        self.store.remove(STORAGE_KEY_BUDGET)
