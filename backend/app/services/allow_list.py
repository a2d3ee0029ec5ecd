# app/services/allow_list.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple
import logging

from app.core.config import DEFAULT_SEARCH_COLUMNS
from app.core.errors import FieldNotAllowed, UnknownModel

logger = logging.getLogger("allow_list")


@dataclass(frozen=True)
class AllowListEntry:
    model: str                                  # table name, e.g. "items"
    columns: Tuple[str, ...]                    # columns callers may SELECT
    search_columns: Tuple[str, ...] = field(default=DEFAULT_SEARCH_COLUMNS)

    def __post_init__(self) -> None:
        if not self.columns:
            raise ValueError(f"allow-list entry '{self.model}' has no columns")
        if not self.search_columns:
            raise ValueError(f"allow-list entry '{self.model}' has no search columns")
        unknown = [c for c in self.search_columns if c not in self.columns]
        if unknown:
            raise ValueError(
                f"search columns {unknown} of '{self.model}' are not in its column list"
            )


class AllowList:
    """
    Closed, read-only map of table name -> permitted columns.

    Built once at startup and shared by every request. It is the only thing
    standing between user input and identifier positions in generated SQL,
    so nothing here is mutable after construction.
    """

    def __init__(self, entries: Iterable[AllowListEntry]):
        by_model: Dict[str, AllowListEntry] = {}
        for entry in entries:
            if entry.model in by_model:
                raise ValueError(f"duplicate allow-list entry '{entry.model}'")
            by_model[entry.model] = entry
        self._entries: Mapping[str, AllowListEntry] = MappingProxyType(by_model)

    @classmethod
    def from_config(cls, raw: Mapping[str, Any]) -> "AllowList":
        """
        Build from the SEARCH_ALLOW_LIST shape: each value is either a list of
        columns or {"columns": [...], "search_columns": [...]}.
        """
        entries: List[AllowListEntry] = []
        for model, spec in raw.items():
            if isinstance(spec, Mapping):
                columns = spec.get("columns") or []
                search_columns = spec.get("search_columns") or DEFAULT_SEARCH_COLUMNS
            else:
                columns = spec
                search_columns = DEFAULT_SEARCH_COLUMNS
            for what, names in (("columns", columns), ("search_columns", search_columns)):
                if not isinstance(names, (list, tuple)) or not all(isinstance(n, str) for n in names):
                    raise ValueError(f"allow-list {what} of '{model}' must be a list of column names")
            entries.append(
                AllowListEntry(
                    model=model,
                    columns=tuple(columns),
                    search_columns=tuple(search_columns),
                )
            )
        allow_list = cls(entries)
        logger.info("Loaded allow-list for models: %s", allow_list.models())
        return allow_list

    def models(self) -> List[str]:
        return list(self._entries.keys())

    def get(self, model: str) -> AllowListEntry:
        entry = self._entries.get(model)
        if entry is None:
            raise UnknownModel(model)
        return entry

    def __contains__(self, model: object) -> bool:
        return model in self._entries

    def validate(self, model: str, fields: Sequence[str]) -> List[str]:
        """
        Return the requested fields, in order, if every one is permitted for
        model. An empty request means the entry's full column list.
        """
        entry = self.get(model)
        if not fields:
            return list(entry.columns)
        allowed = set(entry.columns)
        for f in fields:
            if f not in allowed:
                raise FieldNotAllowed(f, model)
        return list(fields)
