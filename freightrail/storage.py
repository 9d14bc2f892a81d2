"""
storage.py – Key-value repository for saved submissions, freight items and
searches.

The engine never imports this module; callers inject a repository where
they want persistence.  Records are JSON-serialisable dicts carrying an
``"id"`` key.
"""
from __future__ import annotations

import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import FreightRailError

logger = logging.getLogger("freightrail.storage")

Record = Dict[str, Any]


def new_id(prefix: str = "rec") -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class Repository(ABC):
    """get / save / delete / list over records keyed by ``"id"``."""

    def __init__(self, prefix: str = "rec"):
        self.prefix = prefix

    # -- backend hooks --------------------------------------------------------
    @abstractmethod
    def _load(self) -> Dict[str, Record]:
        ...

    @abstractmethod
    def _store(self, records: Dict[str, Record]) -> None:
        ...

    # -- public API -------------------------------------------------------------
    def get(self, record_id: str) -> Optional[Record]:
        record = self._load().get(record_id)
        return dict(record) if record is not None else None

    def save(self, record: Record) -> Record:
        """Insert or replace ``record``; assigns an id when missing and stamps ``updated_date``."""
        stored = dict(record)
        stored.setdefault("id", new_id(self.prefix))
        stored["updated_date"] = datetime.now(timezone.utc).isoformat()
        records = self._load()
        records[stored["id"]] = stored
        self._store(records)
        logger.debug("Saved record %s", stored["id"])
        return dict(stored)

    def delete(self, record_id: str) -> bool:
        records = self._load()
        if records.pop(record_id, None) is None:
            return False
        self._store(records)
        return True

    def list(self) -> List[Record]:
        """All records, most recently updated first."""
        records = [dict(r) for r in self._load().values()]
        return sorted(records, key=lambda r: r.get("updated_date", ""), reverse=True)


class InMemoryRepository(Repository):
    def __init__(self, prefix: str = "rec"):
        super().__init__(prefix)
        self._records: Dict[str, Record] = {}

    def _load(self) -> Dict[str, Record]:
        return dict(self._records)

    def _store(self, records: Dict[str, Record]) -> None:
        self._records = dict(records)


class JsonFileRepository(Repository):
    """Records kept as a JSON list in one file; a missing file is an empty store."""

    def __init__(self, path: Union[str, Path], prefix: str = "rec"):
        super().__init__(prefix)
        self.path = Path(path)

    def _load(self) -> Dict[str, Record]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise FreightRailError(f"Corrupt repository file {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise FreightRailError(f"Corrupt repository file {self.path}: expected a JSON list")
        return {r["id"]: r for r in data if isinstance(r, dict) and "id" in r}

    def _store(self, records: Dict[str, Record]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(list(records.values()), f, indent=2, default=str)
