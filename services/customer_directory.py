"""Static customer id -> display name/email lookup, loaded at startup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class CustomerInfo(BaseModel):
    name: str
    email: str | None = None


class CustomerDirectory:
    """Read-only mapping of Shopify customer ids to known account names."""

    def __init__(self, entries: dict[str, CustomerInfo] | None = None) -> None:
        self._entries = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_mapping(cls, raw: dict) -> CustomerDirectory:
        entries = {str(cid): CustomerInfo.model_validate(info) for cid, info in raw.items()}
        return cls(entries)

    @classmethod
    def load(cls, path: str | Path) -> CustomerDirectory:
        """Load a directory from a JSON object keyed by customer id.

        A missing file yields an empty directory so that reports still
        render with generic ``Customer #<id>`` names.
        """
        path = Path(path)
        if not path.is_file():
            logger.warning("Customer directory %s not found; using generic names", path)
            return cls()

        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            msg = f"Customer directory {path} must be a JSON object keyed by customer id"
            raise ValueError(msg)
        directory = cls.from_mapping(raw)
        logger.info("Loaded %d customer(s) from %s", len(directory), path)
        return directory

    def name_for(self, customer_id: int | str | None) -> str:
        if customer_id is None:
            return "Unknown customer"
        info = self._entries.get(str(customer_id))
        return info.name if info else f"Customer #{customer_id}"

    def email_for(self, customer_id: int | str | None) -> str | None:
        if customer_id is None:
            return None
        info = self._entries.get(str(customer_id))
        return info.email if info else None
