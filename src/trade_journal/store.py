"""Single-document JSON persistence with atomic replace."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import structlog

from trade_journal.config import Settings
from trade_journal.errors import FormatError
from trade_journal.ledger import Ledger

logger = structlog.get_logger()


class JsonDocumentStore:
    """Load/save the whole journal as one JSON file. Last write wins."""

    def __init__(self, path: str | os.PathLike[str], config: Settings | None = None) -> None:
        self.path = Path(path)
        self.config = config

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Ledger:
        """Read the document. A missing file yields an empty first-launch ledger."""
        if not self.exists():
            logger.info("journal_not_found", path=str(self.path))
            return Ledger(config=self.config)

        try:
            with self.path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as exc:
            raise FormatError(f"Journal file {self.path} is not valid JSON: {exc}") from exc

        return Ledger.deserialize(document, config=self.config)

    def save(self, ledger: Ledger) -> None:
        """Write to a temp file beside the target, then os.replace over it."""
        document = ledger.serialize()
        target_dir = self.path.parent
        target_dir.mkdir(parents=True, exist_ok=True)

        # Same directory so the replace stays on one filesystem.
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=target_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        finally:
            if os.path.exists(tmp):
                os.unlink(tmp)

        logger.info(
            "ledger_saved",
            path=str(self.path),
            trades=len(document["trades"]),
            fund_movements=len(document["fundMovements"]),
        )
