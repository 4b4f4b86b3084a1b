"""
JSONL-based history storage for training sessions.

Implements the History Provider the engine consumes: one file per user,
one JSON record per line, kept in date order.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.models import Lift, SessionRecord
from ..core.metrics import sessions_for_lift
from .serializers import (
    ValidationError,
    dict_to_record,
    record_to_dict,
    record_to_json_line,
)

logger = logging.getLogger(__name__)

BACKUP_FORMAT_VERSION = 1


class HistoryStore:
    """
    Manages one user's training history stored in JSONL format.

    Each line is a session record. Records are kept sorted by date; a
    record with the same kind and date as an existing one replaces it.
    """

    def __init__(self, history_path: str | Path, user: str = "default"):
        """
        Initialize the history store.

        Args:
            history_path: Path to the JSONL history file
            user: Owner of the history (used in backups)
        """
        self.history_path = Path(history_path)
        self.user = user

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Initialize empty history file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.history_path.exists():
            self.history_path.touch()

    def load_history(self, lift: Lift | None = None) -> list[SessionRecord]:
        """
        Load sessions from the history file.

        Args:
            lift: Only return records for this lift (all lifts if None)

        Returns:
            List of SessionRecord, sorted by date. Empty if the file is missing.

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            return []

        records: list[SessionRecord] = []

        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    records.append(dict_to_record(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        records.sort(key=lambda r: r.date)

        if lift is not None:
            return sessions_for_lift(records, lift)
        return records

    def append_session(self, record: SessionRecord) -> None:
        """
        Add a record to the history file.

        Maintains chronological order by inserting at the correct position.
        A record of the same kind on the same date is replaced.

        Args:
            record: Record to add
        """
        self.init()
        records = self.load_history()

        record_date = datetime.strptime(record.date, "%Y-%m-%d")
        insert_idx = len(records)

        for i, existing in enumerate(records):
            existing_date = datetime.strptime(existing.date, "%Y-%m-%d")
            if record_date < existing_date:
                insert_idx = i
                break
            elif record_date == existing_date and existing.kind == record.kind:
                records[i] = record
                insert_idx = -1
                logger.info("Replaced %s session on %s", record.kind.tag, record.date)
                break

        if insert_idx >= 0:
            records.insert(insert_idx, record)
            logger.info("Logged %s session on %s", record.kind.tag, record.date)

        self._write_records(records)

    def replace_session(self, record: SessionRecord) -> None:
        """
        Overwrite the stored record with the same id (volume attachment).

        Raises:
            KeyError: If no record with that id exists
        """
        records = self.load_history()
        for i, existing in enumerate(records):
            if existing.id == record.id:
                records[i] = record
                self._write_records(records)
                logger.info("Updated %s session on %s", record.kind.tag, record.date)
                return
        raise KeyError(f"No session with id {record.id}")

    def _write_records(self, records: list[SessionRecord]) -> None:
        """
        Write all records to the history file.

        Args:
            records: Records to write
        """
        with open(self.history_path, "w", encoding="utf-8") as f:
            for record in records:
                f.write(record_to_json_line(record) + "\n")

    def clear_lift(self, lift: Lift) -> int:
        """
        Delete every record for one lift (bulk reset).

        Returns:
            Number of records removed
        """
        records = self.load_history()
        kept = [r for r in records if r.kind.lift != lift]
        removed = len(records) - len(kept)
        if self.history_path.exists():
            self._write_records(kept)
        logger.info("Cleared %d %s sessions", removed, lift)
        return removed

    def export_backup(self, path: str | Path, config: dict[str, Any] | None = None) -> Path:
        """
        Write this user's history (and optional config) to a JSON backup.

        Args:
            path: Destination file
            config: Settings to include alongside the history

        Returns:
            Path written
        """
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": BACKUP_FORMAT_VERSION,
            "config": config or {},
            "histories": {
                self.user: [record_to_dict(r) for r in self.load_history()],
            },
        }
        with open(out, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        return out

    def import_backup(self, path: str | Path) -> int:
        """
        Replace this user's history with the one stored in a backup file.

        Every record is validated before anything is written.

        Returns:
            Number of records imported

        Raises:
            ValidationError: If the backup is malformed or has no history for this user
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid backup file {path}: {e}") from e

        histories = data.get("histories") if isinstance(data, dict) else None
        if not isinstance(histories, dict) or self.user not in histories:
            raise ValidationError(f"Backup {path} has no history for user {self.user!r}")

        records = [dict_to_record(d) for d in histories[self.user]]
        records.sort(key=lambda r: r.date)

        self.init()
        self._write_records(records)
        logger.info("Imported %d sessions for %s from %s", len(records), self.user, path)
        return len(records)


def get_default_history_path(user: str = "default") -> Path:
    """
    Get the default history file path for a user.

    Args:
        user: User name

    Returns:
        ``~/.vena-planner/<user>_history.jsonl``
    """
    safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in user.lower())
    return Path.home() / ".vena-planner" / f"{safe}_history.jsonl"
