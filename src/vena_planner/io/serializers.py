"""
JSON serialization for session records.

Handles conversion between SessionRecord dataclasses and JSON-compatible
dicts. The session kind is stored as its ``type`` tag (``heavy_squat``)
and parsed back into a structured SessionKind on load.
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.models import (
    DAY_TYPES,
    GATE_FLAGS,
    LIFTS,
    Readiness,
    SessionKind,
    SessionRecord,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def parse_kind(tag: str) -> SessionKind:
    """
    Parse a stored type tag into a SessionKind.

    Accepts ``heavy_<lift>`` and ``volume_<lift>``; ``vol_`` and ``wave_``
    are read as volume.

    Raises:
        ValidationError: If the tag is not recognised
    """
    if not isinstance(tag, str) or "_" not in tag:
        raise ValidationError(f"Invalid session type: {tag!r}")

    day_type, _, lift = tag.partition("_")
    if day_type in ("vol", "wave"):
        day_type = "volume"
    if day_type not in DAY_TYPES or lift not in LIFTS:
        raise ValidationError(f"Invalid session type: {tag!r}")
    return SessionKind(day_type=day_type, lift=lift)  # type: ignore[arg-type]


def _optional_float(data: dict[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{key} must be a number, got {value!r}") from e


def _optional_int(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{key} must be an integer, got {value!r}") from e


def readiness_to_dict(readiness: Readiness) -> dict[str, int]:
    return {"sleep": readiness.sleep_score, "stress": readiness.stress_score}


def dict_to_readiness(data: dict[str, Any] | None) -> Readiness:
    """Readiness scores are stored as entered; missing scores default to 3."""
    if not data:
        return Readiness()
    return Readiness(
        sleep_score=int(data.get("sleep", 3)),
        stress_score=int(data.get("stress", 3)),
    )


def record_to_dict(record: SessionRecord) -> dict[str, Any]:
    """
    Convert SessionRecord to JSON-compatible dict.

    Args:
        record: SessionRecord to convert

    Returns:
        Dict representation (gate flags as a sorted list)
    """
    d: dict[str, Any] = {
        "id": record.id,
        "type": record.kind.tag,
        "date": record.date,
        "top_single": record.top_single,
        "top_rpe": record.top_rpe,
        "top_quality": record.top_quality,
        "overshoot": record.overshoot,
        "backdown_failed": record.backdown_failed,
        "volume_weight": record.volume_weight,
        "volume_reps": record.volume_reps,
        "volume_failed": record.volume_failed,
        "volume_rpe": record.volume_rpe,
        "volume_pivot": record.volume_is_pivot,
        "volume_target": record.volume_target,
        "previous_volume": record.previous_volume,
        "pivot": record.is_pivot,
        "readiness": readiness_to_dict(record.readiness),
        "gate_flags": sorted(record.gate_flags),
    }
    if record.notes:
        d["notes"] = record.notes
    return d


def dict_to_record(data: dict[str, Any]) -> SessionRecord:
    """
    Convert dict to SessionRecord.

    Args:
        data: Dict representation

    Returns:
        SessionRecord instance

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Session record must be an object, got {type(data).__name__}")

    for key in ("id", "type", "date"):
        if key not in data:
            raise ValidationError(f"Session record missing field: {key}")

    validate_date(data["date"])
    kind = parse_kind(data["type"])

    flags = data.get("gate_flags") or []
    unknown = set(flags) - set(GATE_FLAGS)
    if unknown:
        raise ValidationError(f"Unknown gate flags: {sorted(unknown)}")

    try:
        return SessionRecord(
            id=str(data["id"]),
            kind=kind,
            date=data["date"],
            top_single=_optional_float(data, "top_single"),
            top_rpe=_optional_float(data, "top_rpe"),
            top_quality=data.get("top_quality"),
            overshoot=bool(data.get("overshoot", False)),
            backdown_failed=bool(data.get("backdown_failed", False)),
            volume_weight=_optional_float(data, "volume_weight"),
            volume_reps=_optional_int(data, "volume_reps"),
            volume_failed=bool(data.get("volume_failed", False)),
            volume_rpe=_optional_float(data, "volume_rpe"),
            volume_is_pivot=bool(data.get("volume_pivot", False)),
            volume_target=_optional_float(data, "volume_target"),
            previous_volume=_optional_float(data, "previous_volume"),
            is_pivot=bool(data.get("pivot", False)),
            readiness=dict_to_readiness(data.get("readiness")),
            gate_flags=frozenset(flags),
            notes=data.get("notes"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def record_to_json_line(record: SessionRecord) -> str:
    """
    Serialize a record to a single JSON line.

    Args:
        record: SessionRecord to serialize

    Returns:
        JSON string (single line, no trailing newline)
    """
    return json.dumps(record_to_dict(record), separators=(",", ":"))


def json_line_to_record(line: str) -> SessionRecord:
    """
    Deserialize a JSON line to a SessionRecord.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e

    return dict_to_record(data)
