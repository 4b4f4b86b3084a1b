"""
Tests for JSONL persistence, record serialization and the YAML config loader.
"""

import json

import pytest

from vena_planner.core.config import DEFAULT_AXIAL_CAPACITY
from vena_planner.core.engine.config_loader import (
    engine_config_from_dict,
    load_engine_config,
)
from vena_planner.core.models import Readiness, SessionKind, SessionRecord
from vena_planner.io.history_store import HistoryStore, get_default_history_path
from vena_planner.io.serializers import (
    ValidationError,
    dict_to_record,
    json_line_to_record,
    parse_kind,
    record_to_dict,
    record_to_json_line,
)


def _record(date: str, lift: str = "squat", **kwargs) -> SessionRecord:
    kwargs.setdefault("top_single", 455.0)
    return SessionRecord(kind=SessionKind.heavy(lift), date=date, **kwargs)


@pytest.fixture
def store(tmp_path):
    return HistoryStore(tmp_path / "alice_history.jsonl", user="alice")


class TestSerializers:
    def test_full_record_survives_json_line(self):
        record = _record(
            "2026-01-06",
            top_rpe=9.5,
            top_quality="good",
            volume_weight=315.0,
            volume_reps=5,
            volume_failed=True,
            volume_is_pivot=True,
            is_pivot=True,
            readiness=Readiness(sleep_score=2, stress_score=4),
            gate_flags=frozenset({"axial_overload", "fatigue"}),
            notes="belt felt loose",
        )
        restored = json_line_to_record(record_to_json_line(record))
        assert restored == record

    def test_dict_layout(self):
        d = record_to_dict(_record("2026-01-06", gate_flags=frozenset({"fatigue", "axial_overload"})))
        assert d["type"] == "heavy_squat"
        assert d["pivot"] is False
        assert d["volume_pivot"] is False
        assert d["gate_flags"] == ["axial_overload", "fatigue"]
        assert d["readiness"] == {"sleep": 3, "stress": 3}
        assert "notes" not in d

    @pytest.mark.parametrize("tag, day_type, lift", [
        ("heavy_squat", "heavy", "squat"),
        ("volume_bench", "volume", "bench"),
        ("vol_bench", "volume", "bench"),
        ("wave_squat", "volume", "squat"),
    ])
    def test_parse_kind(self, tag, day_type, lift):
        assert parse_kind(tag) == SessionKind(day_type=day_type, lift=lift)

    @pytest.mark.parametrize("tag", ["heavy", "heavy_deadlift", "light_squat", 7])
    def test_parse_kind_rejects(self, tag):
        with pytest.raises(ValidationError):
            parse_kind(tag)

    def test_missing_fields(self):
        with pytest.raises(ValidationError, match="missing field"):
            dict_to_record({"id": "x", "date": "2026-01-06"})

    def test_invalid_values_become_validation_errors(self):
        with pytest.raises(ValidationError):
            dict_to_record({"id": "x", "type": "heavy_squat", "date": "2026-01-06", "top_rpe": 12})
        with pytest.raises(ValidationError):
            dict_to_record({"id": "x", "type": "heavy_squat", "date": "2026-01-06", "top_single": "heavy"})

    def test_missing_readiness_defaults(self):
        record = dict_to_record({"id": "x", "type": "heavy_bench", "date": "2026-01-06"})
        assert record.readiness == Readiness()
        assert record.gate_flags == frozenset()
        assert not record.volume_is_pivot


class TestHistoryStore:
    def test_missing_file_is_empty(self, store):
        assert not store.exists()
        assert store.load_history() == []

    def test_append_keeps_date_order(self, store):
        store.append_session(_record("2026-01-13"))
        store.append_session(_record("2026-01-06"))
        store.append_session(_record("2026-01-20"))
        assert [r.date for r in store.load_history()] == ["2026-01-06", "2026-01-13", "2026-01-20"]

    def test_same_kind_and_date_replaces(self, store):
        store.append_session(_record("2026-01-06", top_single=455.0))
        store.append_session(_record("2026-01-06", top_single=465.0))
        store.append_session(_record("2026-01-06", lift="bench", top_single=275.0))
        squat = store.load_history("squat")
        assert len(squat) == 1
        assert squat[0].top_single == 465.0
        assert len(store.load_history()) == 2

    def test_filter_by_lift(self, store):
        store.append_session(_record("2026-01-06"))
        store.append_session(_record("2026-01-07", lift="bench", top_single=275.0))
        assert [r.lift for r in store.load_history("bench")] == ["bench"]
        assert [r.date for r in store.load_history("squat")] == ["2026-01-06"]

    def test_replace_session_by_id(self, store):
        record = _record("2026-01-06")
        store.append_session(record)
        store.replace_session(record.with_volume_result(365.0, 4, failed=False))
        stored = store.load_history()[0]
        assert stored.id == record.id
        assert stored.volume_weight == 365.0

    def test_replace_unknown_id(self, store):
        store.append_session(_record("2026-01-06"))
        with pytest.raises(KeyError):
            store.replace_session(_record("2026-01-06"))

    def test_clear_lift(self, store):
        store.append_session(_record("2026-01-06"))
        store.append_session(_record("2026-01-13"))
        store.append_session(_record("2026-01-07", lift="bench", top_single=275.0))
        assert store.clear_lift("squat") == 2
        assert [r.lift for r in store.load_history()] == ["bench"]

    def test_corrupt_line_reports_line_number(self, store):
        store.append_session(_record("2026-01-06"))
        with open(store.history_path, "a", encoding="utf-8") as f:
            f.write("{not json\n")
        with pytest.raises(ValidationError, match="line 2"):
            store.load_history()

    def test_backup_roundtrip(self, store, tmp_path):
        store.append_session(_record("2026-01-06", gate_flags=frozenset({"sandbagging"})))
        store.append_session(_record("2026-01-13"))
        backup = store.export_backup(tmp_path / "backup.json", config={"axial_capacity": 9000.0})

        data = json.loads(backup.read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert data["config"]["axial_capacity"] == 9000.0

        other = HistoryStore(tmp_path / "restored.jsonl", user="alice")
        assert other.import_backup(backup) == 2
        assert other.load_history() == store.load_history()

    def test_backup_for_other_user_rejected(self, store, tmp_path):
        store.append_session(_record("2026-01-06"))
        backup = store.export_backup(tmp_path / "backup.json")
        with pytest.raises(ValidationError, match="no history for user"):
            HistoryStore(tmp_path / "bob.jsonl", user="bob").import_backup(backup)

    def test_default_path_per_user(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        path = get_default_history_path("Jo Smith")
        assert path.name == "jo_smith_history.jsonl"
        assert path.parent.name == ".vena-planner"


class TestConfigLoader:
    def test_empty_dict_gives_defaults(self):
        cfg = engine_config_from_dict({})
        assert cfg.axial_capacity == DEFAULT_AXIAL_CAPACITY
        assert cfg.volume_default("squat") == 365.0
        assert cfg.training_max("bench") == 315.0

    def test_bundled_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        cfg = load_engine_config()
        assert cfg.axial_capacity == 9000.0
        assert cfg.volume_default("bench") == 225.0

    def test_user_override_merges(self, tmp_path):
        user_yaml = tmp_path / "config.yaml"
        user_yaml.write_text(
            "engine:\n  axial_capacity: 12000\nvolume_defaults:\n  squat: 400\n",
            encoding="utf-8",
        )
        cfg = load_engine_config(user_yaml)
        assert cfg.axial_capacity == 12000.0
        assert cfg.volume_default("squat") == 400.0
        assert cfg.volume_default("bench") == 225.0

    def test_home_config_picked_up(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / ".vena-planner").mkdir()
        (tmp_path / ".vena-planner" / "config.yaml").write_text(
            "training_maxes:\n  bench: 335\n", encoding="utf-8"
        )
        assert load_engine_config().training_max("bench") == 335.0

    def test_malformed_user_file_is_ignored(self, tmp_path):
        user_yaml = tmp_path / "config.yaml"
        user_yaml.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.warns(UserWarning, match="ignoring user config"):
            cfg = load_engine_config(user_yaml)
        assert cfg.axial_capacity == DEFAULT_AXIAL_CAPACITY

    def test_invalid_values_raise(self):
        with pytest.raises(ValueError):
            engine_config_from_dict({"engine": {"axial_capacity": -1}})
        with pytest.raises(ValueError):
            engine_config_from_dict({"volume_defaults": [365]})
