"""Unit tests for jobflow.snapshot."""

import pickle
import threading

import pytest

from jobflow.snapshot import ABSENT, FactSnapshot, Present, create_snapshot


class TestLookup:
    def test_present_value(self):
        snapshot = FactSnapshot({"quotedValue": 1200})

        assert snapshot.lookup("quotedValue") == Present(1200)

    def test_missing_key_is_absent(self):
        assert FactSnapshot({}).lookup("quotedValue") is ABSENT

    def test_none_is_absent(self):
        assert FactSnapshot({"depositAmount": None}).lookup("depositAmount") is ABSENT

    @pytest.mark.parametrize("value", [False, 0, "", [], 0.0])
    def test_falsy_values_are_present(self, value):
        snapshot = FactSnapshot({"field": value})

        result = snapshot.lookup("field")
        assert isinstance(result, Present)
        assert result.value == value
        assert snapshot.has_fact("field")

    def test_absent_is_falsy_singleton(self):
        assert not ABSENT
        assert repr(ABSENT) == "ABSENT"
        assert pickle.loads(pickle.dumps(ABSENT)) is ABSENT


class TestImmutability:
    def test_caller_mutation_does_not_leak(self):
        data = {"hasInvoice": False, "flag": True}
        snapshot = FactSnapshot(data)

        data["flag"] = False
        data["hasInvoice"] = True
        data["extra"] = 1

        assert snapshot["flag"] is True
        assert snapshot["hasInvoice"] is False
        assert "extra" not in snapshot

    def test_to_dict_returns_copy(self):
        snapshot = FactSnapshot({"items": [1]})

        copy = snapshot.to_dict()
        copy["other"] = 2

        assert "other" not in snapshot

    def test_uncopyable_extra_facts_are_kept_by_reference(self):
        lock = threading.Lock()
        snapshot = FactSnapshot({"hasInvoice": True, "session": lock})

        assert snapshot["session"] is lock
        assert snapshot.lookup("hasInvoice") == Present(True)


class TestMappingInterface:
    def test_mapping_protocol(self):
        snapshot = FactSnapshot({"a": 1, "b": None})

        assert len(snapshot) == 2
        assert set(snapshot) == {"a", "b"}
        assert "a" in snapshot
        assert snapshot.get("missing") is None

    def test_rejects_non_mapping(self):
        with pytest.raises(TypeError, match="requires a mapping"):
            FactSnapshot(["a", "b"])  # type: ignore[arg-type]

    def test_rejects_non_string_keys(self):
        with pytest.raises(TypeError, match="must be strings"):
            FactSnapshot({1: "x"})  # type: ignore[dict-item]


class TestCreateSnapshot:
    def test_passes_snapshot_through(self):
        snapshot = FactSnapshot({"a": 1})
        assert create_snapshot(snapshot) is snapshot

    def test_from_dict_and_none(self):
        assert create_snapshot({"a": 1})["a"] == 1
        assert len(create_snapshot(None)) == 0

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            create_snapshot("facts")  # type: ignore[arg-type]
