"""Populations seeded from palace exports."""

import json
import logging

import numpy as np
import pytest

from palace_mem.errors import ConfigurationError
from palace_mem.spacing.palace import (
    iter_palace_memories,
    load_palace,
    records_from_palace,
    validate_palace,
)

PALACE = {
    "name": "Home",
    "loci": [
        {
            "name": "Front door",
            "memories": [
                {"id": "m1", "subject": "Paris", "confidence": 1, "reviewCount": 2},
                {"id": "m2", "subject": "Rome", "confidence": 5},
            ],
        },
        {"name": "Hallway", "memories": []},
        {
            "name": "Kitchen",
            "memories": [
                {"id": "m3", "subject": "Oslo", "confidence": 3},
                {"subject": "Bern"},
                {"id": "m1", "subject": "Paris again", "confidence": 2},
            ],
        },
    ],
}


def test_iter_memories_in_locus_order() -> None:
    subjects = [m["subject"] for m in iter_palace_memories(PALACE)]
    assert subjects == ["Paris", "Rome", "Oslo", "Bern", "Paris again"]


def test_confidence_maps_onto_strength_range(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        arena = records_from_palace(PALACE, np.random.default_rng(0))
    assert [rec.id for rec in arena] == ["m1", "m2", "m3", "mem-3"]
    assert arena.get("m1").base_strength == pytest.approx(0.4)
    assert arena.get("m2").base_strength == pytest.approx(0.8)
    assert arena.get("m3").base_strength == pytest.approx(0.6)
    assert 0.4 <= arena.get("mem-3").base_strength <= 0.8
    assert arena.get("m1").review_count == 2
    assert arena.get("m1").subject == "Paris"
    assert "duplicate" in caplog.text


def test_limit_truncates() -> None:
    arena = records_from_palace(PALACE, np.random.default_rng(0), limit=2)
    assert [rec.id for rec in arena] == ["m1", "m2"]


def test_load_palace_roundtrip(tmp_path) -> None:
    path = tmp_path / "palace.json"
    path.write_text(json.dumps(PALACE), encoding="utf-8")
    assert load_palace(path)["name"] == "Home"


def test_load_palace_rejects_other_json(tmp_path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_palace(path)


@pytest.mark.parametrize(
    "memory, fragment",
    [
        ({"id": "m9", "confidence": "high"}, "'m9'"),
        ({"id": "m9", "reviewCount": "x"}, "'m9'"),
        ({"id": "m9", "confidence": float("nan")}, "not finite"),
        ({"confidence": [3]}, "'mem-1'"),
    ],
)
def test_malformed_memory_rejected(memory, fragment) -> None:
    palace = {"loci": [{"memories": [{"id": "ok", "confidence": 2}, memory]}]}
    with pytest.raises(ConfigurationError) as exc:
        validate_palace(palace)
    assert fragment in str(exc.value)
    with pytest.raises(ConfigurationError):
        records_from_palace(palace, np.random.default_rng(0))


@pytest.mark.parametrize(
    "palace",
    [{"loci": {"name": "x"}}, {"loci": ["hall"]}, {"loci": [{"memories": ["m1"]}]}],
)
def test_malformed_structure_rejected(palace) -> None:
    with pytest.raises(ConfigurationError):
        validate_palace(palace)


def test_validate_counts_memories() -> None:
    assert validate_palace(PALACE) == 5
    assert validate_palace({"name": "empty"}) == 0


def test_load_palace_checks_memories(tmp_path) -> None:
    path = tmp_path / "bad.json"
    bad = {"loci": [{"memories": [{"id": "m1", "reviewCount": "often"}]}]}
    path.write_text(json.dumps(bad), encoding="utf-8")
    with pytest.raises(ConfigurationError) as exc:
        load_palace(path)
    assert "'m1'" in str(exc.value)
