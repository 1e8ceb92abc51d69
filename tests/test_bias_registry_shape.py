from __future__ import annotations

from pathlib import Path
import yaml

from bias_coach.core.bias_types import BiasType

REGISTRY_PATH = Path(__file__).parent.parent / "src" / "bias_coach" / "contracts" / "bias_registry.yaml"


def test_bias_registry_entries_list():
    assert REGISTRY_PATH.exists(), "bias_registry.yaml missing"
    data = yaml.safe_load(REGISTRY_PATH.read_text(encoding="utf-8")) or {}
    biases = data.get("biases", [])
    assert isinstance(biases, list), "biases must be a list"
    ids = [b.get("id") for b in biases]
    assert all(isinstance(i, str) and i.strip() for i in ids), "each bias needs non-empty string id"
    assert len(set(ids)) == len(ids), "bias ids must be unique"


def test_bias_registry_covers_every_bias_type_in_detector_order():
    data = yaml.safe_load(REGISTRY_PATH.read_text(encoding="utf-8")) or {}
    ids = [b["id"] for b in data["biases"]]
    assert ids == [b.value for b in BiasType]


def test_bias_registry_entries_have_text():
    data = yaml.safe_load(REGISTRY_PATH.read_text(encoding="utf-8")) or {}
    for entry in data["biases"]:
        assert entry.get("name"), f"{entry['id']} missing name"
        assert entry.get("short_description"), f"{entry['id']} missing short_description"
        assert entry.get("description"), f"{entry['id']} missing description"
        assert isinstance(entry.get("metrics"), list) and entry["metrics"]
        assert isinstance(entry.get("interventions"), list) and entry["interventions"]
