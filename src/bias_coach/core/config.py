from __future__ import annotations
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .bias_types import BiasDefinition, BiasType
from .types import sha256_hex, stable_json

CONTRACTS_DIR = Path(__file__).parent.parent / "contracts"
BIAS_REGISTRY_FILE = "bias_registry.yaml"


@dataclass(frozen=True)
class BiasRegistry:
    root: Path
    definitions: List[BiasDefinition]
    by_id: Dict[BiasType, BiasDefinition]
    config_hash: str

    def get(self, bias_type: str) -> Optional[BiasDefinition]:
        try:
            return self.by_id.get(BiasType(bias_type))
        except ValueError:
            return None

    def display_name(self, bias_type: str) -> str:
        definition = self.get(bias_type)
        return definition.name if definition else str(bias_type)

    def to_payload(self) -> List[Dict[str, Any]]:
        return [dict(asdict(d), id=d.id.value) for d in self.definitions]


def load_yaml_contract(contracts_dir: str, filename: str) -> Dict[str, Any]:
    """Load a single YAML contract file.

    Args:
        contracts_dir: Directory containing contract YAML files
        filename: Name of the YAML file to load (e.g., "bias_registry.yaml")

    Returns:
        Parsed YAML contract as a dictionary
    """
    root = Path(contracts_dir)
    contract_path = root / filename
    with contract_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _require(condition: bool, msg: str) -> None:
    """Fail-closed helper for contract validation."""
    if not condition:
        raise ValueError(msg)


def _string_list(entry: Dict[str, Any], key: str, idx: int) -> List[str]:
    values = entry.get(key, [])
    _require(isinstance(values, list), f"biases[{idx}].{key} must be a list")
    _require(all(isinstance(v, str) and v.strip() for v in values),
             f"biases[{idx}].{key} entries must be non-empty strings")
    return [v.strip() for v in values]


def normalize_bias_registry(registry: Dict[str, Any]) -> List[BiasDefinition]:
    """
    Validate the bias registry into BiasDefinitions, in file order.

    Expectations:
    - registry["biases"] is a LIST of dicts
    - each entry has a unique id that is a known bias type
    - every bias type is described exactly once
    """
    _require(isinstance(registry, dict), "bias_registry must be a mapping")

    entries = registry.get("biases", [])
    _require(isinstance(entries, list), "bias_registry.biases must be a list")

    definitions: List[BiasDefinition] = []
    seen: set = set()
    valid_ids = {b.value for b in BiasType}
    for idx, entry in enumerate(entries):
        _require(isinstance(entry, dict), f"bias_registry.biases[{idx}] must be an object")
        _require("id" in entry and isinstance(entry["id"], str) and entry["id"].strip(),
                 f"bias_registry.biases[{idx}] missing non-empty 'id'")
        bias_key = entry["id"].strip()
        _require(bias_key in valid_ids, f"unknown bias type in registry: {bias_key}")
        _require(bias_key not in seen, f"duplicate bias registry id: {bias_key}")
        seen.add(bias_key)

        name = entry.get("name")
        _require(isinstance(name, str) and name.strip(), f"bias_registry.biases[{idx}] missing 'name'")

        definitions.append(BiasDefinition(
            id=BiasType(bias_key),
            name=name.strip(),
            description=str(entry.get("description", "")).strip(),
            short_description=str(entry.get("short_description", "")).strip(),
            metrics=_string_list(entry, "metrics", idx),
            interventions=_string_list(entry, "interventions", idx),
        ))

    missing = sorted(valid_ids - seen)
    _require(not missing, f"bias registry missing bias types: {', '.join(missing)}")
    return definitions


def load_bias_registry(path: Optional[str] = None) -> BiasRegistry:
    """Load and validate the bias registry (defaults to the bundled contract)."""
    if path is None:
        registry_path = CONTRACTS_DIR / BIAS_REGISTRY_FILE
    else:
        registry_path = Path(path)

    doc = load_yaml_contract(str(registry_path.parent), registry_path.name)
    definitions = normalize_bias_registry(doc)

    # Hash normalized representation (stable_json)
    config_hash = sha256_hex(stable_json([dict(asdict(d), id=d.id.value) for d in definitions]))
    return BiasRegistry(
        root=registry_path.parent,
        definitions=definitions,
        by_id={d.id: d for d in definitions},
        config_hash=config_hash,
    )
