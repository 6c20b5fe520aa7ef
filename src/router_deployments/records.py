"""Persistent record of deployments and completed migrations per network."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .types import DeploymentReceipt


class DeploymentRecords:
    """
    JSON-backed deployment records.

    Structure:
        {network: {"network_id": int,
                   "last_completed_migration": int,
                   "contracts": {contract_name: receipt_dict}}}
    """

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)
        self._data = load_records(self.path)

    def _network(self, network: str) -> Dict[str, Any]:
        return self._data.setdefault(network, {"last_completed_migration": 0, "contracts": {}})

    def record_deployment(self, receipt: DeploymentReceipt) -> None:
        entry = self._network(receipt.network)
        entry["network_id"] = receipt.network_id
        entry.setdefault("contracts", {})[receipt.contract_name] = receipt.to_dict()
        self.save()

    def deployment(self, network: str, contract_name: str) -> Optional[DeploymentReceipt]:
        data = self._data.get(network, {}).get("contracts", {}).get(contract_name)
        if data is None:
            return None
        return DeploymentReceipt(**data)

    def last_completed_migration(self, network: str) -> int:
        return int(self._data.get(network, {}).get("last_completed_migration", 0))

    def set_completed(self, network: str, number: int) -> None:
        self._network(network)["last_completed_migration"] = number
        self.save()

    def reset(self, network: str) -> None:
        self._network(network)["last_completed_migration"] = 0
        self.save()

    def save(self) -> None:
        save_records(self._data, self.path)

    def as_dict(self) -> Dict[str, Any]:
        return self._data


def load_records(path: Path) -> Dict[str, Any]:
    """
    Load existing records or return empty dict.

    Returns:
        Records dictionary; empty if file doesn't exist or is corrupted
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_records(records: Dict[str, Any], path: Path) -> None:
    """Save records to disk, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(records, f, indent=2)
