from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "devices.json"


@dataclass(frozen=True)
class DeviceProfile:
    name: str
    width: int
    height: int
    bits_per_pixel: int
    gray_levels: Optional[int] = None
    display: Optional[str] = None
    dithering: str = "atkinson"
    rotate: int = 0
    invert: bool = False
    row_order: str = "bottom-up"
    description: str = ""

    @property
    def size(self) -> str:
        return f"{self.width}x{self.height}"


class DeviceRegistry:
    def __init__(self, devices: Iterable[DeviceProfile], aliases: Optional[Dict[str, str]] = None) -> None:
        self._devices = list(devices)
        self._aliases = dict(aliases or {})

    @classmethod
    def load(cls, path: Path = DATA_PATH) -> "DeviceRegistry":
        raw = json.loads(path.read_text(encoding="utf-8"))
        devices = [DeviceProfile(name=name, **item) for name, item in raw.get("devices", {}).items()]
        return cls(devices, raw.get("aliases", {}))

    @property
    def devices(self) -> List[DeviceProfile]:
        return list(self._devices)

    @property
    def aliases(self) -> Dict[str, str]:
        return dict(self._aliases)

    def resolve_name(self, name: str) -> str:
        """Follow an alias to the canonical device name."""
        return self._aliases.get(name, name)

    def get(self, name: str) -> Optional[DeviceProfile]:
        resolved = self.resolve_name(name)
        for device in self._devices:
            if device.name == resolved:
                return device
        resolved_lower = resolved.lower()
        for device in self._devices:
            if device.name.lower() == resolved_lower:
                return device
        return None

    def require(self, name: Optional[str]) -> DeviceProfile:
        if not name:
            raise RuntimeError("Missing device name (see --list-devices)")
        device = self.get(name)
        if not device:
            raise RuntimeError(f"Unknown device '{name}'")
        return device
