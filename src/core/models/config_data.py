from dataclasses import dataclass, field
from typing import List


@dataclass
class emulationConfigData:
    interval_seconds: float = 5.0
    retention_seconds: int = 604800
    sensors: List[str] = field(default_factory=lambda: ["greenhouse-1", "greenhouse-2"])


@dataclass
class chartConfigData:
    refresh_interval_seconds: float = 30.0
    detail_window: int = 0
    overview_window: int = 1


@dataclass
class configData:
    emulation: bool = True
    selection_store: str = "storage/selection.json"
    chart: chartConfigData = field(default_factory=chartConfigData)
    emulator: emulationConfigData = field(default_factory=emulationConfigData)
