"""Rate manager configuration.

This module provides:
- `IdealManagerConfig`: the knobs of the ideal rate manager and its device.
- `parse_config_dict`: tolerant parsing of a dict (snake_case or camelCase keys).
- `load_config_file`: read the same structure from a JSON file.

Example JSON:
    {"standard": "802.11ax-5GHz", "channelWidthMHz": 80, "spatialStreams": 2,
     "berThreshold": 1e-5, "heGuardIntervalNs": 800}
"""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .device import DeviceCapabilities, device_for_standard, standard_names
from .modes import HE_GUARD_INTERVALS_NS


@dataclass(frozen=True)
class IdealManagerConfig:
    ber_threshold: float = 1e-5  # target error probability for the threshold table
    standard: str = "802.11a"
    channel_width_mhz: Optional[int] = None  # None: the standard's default width
    spatial_streams: int = 1
    short_guard_interval: bool = False
    he_guard_interval_ns: int = 800


_ALIASES = {
    "berThreshold": "ber_threshold",
    "ber": "ber_threshold",
    "channelWidthMHz": "channel_width_mhz",
    "channelWidth": "channel_width_mhz",
    "spatialStreams": "spatial_streams",
    "nss": "spatial_streams",
    "shortGuardInterval": "short_guard_interval",
    "shortGi": "short_guard_interval",
    "heGuardIntervalNs": "he_guard_interval_ns",
    "heGi": "he_guard_interval_ns",
}


def validate_config(cfg: IdealManagerConfig) -> IdealManagerConfig:
    if not 0.0 < cfg.ber_threshold < 1.0:
        raise ValueError("ber_threshold must be in (0, 1)")
    if cfg.standard not in standard_names():
        raise ValueError(f"Unknown standard {cfg.standard!r}")
    if cfg.channel_width_mhz is not None and cfg.channel_width_mhz < 20:
        raise ValueError("channel_width_mhz must be at least 20")
    if cfg.spatial_streams < 1:
        raise ValueError("spatial_streams must be at least 1")
    if cfg.he_guard_interval_ns not in HE_GUARD_INTERVALS_NS:
        raise ValueError(f"he_guard_interval_ns must be one of {HE_GUARD_INTERVALS_NS}")
    return cfg


def parse_config_dict(data: Dict[str, Any], defaults: Optional[IdealManagerConfig] = None) -> IdealManagerConfig:
    """Build a config from a dict, falling back to ``defaults`` for missing keys.

    Unknown keys raise ValueError so that typos do not silently change behaviour.
    """
    if defaults is None:
        defaults = IdealManagerConfig()
    known = {f.name for f in fields(IdealManagerConfig)}
    updates: Dict[str, Any] = {}
    for key, value in data.items():
        name = _ALIASES.get(key, key)
        if name not in known:
            raise ValueError(f"Unknown configuration key {key!r}")
        updates[name] = value

    if "ber_threshold" in updates:
        updates["ber_threshold"] = float(updates["ber_threshold"])
    if "channel_width_mhz" in updates and updates["channel_width_mhz"] is not None:
        updates["channel_width_mhz"] = int(updates["channel_width_mhz"])
    for key in ("spatial_streams", "he_guard_interval_ns"):
        if key in updates:
            updates[key] = int(updates[key])
    if "short_guard_interval" in updates:
        updates["short_guard_interval"] = bool(updates["short_guard_interval"])
    if "standard" in updates:
        updates["standard"] = str(updates["standard"])
    return validate_config(replace(defaults, **updates))


def load_config_file(path: str | Path, defaults: Optional[IdealManagerConfig] = None) -> IdealManagerConfig:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return parse_config_dict(data, defaults)


def device_from_config(cfg: IdealManagerConfig) -> DeviceCapabilities:
    return device_for_standard(
        cfg.standard,
        channel_width_mhz=cfg.channel_width_mhz,
        spatial_streams=cfg.spatial_streams,
        short_guard_interval=cfg.short_guard_interval,
        he_guard_interval_ns=cfg.he_guard_interval_ns,
    )
