"""SNR threshold table.

For every transmission configuration the device can use, precompute the minimum
SNR at which the error-rate model meets the target error probability. The table is
built once when the rate manager is set up and is read-only afterwards.

Enumeration (device catalog order):
- legacy modes at their bandwidth class, NSS 1, 800 ns GI;
- HT MCSs at 20/40 MHz (up to the device width), NSS derived from the MCS index;
- VHT/HE MCSs at every width 20, 40, ... up to the device width and NSS 1..max.
Each non-legacy configuration is added for every guard interval the device may
end up using, since the selector takes the longer of the local and peer GI.
"""

from typing import Dict, Iterator, List, Mapping, Optional, Tuple
import logging
import math

from .device import DeviceCapabilities
from .error_model import ErrorRateModel, awgn_error_rate, calculate_snr_threshold
from .modes import (
    CHANNEL_WIDTHS_MHZ,
    HE,
    HE_GUARD_INTERVALS_NS,
    HT,
    HT_GUARD_INTERVALS_NS,
    TxConfig,
    is_valid_tx_config,
    legacy_tx_config,
)


logger = logging.getLogger(__name__)

DEFAULT_BER_THRESHOLD = 1e-5


class ThresholdError(ValueError):
    """The error-rate model cannot produce a finite threshold for a configuration."""


class MissingThresholdError(KeyError):
    """Lookup of a configuration that was never enumerated into the table."""


def channel_widths_up_to(max_width_mhz: int, modulation_class: str) -> List[int]:
    """Widths 20, 40, ... (doubling) not exceeding max_width_mhz and legal for the class."""
    widths: List[int] = []
    w = 20
    while w <= max_width_mhz:
        if w in CHANNEL_WIDTHS_MHZ[modulation_class]:
            widths.append(w)
        w *= 2
    return widths


def guard_intervals_from(min_gi_ns: int, modulation_class: str) -> List[int]:
    """Guard intervals of the class that are not shorter than min_gi_ns."""
    allowed = HE_GUARD_INTERVALS_NS if modulation_class == HE else HT_GUARD_INTERVALS_NS
    return [gi for gi in allowed if gi >= min_gi_ns]


def enumerate_tx_configs(device: DeviceCapabilities) -> List[TxConfig]:
    """All valid configurations the device can use, without duplicates."""
    configs: List[TxConfig] = []
    seen = set()

    def add(cfg: TxConfig) -> None:
        if cfg in seen or not is_valid_tx_config(cfg):
            return
        seen.add(cfg)
        configs.append(cfg)

    for mode in device.legacy_modes:
        add(legacy_tx_config(mode))

    if not (device.ht_supported or device.vht_supported or device.he_supported):
        return configs

    for mode in device.mcs_modes:
        cls = mode.modulation_class
        if not device.supports_class(cls):
            continue
        min_gi = device.he_guard_interval_ns if cls == HE else device.ht_guard_interval_ns
        for width in channel_widths_up_to(device.max_channel_width_mhz, cls):
            for gi in guard_intervals_from(min_gi, cls):
                if cls == HT:
                    nss_values = [mode.ht_nss()]
                else:
                    nss_values = list(range(1, device.max_spatial_streams + 1))
                for nss in nss_values:
                    add(TxConfig(mode=mode, nss=nss, guard_interval_ns=gi, channel_width_mhz=width))
    return configs


class ThresholdTable:
    """Immutable TxConfig -> minimum SNR (linear) mapping."""

    def __init__(self, entries: Mapping[TxConfig, float]):
        self._thresholds: Dict[TxConfig, float] = dict(entries)
        for cfg, thr in self._thresholds.items():
            if thr is None or math.isnan(thr):
                raise ThresholdError(f"Invalid threshold {thr!r} for {cfg.describe()}")

    def lookup(self, cfg: TxConfig) -> float:
        try:
            return self._thresholds[cfg]
        except KeyError:
            raise MissingThresholdError(f"No SNR threshold for {cfg.describe()}") from None

    def __contains__(self, cfg: object) -> bool:
        return cfg in self._thresholds

    def __len__(self) -> int:
        return len(self._thresholds)

    def __iter__(self) -> Iterator[TxConfig]:
        return iter(self._thresholds)

    def items(self) -> Iterator[Tuple[TxConfig, float]]:
        return iter(self._thresholds.items())


def build_threshold_table(
    device: DeviceCapabilities,
    model: Optional[ErrorRateModel] = None,
    ber_threshold: float = DEFAULT_BER_THRESHOLD,
) -> ThresholdTable:
    """Solve the minimum SNR for every enumerable configuration of ``device``.

    Raises ThresholdError when the model cannot produce a finite threshold for a
    configuration the device can use; the device is misconfigured in that case.
    """
    if model is None:
        model = awgn_error_rate
    entries: Dict[TxConfig, float] = {}
    for cfg in enumerate_tx_configs(device):
        try:
            thr = calculate_snr_threshold(cfg, ber_threshold, model)
        except ValueError as exc:
            raise ThresholdError(str(exc)) from exc
        if not math.isfinite(thr):
            raise ThresholdError(f"Non-finite threshold for {cfg.describe()}")
        logger.debug("Adding threshold %.6g for %s", thr, cfg.describe())
        entries[cfg] = thr
    logger.info("Built SNR threshold table with %d entries (target error %g)", len(entries), ber_threshold)
    return ThresholdTable(entries)


def check_table_covers(device: DeviceCapabilities, table: ThresholdTable) -> ThresholdTable:
    """Raise ThresholdError unless ``table`` holds every configuration ``device`` can use."""
    for cfg in enumerate_tx_configs(device):
        if cfg not in table:
            raise ThresholdError(f"Threshold table has no entry for {cfg.describe()}")
    return table
