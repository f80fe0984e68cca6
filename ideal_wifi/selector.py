"""Ideal rate selection.

The selector picks, for a peer, the fastest transmission configuration whose SNR
threshold is below the SNR most recently observed from that peer.

Data frames:
1) If the peer's cached selection was made at the current observed SNR, reuse it.
2) Otherwise try the tiers in order HE, VHT, HT, Legacy. A tier applies only when
   both the device and the peer support it and no newer tier applies; Legacy
   always applies. The first tier that yields an eligible candidate wins.
3) Within a tier, the candidate with the highest data rate wins; ties keep the
   first configuration in catalog order.
4) With no eligible candidate anywhere, the default mode is returned (NSS 1,
   800 ns GI) and the cache is left untouched.

RTS frames use the basic rate set only and pick the most robust eligible mode
(highest threshold), without reading or writing the data cache.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
import logging

from .device import DeviceCapabilities, PeerCapabilities
from .modes import (
    CHANNEL_WIDTHS_MHZ,
    HE,
    HT,
    VHT,
    TxConfig,
    is_valid_tx_config,
    legacy_tx_config,
)
from .stations import StationRecord, StationStore
from .thresholds import ThresholdTable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateChange:
    address: str
    old_rate: int
    new_rate: int


RateObserver = Callable[[RateChange], None]
Candidate = Tuple[TxConfig, int]  # (config, data rate bps)


def _snap_width(width_mhz: int, modulation_class: str) -> int:
    """Largest legal width of the class not above width_mhz (at least 20 MHz)."""
    legal = [w for w in CHANNEL_WIDTHS_MHZ[modulation_class] if w <= width_mhz]
    return max(legal) if legal else 20


class RateSelector:
    def __init__(self, device: DeviceCapabilities, thresholds: ThresholdTable, stations: StationStore):
        self.device = device
        self.thresholds = thresholds
        self.stations = stations
        self._observers: List[RateObserver] = []
        # Ordered tier handlers: (name, applies?, search)
        self._tiers: List[Tuple[str, Callable[[PeerCapabilities], bool], Callable[[StationRecord], Optional[Candidate]]]] = [
            ("HE", self._he_applies, self._search_he),
            ("VHT", self._vht_applies, self._search_vht),
            ("HT", self._ht_applies, self._search_ht),
            ("legacy", lambda peer: True, self._search_legacy),
        ]

    def add_rate_observer(self, observer: RateObserver) -> None:
        self._observers.append(observer)

    def remove_rate_observer(self, observer: RateObserver) -> None:
        self._observers.remove(observer)

    def default_config(self) -> TxConfig:
        return legacy_tx_config(self.device.default)

    # Tier applicability

    def _he_applies(self, peer: PeerCapabilities) -> bool:
        return self.device.he_supported and peer.he

    def _vht_applies(self, peer: PeerCapabilities) -> bool:
        return not self._he_applies(peer) and self.device.vht_supported and peer.vht

    def _ht_applies(self, peer: PeerCapabilities) -> bool:
        return not self._he_applies(peer) and not self._vht_applies(peer) and self.device.ht_supported and peer.ht

    # Tier searches

    def _eligible(self, cfg: TxConfig, record: StationRecord) -> bool:
        return self.thresholds.lookup(cfg) < record.last_snr_observed

    def _search_mcs(self, record: StationRecord, modulation_class: str, guard_interval_ns: int) -> Optional[Candidate]:
        peer = record.capabilities
        width = _snap_width(min(peer.channel_width_mhz, self.device.max_channel_width_mhz), modulation_class)
        max_nss = min(peer.spatial_streams, self.device.max_spatial_streams)
        best: Optional[Candidate] = None
        for mode in self.device.mcs_of_class(modulation_class):
            if not peer.supports_mode(mode):
                continue
            if modulation_class == HT:
                nss_values = [mode.ht_nss()] if mode.ht_nss() <= max_nss else []
            else:
                nss_values = list(range(1, max_nss + 1))
            for nss in nss_values:
                cfg = TxConfig(mode=mode, nss=nss, guard_interval_ns=guard_interval_ns, channel_width_mhz=width)
                if not is_valid_tx_config(cfg):
                    logger.debug("Skipping invalid %s", cfg.describe())
                    continue
                rate = cfg.data_rate
                if (best is None or rate > best[1]) and self._eligible(cfg, record):
                    logger.debug("Candidate %s rate %d snr %.6g", cfg.describe(), rate, record.last_snr_observed)
                    best = (cfg, rate)
        return best

    def _search_he(self, record: StationRecord) -> Optional[Candidate]:
        gi = max(record.capabilities.he_guard_interval_ns, self.device.he_guard_interval_ns)
        return self._search_mcs(record, HE, gi)

    def _ht_vht_guard_interval(self, peer: PeerCapabilities) -> int:
        return max(400 if peer.short_guard_interval else 800, self.device.ht_guard_interval_ns)

    def _search_vht(self, record: StationRecord) -> Optional[Candidate]:
        return self._search_mcs(record, VHT, self._ht_vht_guard_interval(record.capabilities))

    def _search_ht(self, record: StationRecord) -> Optional[Candidate]:
        return self._search_mcs(record, HT, self._ht_vht_guard_interval(record.capabilities))

    def _search_legacy(self, record: StationRecord) -> Optional[Candidate]:
        best: Optional[Candidate] = None
        for mode in self.device.legacy_modes:
            if not record.capabilities.supports_mode(mode):
                continue
            cfg = legacy_tx_config(mode)
            rate = cfg.data_rate
            if (best is None or rate > best[1]) and self._eligible(cfg, record):
                logger.debug("Candidate %s rate %d snr %.6g", cfg.describe(), rate, record.last_snr_observed)
                best = (cfg, rate)
        return best

    # Public operations

    def select_data_config(self, handle: int) -> TxConfig:
        """Configuration for the next data frame to the peer behind ``handle``."""
        record = self.stations.get(handle)
        if record.cache_valid():
            logger.debug("Using cached %s to station %s", record.cached_config.describe(), record.address)
            return record.cached_config

        for name, applies, search in self._tiers:
            if not applies(record.capabilities):
                continue
            logger.debug("Searching %s modes to station %s", name, record.address)
            found = search(record)
            if found is not None:
                self._update_cache(record, *found)
                return found[0]

        logger.debug("No suitable mode for station %s; returning default mode", record.address)
        return self.default_config()

    def select_rts_config(self, handle: int) -> TxConfig:
        """Most robust basic-rate configuration that still clears the observed SNR."""
        record = self.stations.get(handle)
        best: Optional[TxConfig] = None
        best_threshold = 0.0
        for mode in self.device.rts_modes:
            cfg = legacy_tx_config(mode)
            threshold = self.thresholds.lookup(cfg)
            if threshold < record.last_snr_observed and (best is None or threshold > best_threshold):
                best = cfg
                best_threshold = threshold
        return best if best is not None else self.default_config()

    def _update_cache(self, record: StationRecord, cfg: TxConfig, rate: int) -> None:
        logger.debug("Updating cached selection for %s to %s at snr %.6g", record.address, cfg.describe(), record.last_snr_observed)
        record.last_snr_used = record.last_snr_observed
        record.cached_config = cfg
        old_rate = record.cached_data_rate
        record.cached_data_rate = rate
        if old_rate != rate:
            logger.debug("Data rate to %s changed %d -> %d", record.address, old_rate, rate)
            change = RateChange(address=record.address, old_rate=old_rate, new_rate=rate)
            for observer in list(self._observers):
                observer(change)


