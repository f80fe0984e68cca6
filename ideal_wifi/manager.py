"""Ideal Wi‑Fi rate manager.

`IdealWifiManager` wires the pieces together for one local device:
- builds the SNR threshold table once from the device capabilities, the target
  error probability and the error-rate model;
- owns the station store, the rate selector and the feedback sink;
- exposes an address-keyed API for the MAC: register peers, feed outcome reports,
  and ask for the next data / RTS transmission configuration.

Callers must serialize calls for a given peer; nothing here blocks.
"""

from typing import Optional
import logging

from .config import IdealManagerConfig, device_from_config, validate_config
from .device import DeviceCapabilities, PeerCapabilities
from .error_model import ErrorRateModel
from .feedback import FeedbackSink
from .modes import TxConfig, legacy_tx_config
from .selector import RateObserver, RateSelector
from .stations import StationRecord, StationStore
from .thresholds import ThresholdTable, build_threshold_table, check_table_covers


logger = logging.getLogger(__name__)


class IdealWifiManager:
    """Rate manager for one local device.

    Only ``config.ber_threshold`` is read when ``device`` is given; the device
    fields of the config (standard, width, streams, guard intervals) serve
    `from_config`. A prebuilt ``thresholds`` table must cover every
    configuration the device can use, otherwise ThresholdError is raised here.
    """

    def __init__(
        self,
        device: DeviceCapabilities,
        config: Optional[IdealManagerConfig] = None,
        error_model: Optional[ErrorRateModel] = None,
        thresholds: Optional[ThresholdTable] = None,
    ):
        self.device = device
        self.config = validate_config(config if config is not None else IdealManagerConfig())
        if thresholds is None:
            thresholds = build_threshold_table(device, error_model, self.config.ber_threshold)
        else:
            check_table_covers(device, thresholds)
        self.thresholds = thresholds
        self.stations = StationStore(default_config=legacy_tx_config(device.default))
        self.selector = RateSelector(device, thresholds, self.stations)
        self.feedback = FeedbackSink(self.stations)
        logger.debug(
            "Ideal manager ready: %d legacy modes, %d MCS, %d thresholds",
            len(device.legacy_modes), len(device.mcs_modes), len(thresholds),
        )

    @classmethod
    def from_config(
        cls,
        config: Optional[IdealManagerConfig] = None,
        error_model: Optional[ErrorRateModel] = None,
    ) -> "IdealWifiManager":
        """Build the device described by ``config`` and a manager for it."""
        config = validate_config(config if config is not None else IdealManagerConfig())
        return cls(device_from_config(config), config, error_model)

    # Station lifecycle

    def add_station(self, address: str, capabilities: Optional[PeerCapabilities] = None) -> int:
        return self.stations.register(address, capabilities)

    def remove_station(self, address: str) -> None:
        self.stations.deregister(self.stations.handle_for(address))

    def update_station_capabilities(self, address: str, capabilities: PeerCapabilities) -> None:
        self.stations.update_capabilities(self.stations.handle_for(address), capabilities)

    def station(self, address: str) -> StationRecord:
        return self.stations.get(self.stations.handle_for(address))

    # Selection

    def get_data_tx_config(self, address: str) -> TxConfig:
        return self.selector.select_data_config(self.stations.handle_for(address))

    def get_rts_tx_config(self, address: str) -> TxConfig:
        return self.selector.select_rts_config(self.stations.handle_for(address))

    def snr_threshold(self, cfg: TxConfig) -> float:
        return self.thresholds.lookup(cfg)

    def add_rate_observer(self, observer: RateObserver) -> None:
        self.selector.add_rate_observer(observer)

    def is_low_latency(self) -> bool:
        """The manager answers synchronously from the last SNR; no lookahead needed."""
        return True

    # Outcome reports

    def report_data_ok(self, address: str, ack_snr: float, data_snr: float) -> None:
        self.feedback.on_data_ok(self.stations.handle_for(address), ack_snr, data_snr)

    def report_rts_ok(self, address: str, cts_snr: float, rts_snr: float) -> None:
        self.feedback.on_rts_ok(self.stations.handle_for(address), cts_snr, rts_snr)

    def report_ampdu_tx_status(self, address: str, n_success: int, n_failed: int, data_snr: float) -> None:
        self.feedback.on_aggregate_status(self.stations.handle_for(address), n_success, n_failed, data_snr)

    def report_rx_ok(self, address: str, rx_snr: float) -> None:
        self.feedback.on_rx_ok(self.stations.handle_for(address), rx_snr)

    def report_rts_failed(self, address: str) -> None:
        self.feedback.on_rts_failed(self.stations.handle_for(address))

    def report_data_failed(self, address: str) -> None:
        self.feedback.on_data_failed(self.stations.handle_for(address))

    def report_final_rts_failed(self, address: str) -> None:
        self.feedback.on_final_rts_failed(self.stations.handle_for(address))

    def report_final_data_failed(self, address: str) -> None:
        self.feedback.on_final_data_failed(self.stations.handle_for(address))
