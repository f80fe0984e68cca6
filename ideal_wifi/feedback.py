"""Feedback sink for transmission outcome reports.

The ideal scheme only cares about the SNR carried by successful exchanges:
- data/aggregate reports update the observed SNR unless the reported data SNR is
  not a valid measurement (zero, or negative);
- RTS success always updates the observed SNR with the RTS SNR;
- failure reports are ignored, since the SNR reports already capture channel state.
"""

import logging

from .stations import StationStore


logger = logging.getLogger(__name__)


class FeedbackSink:
    def __init__(self, stations: StationStore):
        self.stations = stations

    def on_data_ok(self, handle: int, ack_snr: float, data_snr: float) -> None:
        record = self.stations.get(handle)
        if data_snr <= 0:
            logger.warning("Data SNR reported as %r for %s; not saving this report", data_snr, record.address)
            return
        record.last_snr_observed = data_snr

    def on_rts_ok(self, handle: int, cts_snr: float, rts_snr: float) -> None:
        self.stations.get(handle).last_snr_observed = rts_snr

    def on_aggregate_status(self, handle: int, n_success: int, n_failed: int, data_snr: float) -> None:
        record = self.stations.get(handle)
        if data_snr <= 0:
            logger.warning("Data SNR reported as %r for %s; not saving this report", data_snr, record.address)
            return
        logger.debug("Aggregate to %s: %d ok, %d failed", record.address, n_success, n_failed)
        record.last_snr_observed = data_snr

    def on_rx_ok(self, handle: int, rx_snr: float) -> None:
        pass

    def on_rts_failed(self, handle: int) -> None:
        pass

    def on_data_failed(self, handle: int) -> None:
        pass

    def on_final_rts_failed(self, handle: int) -> None:
        pass

    def on_final_data_failed(self, handle: int) -> None:
        pass
