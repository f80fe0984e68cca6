"""Per-peer adaptation state.

`StationStore` keeps the live `StationRecord` objects keyed by an integer
handle assigned at registration. Handles are stable for the lifetime of the
record and are never reused, so a stale handle cannot alias a newer peer.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional
import itertools
import logging

from .device import PeerCapabilities
from .modes import TxConfig


logger = logging.getLogger(__name__)


@dataclass
class StationRecord:
    handle: int
    address: str
    capabilities: PeerCapabilities
    cached_config: TxConfig
    last_snr_observed: float = 0.0  # most recent SNR report (linear)
    last_snr_used: Optional[float] = None  # SNR of the last fresh search; None until one succeeds
    cached_data_rate: int = 0

    def cache_valid(self) -> bool:
        return self.last_snr_used is not None and self.last_snr_used == self.last_snr_observed

    def invalidate_cache(self) -> None:
        self.last_snr_used = None


class StationStore:
    def __init__(self, default_config: TxConfig):
        self._default_config = default_config
        self._records: Dict[int, StationRecord] = {}
        self._handles = itertools.count()
        self._by_address: Dict[str, int] = {}

    def register(self, address: str, capabilities: Optional[PeerCapabilities] = None) -> int:
        """Create the record for a newly associated peer and return its handle."""
        if address in self._by_address:
            raise ValueError(f"Station {address} is already registered")
        handle = next(self._handles)
        record = StationRecord(
            handle=handle,
            address=address,
            capabilities=capabilities if capabilities is not None else PeerCapabilities(),
            cached_config=self._default_config,
        )
        self._records[handle] = record
        self._by_address[address] = handle
        logger.debug("Registered station %s with handle %d", address, handle)
        return handle

    def get(self, handle: int) -> StationRecord:
        record = self._records.get(handle)
        if record is None:
            raise KeyError(f"Unknown station handle {handle}")
        return record

    def handle_for(self, address: str) -> int:
        try:
            return self._by_address[address]
        except KeyError:
            raise KeyError(f"Unknown station {address}") from None

    def deregister(self, handle: int) -> None:
        record = self.get(handle)
        del self._records[handle]
        del self._by_address[record.address]
        logger.debug("Deregistered station %s (handle %d)", record.address, handle)

    def update_capabilities(self, handle: int, capabilities: PeerCapabilities) -> None:
        """Replace the peer's advertised capabilities; the cached selection no longer applies."""
        record = self.get(handle)
        record.capabilities = capabilities
        record.invalidate_cache()

    def __len__(self) -> int:
        return len(self._by_address)

    def __iter__(self) -> Iterator[StationRecord]:
        return iter(list(self._records.values()))

    def __contains__(self, address: object) -> bool:
        return address in self._by_address
