"""Local device and remote peer capability descriptors.

A `DeviceCapabilities` describes what the local PHY can do (mode lists, widths,
streams, guard intervals, HT/VHT/HE support). A `PeerCapabilities` describes what a
remote station advertised at association. The rate selector always intersects the
two.

Standard presets mirror the usual 802.11 PHY configurations:
- 802.11a / 802.11b / 802.11g: legacy only
- 802.11n (2.4/5 GHz): legacy + HT
- 802.11ac: OFDM + HT + VHT
- 802.11ax (2.4/5 GHz): legacy + HT (+ VHT at 5 GHz) + HE
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from .modes import (
    HE,
    HE_GUARD_INTERVALS_NS,
    HT,
    VHT,
    TransmissionMode,
    dsss_modes,
    erp_ofdm_modes,
    he_mcs_modes,
    ht_mcs_modes,
    ofdm_modes,
    vht_mcs_modes,
)


# Mandatory rates used as the basic (control) rate set
_OFDM_BASIC = ("OfdmRate6Mbps", "OfdmRate12Mbps", "OfdmRate24Mbps")
_DSSS_BASIC = ("DsssRate1Mbps", "DsssRate2Mbps")


@dataclass(frozen=True)
class DeviceCapabilities:
    legacy_modes: Tuple[TransmissionMode, ...]
    mcs_modes: Tuple[TransmissionMode, ...] = ()
    basic_modes: Tuple[TransmissionMode, ...] = ()  # RTS / control rate set; defaults to the first legacy mode
    max_channel_width_mhz: int = 20
    max_spatial_streams: int = 1
    short_guard_interval: bool = False
    he_guard_interval_ns: int = 800
    ht_supported: bool = False
    vht_supported: bool = False
    he_supported: bool = False
    default_mode: Optional[TransmissionMode] = None

    def __post_init__(self):
        if not self.legacy_modes:
            raise ValueError("Device must support at least one legacy mode")
        if self.max_channel_width_mhz < 20:
            raise ValueError("max_channel_width_mhz must be at least 20")
        if self.max_spatial_streams < 1:
            raise ValueError("max_spatial_streams must be at least 1")
        if self.he_guard_interval_ns not in HE_GUARD_INTERVALS_NS:
            raise ValueError(f"he_guard_interval_ns must be one of {HE_GUARD_INTERVALS_NS}")
        for m in self.basic_modes:
            if m not in self.legacy_modes:
                raise ValueError(f"Basic mode {m.unique_name} is not a supported legacy mode")
        if self.default_mode is not None and self.default_mode not in self.legacy_modes:
            raise ValueError("default_mode must be one of the legacy modes")

    @property
    def default(self) -> TransmissionMode:
        return self.default_mode if self.default_mode is not None else self.legacy_modes[0]

    @property
    def rts_modes(self) -> Tuple[TransmissionMode, ...]:
        return self.basic_modes if self.basic_modes else (self.default,)

    @property
    def ht_guard_interval_ns(self) -> int:
        return 400 if self.short_guard_interval else 800

    def supports_class(self, modulation_class: str) -> bool:
        return {HT: self.ht_supported, VHT: self.vht_supported, HE: self.he_supported}.get(modulation_class, False)

    def mcs_of_class(self, modulation_class: str) -> Tuple[TransmissionMode, ...]:
        return tuple(m for m in self.mcs_modes if m.modulation_class == modulation_class)


@dataclass(frozen=True)
class PeerCapabilities:
    """Capabilities advertised by a remote station.

    supported_modes / supported_mcs hold unique mode names; None means the peer
    supports everything the local device does.
    """
    ht: bool = False
    vht: bool = False
    he: bool = False
    channel_width_mhz: int = 20
    spatial_streams: int = 1
    short_guard_interval: bool = False
    he_guard_interval_ns: int = 800
    supported_modes: Optional[FrozenSet[str]] = None
    supported_mcs: Optional[FrozenSet[str]] = None

    def supports_mode(self, mode: TransmissionMode) -> bool:
        names = self.supported_modes if mode.is_legacy else self.supported_mcs
        return names is None or mode.unique_name in names


def _dsss_erp_modes() -> List[TransmissionMode]:
    return dsss_modes() + erp_ofdm_modes()


# standard -> (legacy mode list, basic rate names, default width, ht, vht, he)
_PRESETS: Dict[str, Tuple[Callable[[], List[TransmissionMode]], Tuple[str, ...], int, bool, bool, bool]] = {
    "802.11a": (ofdm_modes, _OFDM_BASIC, 20, False, False, False),
    "802.11b": (dsss_modes, _DSSS_BASIC, 22, False, False, False),
    "802.11g": (_dsss_erp_modes, _DSSS_BASIC, 20, False, False, False),
    "802.11n-2.4GHz": (_dsss_erp_modes, _DSSS_BASIC, 20, True, False, False),
    "802.11n-5GHz": (ofdm_modes, _OFDM_BASIC, 40, True, False, False),
    "802.11ac": (ofdm_modes, _OFDM_BASIC, 80, True, True, False),
    "802.11ax-2.4GHz": (_dsss_erp_modes, _DSSS_BASIC, 20, True, False, True),
    "802.11ax-5GHz": (ofdm_modes, _OFDM_BASIC, 80, True, True, True),
}


def standard_names() -> Tuple[str, ...]:
    return tuple(_PRESETS)


def device_for_standard(
    standard: str,
    channel_width_mhz: Optional[int] = None,
    spatial_streams: int = 1,
    short_guard_interval: bool = False,
    he_guard_interval_ns: int = 800,
) -> DeviceCapabilities:
    """Build the capabilities of a device configured for ``standard``.

    The basic rate set is the lowest mandatory rates of the preset (e.g. 6/12/24
    Mbps for OFDM); channel width defaults to the preset width.
    """
    if standard not in _PRESETS:
        raise ValueError(f"Unknown standard {standard!r}; expected one of {list(_PRESETS)}")
    legacy_fn, basic_names, default_width, ht, vht, he = _PRESETS[standard]
    legacy = legacy_fn()
    mcs: List[TransmissionMode] = []
    if ht:
        mcs += ht_mcs_modes(spatial_streams)
    if vht:
        mcs += vht_mcs_modes()
    if he:
        mcs += he_mcs_modes()
    width = channel_width_mhz if channel_width_mhz is not None else default_width
    return DeviceCapabilities(
        legacy_modes=tuple(legacy),
        mcs_modes=tuple(mcs),
        basic_modes=tuple(m for m in legacy if m.unique_name in basic_names),
        max_channel_width_mhz=max(20, width),
        max_spatial_streams=spatial_streams,
        short_guard_interval=short_guard_interval,
        he_guard_interval_ns=he_guard_interval_ns,
        ht_supported=ht,
        vht_supported=vht,
        he_supported=he,
    )


def peer_like_device(device: DeviceCapabilities) -> PeerCapabilities:
    """Peer capabilities mirroring the local device (a peer of the same make)."""
    return PeerCapabilities(
        ht=device.ht_supported,
        vht=device.vht_supported,
        he=device.he_supported,
        channel_width_mhz=device.max_channel_width_mhz,
        spatial_streams=device.max_spatial_streams,
        short_guard_interval=device.short_guard_interval,
        he_guard_interval_ns=device.he_guard_interval_ns,
    )
