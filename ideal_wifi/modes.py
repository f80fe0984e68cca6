"""Wi‑Fi transmission modes and transmission configurations.

This module is the mode catalog used by the threshold table and the rate selector:
- `TransmissionMode`: one PHY modulation/coding scheme (legacy rate or HT/VHT/HE MCS).
- `TxConfig`: a complete transmission configuration (mode, NSS, GI, channel width).
- Catalog builders for each PHY generation and the nominal data-rate formulas.

Notes:
- Data rates follow the OFDM formula N_SD * bits/subcarrier * R * NSS / T_sym, with
  T_sym = 3.2 us + GI for HT/VHT and 12.8 us + GI for HE.
- Legacy modes (DSSS, HR/DSSS, OFDM, ERP-OFDM) have a fixed rate and bandwidth class.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import math


DSSS = "DSSS"
HR_DSSS = "HR-DSSS"
ERP_OFDM = "ERP-OFDM"
OFDM = "OFDM"
HT = "HT"
VHT = "VHT"
HE = "HE"

LEGACY_CLASSES = (DSSS, HR_DSSS, ERP_OFDM, OFDM)

# Guard intervals (ns) a configuration may use, per modulation class
HT_GUARD_INTERVALS_NS = (400, 800)
HE_GUARD_INTERVALS_NS = (800, 1600, 3200)
LEGACY_GUARD_INTERVAL_NS = 800

MAX_NSS = {HT: 4, VHT: 8, HE: 8}
CHANNEL_WIDTHS_MHZ = {HT: (20, 40), VHT: (20, 40, 80, 160), HE: (20, 40, 80, 160)}

# Data subcarriers per channel width
_HT_VHT_DATA_SUBCARRIERS = {20: 52, 40: 108, 80: 234, 160: 468}
_HE_DATA_SUBCARRIERS = {20: 234, 40: 468, 80: 980, 160: 1960}

# (modulation, constellation size, code rate) per MCS value, shared by HT/VHT/HE
_MCS_PARAMS: List[Tuple[str, int, str]] = [
    ("BPSK", 2, "1/2"),
    ("QPSK", 4, "1/2"),
    ("QPSK", 4, "3/4"),
    ("16-QAM", 16, "1/2"),
    ("16-QAM", 16, "3/4"),
    ("64-QAM", 64, "2/3"),
    ("64-QAM", 64, "3/4"),
    ("64-QAM", 64, "5/6"),
    ("256-QAM", 256, "3/4"),
    ("256-QAM", 256, "5/6"),
    ("1024-QAM", 1024, "3/4"),
    ("1024-QAM", 1024, "5/6"),
]


@dataclass(frozen=True)
class TransmissionMode:
    unique_name: str
    modulation_class: str
    constellation_size: int
    code_rate: str  # e.g. "3/4"; legacy DSSS modes use "1/1"
    mcs_value: Optional[int] = None  # HT/VHT/HE only
    legacy_rate_bps: Optional[int] = None  # legacy only

    @property
    def is_legacy(self) -> bool:
        return self.modulation_class in LEGACY_CLASSES

    @property
    def code_rate_value(self) -> float:
        num, den = self.code_rate.split("/")
        return float(num) / float(den)

    @property
    def bits_per_subcarrier(self) -> int:
        return int(math.log2(self.constellation_size))

    def ht_nss(self) -> int:
        """NSS encoded in an HT MCS index (MCS 0-7 one stream, 8-15 two, ...)."""
        if self.modulation_class != HT or self.mcs_value is None:
            raise ValueError(f"{self.unique_name} is not an HT mode")
        return self.mcs_value // 8 + 1

    def data_rate(self, channel_width_mhz: int, guard_interval_ns: int, nss: int) -> int:
        """Nominal PHY data rate in bit/s for this mode under the given configuration."""
        if self.is_legacy:
            return int(self.legacy_rate_bps or 0)
        if self.modulation_class == HE:
            n_sd = _HE_DATA_SUBCARRIERS.get(channel_width_mhz)
            symbol_s = 12.8e-6 + guard_interval_ns * 1e-9
        else:
            n_sd = _HT_VHT_DATA_SUBCARRIERS.get(channel_width_mhz)
            symbol_s = 3.2e-6 + guard_interval_ns * 1e-9
        if n_sd is None:
            raise ValueError(f"Unsupported channel width {channel_width_mhz} MHz for {self.unique_name}")
        bits = n_sd * self.bits_per_subcarrier * self.code_rate_value * nss
        return int(round(bits / symbol_s))


@dataclass(frozen=True)
class TxConfig:
    """Transmission vector handed back to the frame transmission path."""
    mode: TransmissionMode
    nss: int
    guard_interval_ns: int
    channel_width_mhz: int

    @property
    def data_rate(self) -> int:
        return self.mode.data_rate(self.channel_width_mhz, self.guard_interval_ns, self.nss)

    def describe(self) -> str:
        return (
            f"{self.mode.unique_name} nss={self.nss} gi={self.guard_interval_ns}ns "
            f"width={self.channel_width_mhz}MHz"
        )


def channel_width_for_legacy_mode(mode: TransmissionMode) -> int:
    """Bandwidth class of a legacy mode: 22 MHz for (HR/)DSSS, 20 MHz for OFDM."""
    if not mode.is_legacy:
        raise ValueError(f"{mode.unique_name} is not a legacy mode")
    if mode.modulation_class in (DSSS, HR_DSSS):
        return 22
    return 20


def legacy_tx_config(mode: TransmissionMode) -> TxConfig:
    return TxConfig(
        mode=mode,
        nss=1,
        guard_interval_ns=LEGACY_GUARD_INTERVAL_NS,
        channel_width_mhz=channel_width_for_legacy_mode(mode),
    )


def is_valid_tx_config(cfg: TxConfig) -> bool:
    """Return True if the PHY can transmit with this configuration."""
    mode = cfg.mode
    if mode.is_legacy:
        return (
            cfg.nss == 1
            and cfg.guard_interval_ns == LEGACY_GUARD_INTERVAL_NS
            and cfg.channel_width_mhz == channel_width_for_legacy_mode(mode)
        )
    cls = mode.modulation_class
    if cfg.channel_width_mhz not in CHANNEL_WIDTHS_MHZ[cls]:
        return False
    if cfg.nss < 1 or cfg.nss > MAX_NSS[cls]:
        return False
    if cls == HE:
        if cfg.guard_interval_ns not in HE_GUARD_INTERVALS_NS:
            return False
    elif cfg.guard_interval_ns not in HT_GUARD_INTERVALS_NS:
        return False
    if cls == HT and cfg.nss != mode.ht_nss():
        return False
    if cls == VHT:
        # Combinations where N_DBPS is not an integer are excluded by 802.11ac
        mcs = mode.mcs_value
        if cfg.channel_width_mhz == 20 and mcs == 9 and cfg.nss not in (3, 6):
            return False
        if cfg.channel_width_mhz == 80 and mcs == 6 and cfg.nss in (3, 7):
            return False
        if cfg.channel_width_mhz == 160 and mcs == 9 and cfg.nss == 3:
            return False
    return True


def dsss_modes() -> List[TransmissionMode]:
    """802.11b rates: DSSS 1/2 Mbps, HR/DSSS (CCK) 5.5/11 Mbps."""
    return [
        TransmissionMode("DsssRate1Mbps", DSSS, 2, "1/1", legacy_rate_bps=1_000_000),
        TransmissionMode("DsssRate2Mbps", DSSS, 4, "1/1", legacy_rate_bps=2_000_000),
        TransmissionMode("DsssRate5_5Mbps", HR_DSSS, 16, "1/1", legacy_rate_bps=5_500_000),
        TransmissionMode("DsssRate11Mbps", HR_DSSS, 256, "1/1", legacy_rate_bps=11_000_000),
    ]


_OFDM_RATES: List[Tuple[str, int, str, int]] = [
    ("6Mbps", 2, "1/2", 6_000_000),
    ("9Mbps", 2, "3/4", 9_000_000),
    ("12Mbps", 4, "1/2", 12_000_000),
    ("18Mbps", 4, "3/4", 18_000_000),
    ("24Mbps", 16, "1/2", 24_000_000),
    ("36Mbps", 16, "3/4", 36_000_000),
    ("48Mbps", 64, "2/3", 48_000_000),
    ("54Mbps", 64, "3/4", 54_000_000),
]


def ofdm_modes() -> List[TransmissionMode]:
    """802.11a OFDM rates (6-54 Mbps)."""
    return [TransmissionMode(f"OfdmRate{name}", OFDM, m, r, legacy_rate_bps=bps) for name, m, r, bps in _OFDM_RATES]


def erp_ofdm_modes() -> List[TransmissionMode]:
    """802.11g ERP-OFDM rates (same rate set as 802.11a at 2.4 GHz)."""
    return [TransmissionMode(f"ErpOfdmRate{name}", ERP_OFDM, m, r, legacy_rate_bps=bps) for name, m, r, bps in _OFDM_RATES]


def ht_mcs_modes(max_nss: int = 4) -> List[TransmissionMode]:
    """HT MCS 0..(8*max_nss - 1); the MCS index encodes the stream count."""
    n_streams = max(1, min(max_nss, MAX_NSS[HT]))
    modes: List[TransmissionMode] = []
    for idx in range(8 * n_streams):
        _, m, r = _MCS_PARAMS[idx % 8]
        modes.append(TransmissionMode(f"HtMcs{idx}", HT, m, r, mcs_value=idx))
    return modes


def vht_mcs_modes() -> List[TransmissionMode]:
    """VHT MCS 0-9."""
    return [TransmissionMode(f"VhtMcs{i}", VHT, m, r, mcs_value=i) for i, (_, m, r) in enumerate(_MCS_PARAMS[:10])]


def he_mcs_modes() -> List[TransmissionMode]:
    """HE MCS 0-11."""
    return [TransmissionMode(f"HeMcs{i}", HE, m, r, mcs_value=i) for i, (_, m, r) in enumerate(_MCS_PARAMS)]


def modes_by_name(modes: List[TransmissionMode]) -> Dict[str, TransmissionMode]:
    return {m.unique_name: m for m in modes}
