"""Error-rate models and SNR threshold inversion.

The rate manager treats the error-rate model as an opaque callable supplied by the
PHY: ``model(tx_config, snr) -> error probability`` where ``snr`` is a linear power
ratio. This module provides:
- `awgn_error_rate`: a reference AWGN bit-error model per constellation, with the
  channel code approximated as a fixed SNR gain per code rate.
- `calculate_snr_threshold`: invert any model for the minimum SNR meeting a target.
- dB/linear helpers.

Notes:
- The reference curves are indicative only; plug in a lab-measured or link-level
  model for anything quantitative.
- Thresholds do not depend on channel width or NSS in the reference model: the SNR
  reported by the PHY is already per-subcarrier and per-stream.
"""

from typing import Callable
import math

from .modes import DSSS, HR_DSSS, TxConfig


ErrorRateModel = Callable[[TxConfig, float], float]

# Approximate coding gain (dB) of the 802.11 BCC/LDPC code at each code rate
CODING_GAIN_DB = {
    "1/2": 5.0,
    "2/3": 4.0,
    "3/4": 3.5,
    "5/6": 3.0,
    "1/1": 0.0,
}

# Search bounds for the inversion, in dB
SNR_SEARCH_LOW_DB = -250.0
SNR_SEARCH_HIGH_DB = 250.0


def snr_db_to_linear(snr_db: float) -> float:
    return 10.0 ** (snr_db / 10.0)


def snr_linear_to_db(snr: float) -> float:
    if snr <= 0:
        return -math.inf
    return 10.0 * math.log10(snr)


def _qam_bit_error_rate(snr: float, constellation_size: int) -> float:
    if constellation_size == 2:
        return 0.5 * math.erfc(math.sqrt(snr))
    if constellation_size == 4:
        return 0.5 * math.erfc(math.sqrt(snr / 2.0))
    m = float(constellation_size)
    k = math.log2(m)
    ber = (2.0 / k) * (1.0 - 1.0 / math.sqrt(m)) * math.erfc(math.sqrt(3.0 * snr / (2.0 * (m - 1.0))))
    return min(ber, 0.5)


def awgn_error_rate(cfg: TxConfig, snr: float) -> float:
    """Reference bit error probability for ``cfg`` at linear SNR ``snr``.

    DSSS/HR-DSSS rates are modelled as DBPSK with a processing gain of
    11 Mchip/s divided by the bit rate. OFDM-based modes use the uncoded M-QAM
    bit error rate evaluated at SNR plus the coding gain of their code rate.
    """
    if snr <= 0:
        return 0.5
    mode = cfg.mode
    if mode.modulation_class in (DSSS, HR_DSSS):
        gain = 11e6 / float(mode.legacy_rate_bps or 11e6)
        return 0.5 * math.exp(-snr * gain)
    coded_snr = snr * snr_db_to_linear(CODING_GAIN_DB.get(mode.code_rate, 0.0))
    return _qam_bit_error_rate(coded_snr, mode.constellation_size)


def calculate_snr_threshold(
    cfg: TxConfig,
    target_error: float,
    model: ErrorRateModel,
    precision_db: float = 1e-6,
) -> float:
    """Return the minimum linear SNR at which ``model(cfg, snr) <= target_error``.

    Bisection in the dB domain between SNR_SEARCH_LOW_DB and SNR_SEARCH_HIGH_DB.
    Raises ValueError if the model cannot meet the target inside the search range
    or returns a non-finite probability.
    """
    if not 0.0 < target_error < 1.0:
        raise ValueError("target_error must be in (0, 1)")

    def error_at(snr_db: float) -> float:
        err = model(cfg, snr_db_to_linear(snr_db))
        if err is None or not math.isfinite(err):
            raise ValueError(f"Error-rate model returned {err!r} for {cfg.describe()} at {snr_db:.3f} dB")
        return err

    low = SNR_SEARCH_LOW_DB
    high = SNR_SEARCH_HIGH_DB
    if error_at(high) > target_error:
        raise ValueError(f"Error-rate model cannot reach {target_error:g} for {cfg.describe()}")
    if error_at(low) <= target_error:
        return snr_db_to_linear(low)
    while high - low > precision_db:
        middle = low + (high - low) / 2.0
        if error_at(middle) > target_error:
            low = middle
        else:
            high = middle
    return snr_db_to_linear(high)
