from .modes import (
    TransmissionMode,
    TxConfig,
    channel_width_for_legacy_mode,
    legacy_tx_config,
    is_valid_tx_config,
    dsss_modes,
    ofdm_modes,
    erp_ofdm_modes,
    ht_mcs_modes,
    vht_mcs_modes,
    he_mcs_modes,
)
from .error_model import (
    ErrorRateModel,
    awgn_error_rate,
    calculate_snr_threshold,
    snr_db_to_linear,
    snr_linear_to_db,
)
from .device import (
    DeviceCapabilities,
    PeerCapabilities,
    device_for_standard,
    peer_like_device,
    standard_names,
)
from .thresholds import (
    ThresholdTable,
    ThresholdError,
    MissingThresholdError,
    enumerate_tx_configs,
    build_threshold_table,
    check_table_covers,
)
from .stations import StationRecord, StationStore
from .selector import RateChange, RateSelector
from .feedback import FeedbackSink
from .config import (
    IdealManagerConfig,
    parse_config_dict,
    load_config_file,
    device_from_config,
)
from .manager import IdealWifiManager
from .scenario import (
    SweepRow,
    snr_grid_db,
    sweep_snr,
    rows_to_table,
    threshold_rows,
    print_table,
    save_table_csv,
)

__all__ = [
    "TransmissionMode",
    "TxConfig",
    "channel_width_for_legacy_mode",
    "legacy_tx_config",
    "is_valid_tx_config",
    "dsss_modes",
    "ofdm_modes",
    "erp_ofdm_modes",
    "ht_mcs_modes",
    "vht_mcs_modes",
    "he_mcs_modes",
    "ErrorRateModel",
    "awgn_error_rate",
    "calculate_snr_threshold",
    "snr_db_to_linear",
    "snr_linear_to_db",
    "DeviceCapabilities",
    "PeerCapabilities",
    "device_for_standard",
    "peer_like_device",
    "standard_names",
    "ThresholdTable",
    "ThresholdError",
    "MissingThresholdError",
    "enumerate_tx_configs",
    "build_threshold_table",
    "check_table_covers",
    "StationRecord",
    "StationStore",
    "RateChange",
    "RateSelector",
    "FeedbackSink",
    "IdealManagerConfig",
    "parse_config_dict",
    "load_config_file",
    "device_from_config",
    "IdealWifiManager",
    "SweepRow",
    "snr_grid_db",
    "sweep_snr",
    "rows_to_table",
    "threshold_rows",
    "print_table",
    "save_table_csv",
]
