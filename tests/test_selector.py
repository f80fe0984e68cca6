from ideal_wifi.device import DeviceCapabilities, PeerCapabilities, device_for_standard, peer_like_device
from ideal_wifi.error_model import snr_db_to_linear
from ideal_wifi.manager import IdealWifiManager
from ideal_wifi.modes import HE, HT, VHT, legacy_tx_config, ofdm_modes
from ideal_wifi.thresholds import ThresholdTable


def _legacy_manager(thresholds_by_mbps, basic_mbps=None):
    """Device with the 6/9/12 Mbps OFDM modes and explicit thresholds."""
    modes = ofdm_modes()[:3]
    by_mbps = {m.legacy_rate_bps // 1_000_000: m for m in modes}
    table = ThresholdTable({legacy_tx_config(by_mbps[r]): thr for r, thr in thresholds_by_mbps.items()})
    basic = modes if basic_mbps is None else [by_mbps[r] for r in basic_mbps]
    device = DeviceCapabilities(legacy_modes=tuple(modes), basic_modes=tuple(basic))
    manager = IdealWifiManager(device, thresholds=table)
    manager.add_station("peer")
    return manager


def _step_model(threshold_db):
    """Error model that is perfect above threshold_db(cfg) and useless below."""
    def model(cfg, snr):
        return 0.0 if snr >= snr_db_to_linear(threshold_db(cfg)) else 1.0
    return model


def test_example_scenario_data_and_rts():
    manager = _legacy_manager({6: 2.0, 9: 5.0, 12: 9.0})
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=6.0)
    assert manager.get_data_tx_config("peer").mode.unique_name == "OfdmRate9Mbps"
    assert manager.get_rts_tx_config("peer").mode.unique_name == "OfdmRate9Mbps"

    manager.report_data_ok("peer", ack_snr=1.0, data_snr=1.0)
    data = manager.get_data_tx_config("peer")
    rts = manager.get_rts_tx_config("peer")
    assert data.mode.unique_name == "OfdmRate6Mbps"
    assert rts.mode.unique_name == "OfdmRate6Mbps"


def test_cache_coherence_no_second_notification():
    manager = _legacy_manager({6: 2.0, 9: 5.0, 12: 9.0})
    changes = []
    manager.add_rate_observer(changes.append)
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=6.0)
    first = manager.get_data_tx_config("peer")
    second = manager.get_data_tx_config("peer")
    assert first == second
    assert len(changes) == 1
    assert (changes[0].address, changes[0].old_rate, changes[0].new_rate) == ("peer", 0, 9_000_000)
    rec = manager.station("peer")
    assert rec.last_snr_used == 6.0
    assert rec.cached_config == first
    assert rec.cached_data_rate == 9_000_000


def test_snr_change_forces_new_search_in_both_directions():
    manager = _legacy_manager({6: 2.0, 9: 5.0, 12: 9.0})
    changes = []
    manager.add_rate_observer(changes.append)
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=6.0)
    manager.get_data_tx_config("peer")
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=10.0)
    assert manager.get_data_tx_config("peer").mode.unique_name == "OfdmRate12Mbps"
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=5.5)
    assert manager.get_data_tx_config("peer").mode.unique_name == "OfdmRate9Mbps"
    assert [(c.old_rate, c.new_rate) for c in changes] == [
        (0, 9_000_000),
        (9_000_000, 12_000_000),
        (12_000_000, 9_000_000),
    ]
    # Same rate after a new SNR: search runs but nothing is reported
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=5.8)
    manager.get_data_tx_config("peer")
    assert len(changes) == 3
    assert manager.station("peer").last_snr_used == 5.8


def test_discarded_report_keeps_cache():
    manager = _legacy_manager({6: 2.0, 9: 5.0, 12: 9.0})
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=10.0)
    cfg = manager.get_data_tx_config("peer")
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=0.0)
    assert manager.station("peer").cache_valid()
    assert manager.get_data_tx_config("peer") == cfg


def test_rts_prefers_robust_mode_while_data_prefers_rate():
    manager = _legacy_manager({6: 2.0, 9: 5.0, 12: 4.0})
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=6.0)
    assert manager.get_data_tx_config("peer").mode.unique_name == "OfdmRate12Mbps"
    assert manager.get_rts_tx_config("peer").mode.unique_name == "OfdmRate9Mbps"


def test_rts_uses_basic_rates_only_and_leaves_cache_alone():
    manager = _legacy_manager({6: 2.0, 9: 5.0, 12: 9.0}, basic_mbps=[6, 12])
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=6.0)
    assert manager.get_rts_tx_config("peer").mode.unique_name == "OfdmRate6Mbps"
    assert manager.station("peer").last_snr_used is None
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=10.0)
    assert manager.get_rts_tx_config("peer").mode.unique_name == "OfdmRate12Mbps"


def test_fallback_is_default_legacy_config_and_not_cached():
    manager = _legacy_manager({6: 2.0, 9: 5.0, 12: 9.0})
    changes = []
    manager.add_rate_observer(changes.append)
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=1.0)
    for cfg in (manager.get_data_tx_config("peer"), manager.get_rts_tx_config("peer")):
        assert cfg.mode.unique_name == "OfdmRate6Mbps"
        assert (cfg.nss, cfg.guard_interval_ns, cfg.channel_width_mhz) == (1, 800, 20)
    assert manager.station("peer").last_snr_used is None
    assert changes == []


def test_peer_supported_modes_limit_legacy_search():
    manager = _legacy_manager({6: 2.0, 9: 5.0, 12: 9.0})
    manager.add_station("slow", PeerCapabilities(supported_modes=frozenset({"OfdmRate6Mbps", "OfdmRate9Mbps"})))
    manager.report_data_ok("slow", ack_snr=1.0, data_snr=20.0)
    assert manager.get_data_tx_config("slow").mode.unique_name == "OfdmRate9Mbps"


def _tiered_threshold_db(cfg):
    # Only HE MCS 0 is reachable among HE configurations; VHT/HT/legacy are cheap
    if cfg.mode.modulation_class == HE:
        return 10.0 if cfg.mode.mcs_value == 0 else 60.0
    return 0.0


def _ax_manager(width=20):
    device = device_for_standard("802.11ax-5GHz", channel_width_mhz=width)
    return IdealWifiManager(device, error_model=_step_model(_tiered_threshold_db)), device


def test_he_tier_wins_over_faster_vht_candidates():
    manager, device = _ax_manager()
    manager.add_station("ax", peer_like_device(device))
    manager.report_data_ok("ax", ack_snr=1.0, data_snr=snr_db_to_linear(20.0))
    cfg = manager.get_data_tx_config("ax")
    assert cfg.mode.modulation_class == HE
    assert cfg.mode.unique_name == "HeMcs0"
    assert (cfg.nss, cfg.guard_interval_ns, cfg.channel_width_mhz) == (1, 800, 20)


def test_empty_he_tier_falls_back_to_legacy_not_vht():
    manager, device = _ax_manager()
    manager.add_station("ax", peer_like_device(device))
    manager.report_data_ok("ax", ack_snr=1.0, data_snr=snr_db_to_linear(5.0))
    cfg = manager.get_data_tx_config("ax")
    assert cfg.mode.is_legacy
    assert cfg.mode.unique_name == "OfdmRate54Mbps"


def test_vht_and_ht_peers_use_their_newest_tier():
    manager, device = _ax_manager()
    manager.add_station("ac", PeerCapabilities(ht=True, vht=True, channel_width_mhz=20))
    manager.add_station("n", PeerCapabilities(ht=True, channel_width_mhz=20))
    for peer in ("ac", "n"):
        manager.report_data_ok(peer, ack_snr=1.0, data_snr=snr_db_to_linear(20.0))
    ac = manager.get_data_tx_config("ac")
    n = manager.get_data_tx_config("n")
    assert ac.mode.modulation_class == VHT
    assert ac.mode.unique_name == "VhtMcs8"  # MCS 9 is not valid at 20 MHz with one stream
    assert n.mode.modulation_class == HT
    assert n.mode.unique_name == "HtMcs7"


def test_width_and_guard_interval_use_the_conservative_side():
    manager, device = _ax_manager(width=80)
    manager.add_station("narrow", PeerCapabilities(he=True, channel_width_mhz=40, he_guard_interval_ns=1600))
    manager.add_station("wide", PeerCapabilities(he=True, channel_width_mhz=160))
    for peer in ("narrow", "wide"):
        manager.report_data_ok(peer, ack_snr=1.0, data_snr=snr_db_to_linear(20.0))
    narrow = manager.get_data_tx_config("narrow")
    wide = manager.get_data_tx_config("wide")
    assert (narrow.channel_width_mhz, narrow.guard_interval_ns) == (40, 1600)
    assert (wide.channel_width_mhz, wide.guard_interval_ns) == (80, 800)


def test_capability_update_invalidates_cached_selection():
    manager, device = _ax_manager()
    manager.add_station("sta", PeerCapabilities(ht=True, vht=True, channel_width_mhz=20))
    manager.report_data_ok("sta", ack_snr=1.0, data_snr=snr_db_to_linear(20.0))
    assert manager.get_data_tx_config("sta").mode.modulation_class == VHT
    manager.update_station_capabilities("sta", peer_like_device(device))
    assert manager.get_data_tx_config("sta").mode.modulation_class == HE


def test_fallback_on_multi_tier_device_is_default_legacy_config():
    device = device_for_standard("802.11ax-5GHz", channel_width_mhz=80, spatial_streams=2)
    manager = IdealWifiManager(device)
    manager.add_station("peer", peer_like_device(device))
    manager.report_data_ok("peer", ack_snr=1.0, data_snr=snr_db_to_linear(-30.0))
    for cfg in (manager.get_data_tx_config("peer"), manager.get_rts_tx_config("peer")):
        assert cfg.mode.unique_name == "OfdmRate6Mbps"
        assert (cfg.nss, cfg.guard_interval_ns, cfg.channel_width_mhz) == (1, 800, 20)
    assert manager.station("peer").last_snr_used is None
