import pytest

from ideal_wifi.device import PeerCapabilities
from ideal_wifi.modes import legacy_tx_config, ofdm_modes
from ideal_wifi.stations import StationStore


def _store():
    return StationStore(default_config=legacy_tx_config(ofdm_modes()[0]))


def test_register_assigns_stable_handles():
    store = _store()
    h1 = store.register("aa:01")
    h2 = store.register("aa:02", PeerCapabilities(ht=True))
    assert h1 != h2
    assert store.handle_for("aa:02") == h2
    rec = store.get(h2)
    assert rec.address == "aa:02"
    assert rec.capabilities.ht
    assert rec.last_snr_observed == 0.0
    assert rec.last_snr_used is None
    assert rec.cached_data_rate == 0
    assert rec.cached_config.mode.unique_name == "OfdmRate6Mbps"
    assert len(store) == 2


def test_duplicate_registration_rejected():
    store = _store()
    store.register("aa:01")
    with pytest.raises(ValueError):
        store.register("aa:01")


def test_deregister_frees_record_and_never_reuses_handle():
    store = _store()
    h1 = store.register("aa:01")
    store.deregister(h1)
    with pytest.raises(KeyError):
        store.get(h1)
    with pytest.raises(KeyError):
        store.handle_for("aa:01")
    h2 = store.register("aa:01")
    assert h2 != h1
    assert [r.handle for r in store] == [h2]
    assert "aa:01" in store


def test_cache_validity_and_capability_update():
    store = _store()
    h = store.register("aa:01")
    rec = store.get(h)
    assert not rec.cache_valid()
    rec.last_snr_observed = 12.0
    rec.last_snr_used = 12.0
    assert rec.cache_valid()
    rec.last_snr_observed = 12.5
    assert not rec.cache_valid()
    rec.last_snr_used = 12.5
    store.update_capabilities(h, PeerCapabilities(vht=True))
    assert rec.last_snr_used is None
    assert rec.capabilities.vht


def test_churn_keeps_only_live_records():
    store = _store()
    handles = []
    for i in range(50):
        h = store.register(f"aa:{i:02x}")
        handles.append(h)
        store.deregister(h)
    last = store.register("bb:01")
    assert handles == sorted(set(handles))
    assert last > handles[-1]
    assert len(store) == 1
    assert len(store._records) == 1
    for h in handles:
        with pytest.raises(KeyError):
            store.get(h)
