from ideal_wifi.feedback import FeedbackSink
from ideal_wifi.modes import legacy_tx_config, ofdm_modes
from ideal_wifi.stations import StationStore


def _setup():
    store = StationStore(default_config=legacy_tx_config(ofdm_modes()[0]))
    h = store.register("aa:01")
    return store, FeedbackSink(store), h


def test_data_ok_updates_observed_snr():
    store, sink, h = _setup()
    sink.on_data_ok(h, ack_snr=3.0, data_snr=25.0)
    assert store.get(h).last_snr_observed == 25.0


def test_invalid_data_snr_is_discarded():
    store, sink, h = _setup()
    sink.on_data_ok(h, ack_snr=3.0, data_snr=25.0)
    sink.on_data_ok(h, ack_snr=3.0, data_snr=0.0)
    sink.on_data_ok(h, ack_snr=3.0, data_snr=-1.0)
    sink.on_aggregate_status(h, n_success=4, n_failed=0, data_snr=0.0)
    assert store.get(h).last_snr_observed == 25.0


def test_aggregate_status_updates_observed_snr():
    store, sink, h = _setup()
    sink.on_aggregate_status(h, n_success=10, n_failed=2, data_snr=40.0)
    assert store.get(h).last_snr_observed == 40.0


def test_rts_ok_is_unconditional():
    store, sink, h = _setup()
    sink.on_data_ok(h, ack_snr=3.0, data_snr=25.0)
    sink.on_rts_ok(h, cts_snr=1.0, rts_snr=8.0)
    assert store.get(h).last_snr_observed == 8.0
    sink.on_rts_ok(h, cts_snr=1.0, rts_snr=0.0)
    assert store.get(h).last_snr_observed == 0.0


def test_failures_do_not_change_state():
    store, sink, h = _setup()
    sink.on_data_ok(h, ack_snr=3.0, data_snr=25.0)
    rec = store.get(h)
    rec.last_snr_used = 25.0
    sink.on_rts_failed(h)
    sink.on_data_failed(h)
    sink.on_final_rts_failed(h)
    sink.on_final_data_failed(h)
    sink.on_rx_ok(h, rx_snr=2.0)
    assert rec.last_snr_observed == 25.0
    assert rec.cache_valid()
