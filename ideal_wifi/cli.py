"""CLI to inspect the ideal rate manager.

Usage:
    python -m ideal_wifi.cli thresholds --standard 802.11ac --width 80 --nss 2
    python -m ideal_wifi.cli sweep --standard 802.11ax-5GHz --snr-start 0 --snr-stop 40 --out sweep.csv
"""

import argparse
import logging
from pathlib import Path

from .config import IdealManagerConfig, load_config_file, parse_config_dict
from .device import peer_like_device, standard_names
from .manager import IdealWifiManager
from .scenario import print_table, rows_to_table, save_table_csv, snr_grid_db, sweep_snr, threshold_rows


def _build_config(args: argparse.Namespace) -> IdealManagerConfig:
    base = load_config_file(args.config) if args.config else IdealManagerConfig()
    overrides = {}
    if args.standard is not None:
        overrides["standard"] = args.standard
    if args.width is not None:
        overrides["channel_width_mhz"] = args.width
    if args.nss is not None:
        overrides["spatial_streams"] = args.nss
    if args.ber is not None:
        overrides["ber_threshold"] = args.ber
    if args.short_gi:
        overrides["short_guard_interval"] = True
    return parse_config_dict(overrides, defaults=base)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Ideal Wi-Fi rate manager: SNR thresholds and rate selection")
    parser.add_argument("command", choices=["thresholds", "sweep"])
    parser.add_argument("--config", type=Path, default=None, help="JSON configuration file")
    parser.add_argument("--standard", type=str, default=None, choices=list(standard_names()))
    parser.add_argument("--width", type=int, default=None, help="channel width (MHz)")
    parser.add_argument("--nss", type=int, default=None, help="spatial streams")
    parser.add_argument("--ber", type=float, default=None, help="target error probability")
    parser.add_argument("--short-gi", action="store_true", help="enable HT/VHT short guard interval")
    parser.add_argument("--snr-start", type=float, default=0.0, help="sweep start (dB)")
    parser.add_argument("--snr-stop", type=float, default=40.0, help="sweep stop (dB)")
    parser.add_argument("--snr-step", type=float, default=1.0, help="sweep step (dB)")
    parser.add_argument("--out", type=Path, default=None, help="save the table as CSV")
    parser.add_argument("--log-level", type=str, default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    cfg = _build_config(args)
    manager = IdealWifiManager.from_config(cfg)
    device = manager.device

    if args.command == "thresholds":
        table = threshold_rows(manager.thresholds)
    else:
        address = "00:00:00:00:00:01"
        manager.add_station(address, peer_like_device(device))
        rows = sweep_snr(manager, address, snr_grid_db(args.snr_start, args.snr_stop, args.snr_step))
        table = rows_to_table(rows)

    if args.out is not None:
        save_table_csv(table, args.out)
        print(f"Saved {len(table) - 1} rows to {args.out}")
    else:
        print_table(table)


if __name__ == "__main__":
    main()
