"""SNR sweep runner for the ideal rate manager.

This module provides a very simple way to see which configuration the manager
picks as channel quality changes. For each SNR value of a sweep it:
1) feeds a successful data report carrying that SNR to the peer,
2) asks the manager for the next data and RTS configurations,
3) records the selection as one row.

Rows can be printed as a table or saved as CSV, and the threshold table itself can
be dumped the same way.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence
import csv

import numpy as np

from .error_model import snr_db_to_linear, snr_linear_to_db
from .manager import IdealWifiManager
from .thresholds import ThresholdTable


@dataclass
class SweepRow:
	"""Selection made at one SNR point."""
	snr_db: float
	mode: str
	nss: int
	channel_width_mhz: int
	guard_interval_ns: int
	data_rate_bps: int
	rts_mode: str


def snr_grid_db(start_db: float, stop_db: float, step_db: float) -> List[float]:
	"""Inclusive SNR grid in dB."""
	if step_db <= 0:
		raise ValueError("step_db must be positive")
	grid = np.arange(start_db, stop_db + step_db / 2.0, step_db)
	return [float(x) for x in np.round(grid, 6)]


def sweep_snr(manager: IdealWifiManager, address: str, snr_db_values: Iterable[float]) -> List[SweepRow]:
	"""Report each SNR for ``address`` and record the resulting selections."""
	rows: List[SweepRow] = []
	for snr_db in snr_db_values:
		manager.report_data_ok(address, ack_snr=0.0, data_snr=snr_db_to_linear(snr_db))
		cfg = manager.get_data_tx_config(address)
		rts = manager.get_rts_tx_config(address)
		rows.append(SweepRow(
			snr_db=snr_db,
			mode=cfg.mode.unique_name,
			nss=cfg.nss,
			channel_width_mhz=cfg.channel_width_mhz,
			guard_interval_ns=cfg.guard_interval_ns,
			data_rate_bps=cfg.data_rate,
			rts_mode=rts.mode.unique_name,
		))
	return rows


def rows_to_table(rows: Iterable[SweepRow]) -> List[List[str]]:
	"""Convert sweep rows to a simple table (strings) for printing or CSV export."""
	table = [["snr_db", "mode", "nss", "width_mhz", "gi_ns", "rate_mbps", "rts_mode"]]
	for r in rows:
		table.append([
			f"{r.snr_db:.2f}",
			r.mode,
			str(r.nss),
			str(r.channel_width_mhz),
			str(r.guard_interval_ns),
			f"{r.data_rate_bps / 1e6:.2f}",
			r.rts_mode,
		])
	return table


def threshold_rows(thresholds: ThresholdTable) -> List[List[str]]:
	"""Threshold table as printable rows, in enumeration order."""
	table = [["mode", "nss", "width_mhz", "gi_ns", "rate_mbps", "snr_threshold_db"]]
	for cfg, thr in thresholds.items():
		table.append([
			cfg.mode.unique_name,
			str(cfg.nss),
			str(cfg.channel_width_mhz),
			str(cfg.guard_interval_ns),
			f"{cfg.data_rate / 1e6:.2f}",
			f"{snr_linear_to_db(thr):.2f}",
		])
	return table


def print_table(table: Sequence[Sequence[str]]) -> None:
	"""Pretty-print a simple table to the console."""
	widths = [max(len(row[i]) for row in table) for i in range(len(table[0]))]
	for row in table:
		print("  ".join(cell.ljust(widths[j]) for j, cell in enumerate(row)))


def save_table_csv(table: Sequence[Sequence[str]], path: str | Path) -> None:
	p = Path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	with p.open("w", newline="", encoding="utf-8") as f:
		writer = csv.writer(f)
		writer.writerows(table)
