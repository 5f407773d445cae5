"""
Read-count statistics: extraction from fastp reports, the tab-separated read
log, and the terminal bar chart drawn from it.
"""

import csv
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass

import numpy as np
import plotext as plt

from fastqflow.parser.fastp_parser import FastpReportParser
from fastqflow.parser.sample_discovery import ReadPair
from fastqflow.utils.errors import PlotError

LOG_HEADER = ["Sample", "Before_Reads", "After_Reads", "Discarded_Reads"]


@dataclass(frozen=True)
class ReadStatRecord:
    sample: str
    before_reads: int
    after_reads: int

    @property
    def discarded_reads(self) -> int:
        return self.before_reads - self.after_reads

    @property
    def anomalous(self) -> bool:
        """fastp reported more reads after filtering than before"""
        return self.discarded_reads < 0

    def to_row(self) -> List[str]:
        return [self.sample, str(self.before_reads), str(self.after_reads),
                str(self.discarded_reads)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sample': self.sample,
            'before_reads': self.before_reads,
            'after_reads': self.after_reads,
            'discarded_reads': self.discarded_reads,
        }


class ReadStatLog:
    """The read log on disk. It is the only input the plot reads."""

    def __init__(self, path):
        self.path = Path(path)

    def start(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', newline='', encoding='utf-8') as f:
            csv.writer(f, delimiter='\t', lineterminator='\n').writerow(LOG_HEADER)

    def append(self, record: ReadStatRecord) -> None:
        with open(self.path, 'a', newline='', encoding='utf-8') as f:
            csv.writer(f, delimiter='\t', lineterminator='\n').writerow(record.to_row())

    def load(self) -> List[ReadStatRecord]:
        if not self.path.exists():
            raise PlotError(f"{self.path} not found. Cannot generate graph.")

        records = []
        with open(self.path, 'r', newline='', encoding='utf-8') as f:
            reader = csv.reader(f, delimiter='\t')
            header = next(reader, None)
            if header != LOG_HEADER:
                raise PlotError(f"Invalid header in {self.path}: {header}")

            for line_no, row in enumerate(reader, start=2):
                if not row:
                    continue
                if len(row) != len(LOG_HEADER):
                    raise PlotError(f"Invalid data format in {self.path} at line {line_no}")
                sample, before, after, discarded = row
                try:
                    record = ReadStatRecord(sample, int(before), int(after))
                    discarded = int(discarded)
                except ValueError as e:
                    raise PlotError(f"Invalid data format in {self.path} at line {line_no}") from e
                if record.discarded_reads != discarded:
                    raise PlotError(
                        f"Inconsistent discarded count for {sample} in {self.path} at line {line_no}"
                    )
                records.append(record)

        if not records:
            raise PlotError(f"No valid data found in {self.path}. Cannot generate graph.")
        return records

    def summary(self) -> Dict[str, Any]:
        records = self.load()
        before = np.array([r.before_reads for r in records], dtype=np.int64)
        after = np.array([r.after_reads for r in records], dtype=np.int64)

        # samples with zero input reads have no retention rate
        valid = before > 0
        mean_retention = None
        if valid.any():
            mean_retention = float(np.mean(after[valid] / before[valid] * 100.0))

        return {
            'samples': len(records),
            'total_before': int(before.sum()),
            'total_after': int(after.sum()),
            'total_discarded': int((before - after).sum()),
            'mean_retention_percent': mean_retention,
        }


def collect_read_stats(pairs: List[ReadPair], report_dir, log: ReadStatLog) -> List[ReadStatRecord]:
    """
    Write one log row per sample that has a fastp JSON report.

    Samples without a report are skipped with a warning. Reports reading more
    reads after filtering than before are flagged but still logged as-is.
    """
    report_dir = Path(report_dir)
    log.start()
    records = []

    for pair in pairs:
        json_report = report_dir / f"{pair.sample_name}_fastp.json"
        if not json_report.exists():
            print(f"⚠️  Warning: fastp report not found for sample {pair.sample_name}. "
                  f"Skipping statistics extraction.")
            continue

        summary = FastpReportParser(str(json_report), sample_name=pair.sample_name).parse()
        record = ReadStatRecord(pair.sample_name, summary.before_reads, summary.after_reads)
        if record.anomalous:
            print(f"[WARNING] {pair.sample_name}: fastp reports more reads after filtering "
                  f"({record.after_reads}) than before ({record.before_reads}); "
                  f"discarded count is negative.")

        log.append(record)
        records.append(record)

    return records


def format_table(records: List[ReadStatRecord]) -> str:
    rows = [LOG_HEADER] + [record.to_row() for record in records]
    widths = [max(len(row[i]) for row in rows) for i in range(len(LOG_HEADER))]
    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    )


def plot_read_statistics(log_path, plot_settings: Optional[Dict[str, Any]] = None) -> List[ReadStatRecord]:
    """Draw Before/After/Discarded bars per sample from the log file."""
    plot_settings = plot_settings or {}
    records = ReadStatLog(log_path).load()

    try:
        plt.clear_figure()
        plt.simple_multiple_bar(
            [r.sample for r in records],
            [
                [r.before_reads for r in records],
                [r.after_reads for r in records],
                [r.discarded_reads for r in records],
            ],
            width=plot_settings.get('width', 100),
            labels=plot_settings.get('labels', ["Before Filtering", "After Filtering", "Discarded Reads"]),
            title=plot_settings.get('title', "Fastp Read Statistics"),
        )
        plt.show()
    except Exception as e:
        raise PlotError(f"plotext could not draw the read statistics graph: {e}") from e
    return records
