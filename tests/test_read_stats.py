"""
Tests for fastp report parsing, the read log and the statistics graph
"""

import json

import pytest

from fastqflow.parser.fastp_parser import FastpReportParser
from fastqflow.parser.sample_discovery import ReadPair
from fastqflow.reporter import read_stats_reporter
from fastqflow.reporter.read_stats_reporter import (
    ReadStatLog,
    ReadStatRecord,
    collect_read_stats,
    format_table,
    plot_read_statistics,
)
from fastqflow.utils.errors import PlotError, ReportFormatError


def write_report(path, before, after, before_extra=None, after_extra=None):
    summary = {
        'before_filtering': {'total_reads': before, **(before_extra or {})},
        'after_filtering': {'total_reads': after, **(after_extra or {})},
    }
    path.write_text(json.dumps({'summary': summary}))
    return path


def pair(tmp_path, sample):
    return ReadPair(sample, tmp_path / f"{sample}_plus_1_aaa.fastq.gz",
                    tmp_path / f"{sample}_plus_2_aaa.fastq.gz")


class TestFastpReportParser:

    def test_parse(self, tmp_path):
        path = write_report(tmp_path / "S1_fastp.json", 1000000, 950000,
                            before_extra={'total_bases': 150000000})
        summary = FastpReportParser(str(path)).parse()
        assert summary.sample_name == "S1"
        assert summary.before_reads == 1000000
        assert summary.after_reads == 950000
        assert summary.before_bases == 150000000
        assert summary.after_bases is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FastpReportParser(str(tmp_path / "nope.json")).parse()

    @pytest.mark.parametrize("content", [
        "not json",
        json.dumps([1, 2]),
        json.dumps({'summary': {}}),
        json.dumps({'summary': {'before_filtering': {'total_reads': 10}}}),
        json.dumps({'summary': {'before_filtering': {'total_reads': "10"},
                                'after_filtering': {'total_reads': 5}}}),
        json.dumps({'summary': {'before_filtering': {'total_reads': -1},
                                'after_filtering': {'total_reads': 5}}}),
        json.dumps({'summary': {'before_filtering': {'total_reads': True},
                                'after_filtering': {'total_reads': 5}}}),
    ])
    def test_malformed(self, tmp_path, content):
        path = tmp_path / "S1_fastp.json"
        path.write_text(content)
        with pytest.raises(ReportFormatError):
            FastpReportParser(str(path)).parse()


class TestReadStatLog:

    def test_row_format(self, tmp_path):
        log = ReadStatLog(tmp_path / "readLOG.txt")
        log.start()
        log.append(ReadStatRecord("sample", 1000000, 950000))

        assert (tmp_path / "readLOG.txt").read_text(encoding='utf-8') == (
            "Sample\tBefore_Reads\tAfter_Reads\tDiscarded_Reads\n"
            "sample\t1000000\t950000\t50000\n"
        )

    def test_start_truncates(self, tmp_path):
        log = ReadStatLog(tmp_path / "readLOG.txt")
        log.start()
        log.append(ReadStatRecord("old", 10, 5))
        log.start()
        log.append(ReadStatRecord("new", 8, 8))
        assert [r.sample for r in log.load()] == ["new"]

    def test_load_round_trip(self, tmp_path):
        log = ReadStatLog(tmp_path / "readLOG.txt")
        log.start()
        records = [ReadStatRecord("A", 100, 90), ReadStatRecord("B", 50, 60)]
        for record in records:
            log.append(record)
        assert log.load() == records

    def test_load_header_only(self, tmp_path):
        log = ReadStatLog(tmp_path / "readLOG.txt")
        log.start()
        with pytest.raises(PlotError, match="No valid data"):
            log.load()

    def test_load_missing(self, tmp_path):
        with pytest.raises(PlotError, match="not found"):
            ReadStatLog(tmp_path / "readLOG.txt").load()

    @pytest.mark.parametrize("row", ["A\t100\t90", "A\tten\t9\t1", "A\t100\t90\t5"])
    def test_load_malformed(self, tmp_path, row):
        path = tmp_path / "readLOG.txt"
        path.write_text(f"Sample\tBefore_Reads\tAfter_Reads\tDiscarded_Reads\n{row}\n")
        with pytest.raises(PlotError):
            ReadStatLog(path).load()

    def test_summary(self, tmp_path):
        log = ReadStatLog(tmp_path / "readLOG.txt")
        log.start()
        log.append(ReadStatRecord("A", 100, 90))
        log.append(ReadStatRecord("B", 200, 100))
        log.append(ReadStatRecord("C", 0, 0))

        summary = log.summary()
        assert summary['samples'] == 3
        assert summary['total_before'] == 300
        assert summary['total_after'] == 190
        assert summary['total_discarded'] == 110
        assert summary['mean_retention_percent'] == pytest.approx(70.0)


class TestCollectReadStats:

    def test_extracts_and_skips_missing(self, tmp_path, capsys):
        write_report(tmp_path / "A_fastp.json", 1000000, 950000)
        write_report(tmp_path / "C_fastp.json", 10, 4)
        log = ReadStatLog(tmp_path / "readLOG.txt")

        records = collect_read_stats([pair(tmp_path, s) for s in "ABC"], tmp_path, log)

        assert [(r.sample, r.discarded_reads) for r in records] == [("A", 50000), ("C", 6)]
        assert "fastp report not found for sample B" in capsys.readouterr().out
        lines = (tmp_path / "readLOG.txt").read_text().splitlines()
        assert lines[1] == "A\t1000000\t950000\t50000"
        assert lines[2] == "C\t10\t4\t6"

    def test_negative_discarded_is_flagged_and_kept(self, tmp_path, capsys):
        write_report(tmp_path / "A_fastp.json", 100, 120)
        log = ReadStatLog(tmp_path / "readLOG.txt")

        records = collect_read_stats([pair(tmp_path, "A")], tmp_path, log)

        assert records[0].discarded_reads == -20
        assert records[0].anomalous
        assert "[WARNING] A: fastp reports more reads after filtering" in capsys.readouterr().out
        assert log.load()[0].discarded_reads == -20

    def test_format_table(self):
        table = format_table([ReadStatRecord("sample_long_name", 1000, 900)])
        header, row = table.splitlines()
        assert header.split() == ["Sample", "Before_Reads", "After_Reads", "Discarded_Reads"]
        assert row.split() == ["sample_long_name", "1000", "900", "100"]
        assert header.index("Before_Reads") == row.index("1000")


class TestPlot:

    def test_plot_reads_from_log(self, tmp_path, monkeypatch):
        calls = {}

        def fake_bar(xs, ys, **kwargs):
            calls['xs'] = xs
            calls['ys'] = ys
            calls.update(kwargs)

        monkeypatch.setattr(read_stats_reporter.plt, "clear_figure", lambda: calls.setdefault('cleared', True))
        monkeypatch.setattr(read_stats_reporter.plt, "simple_multiple_bar", fake_bar)
        monkeypatch.setattr(read_stats_reporter.plt, "show", lambda: calls.setdefault('shown', True))

        log = ReadStatLog(tmp_path / "readLOG.txt")
        log.start()
        log.append(ReadStatRecord("A", 100, 90))
        log.append(ReadStatRecord("B", 80, 40))

        plot_read_statistics(log.path, {'title': "Reads", 'width': 60,
                                        'labels': ["Before", "After", "Discarded"]})

        assert calls['cleared']
        assert calls['xs'] == ["A", "B"]
        assert calls['ys'] == [[100, 80], [90, 40], [10, 40]]
        assert calls['labels'] == ["Before", "After", "Discarded"]
        assert calls['title'] == "Reads"
        assert calls['width'] == 60
        assert calls['shown']

    def test_plot_empty_log(self, tmp_path):
        log = ReadStatLog(tmp_path / "readLOG.txt")
        log.start()
        with pytest.raises(PlotError):
            plot_read_statistics(log.path)

    def test_plotting_library_failure(self, tmp_path, monkeypatch):
        def broken(*args, **kwargs):
            raise AttributeError("module 'plotext' has no attribute 'simple_multiple_bar'")

        monkeypatch.setattr(read_stats_reporter.plt, "clear_figure", lambda: None)
        monkeypatch.setattr(read_stats_reporter.plt, "simple_multiple_bar", broken)

        log = ReadStatLog(tmp_path / "readLOG.txt")
        log.start()
        log.append(ReadStatRecord("A", 100, 90))

        with pytest.raises(PlotError, match="simple_multiple_bar"):
            plot_read_statistics(log.path)
