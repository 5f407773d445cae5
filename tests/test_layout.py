"""
Tests for the working-directory layout
"""

from fastqflow.pipeline.layout import ProjectLayout
from fastqflow.utils.config_loader import ConfigLoader


def make_layout(root):
    return ProjectLayout(root, ConfigLoader().load())


def test_create_is_idempotent(tmp_path):
    layout = make_layout(tmp_path)

    created = layout.create()
    assert len(created) == 5
    assert (tmp_path / "rawdata/reports/fastqc").is_dir()
    assert (tmp_path / "rawdata/reports/multiqc").is_dir()
    assert (tmp_path / "processed_data/reports/fastqc").is_dir()
    assert (tmp_path / "processed_data/reports/multiqc").is_dir()
    assert (tmp_path / "processed_data/reports/fastp").is_dir()

    assert layout.create() == []


def test_paths(tmp_path):
    layout = make_layout(tmp_path)
    assert layout.read_log == tmp_path / "processed_data/reports/fastp/readLOG.txt"
    outputs = layout.fastp_outputs("S1")
    assert outputs['json'] == tmp_path / "processed_data/reports/fastp/S1_fastp.json"
    assert outputs['html'] == tmp_path / "processed_data/reports/fastp/S1_fastp.html"
    assert outputs['log'] == tmp_path / "processed_data/reports/fastp/S1_fastp.log"


def test_organize_moves_reads_only(tmp_path):
    (tmp_path / "A_plus_1_aaa.fastq.gz").write_text("a1")
    (tmp_path / "A_plus_2_aaa.fastq.gz").write_text("a2")
    (tmp_path / "sheet.csv").write_text("x")
    layout = make_layout(tmp_path)

    moved = layout.organize_fastq_files()

    assert sorted(p.name for p in moved) == ["A_plus_1_aaa.fastq.gz", "A_plus_2_aaa.fastq.gz"]
    assert (tmp_path / "rawdata/A_plus_1_aaa.fastq.gz").read_text() == "a1"
    assert (tmp_path / "sheet.csv").exists()


def test_organize_never_overwrites(tmp_path, capsys):
    layout = make_layout(tmp_path)
    layout.raw_dir.mkdir()
    (layout.raw_dir / "A_plus_1_aaa.fastq.gz").write_text("original")
    (tmp_path / "A_plus_1_aaa.fastq.gz").write_text("newer")

    assert layout.organize_fastq_files() == []
    assert (layout.raw_dir / "A_plus_1_aaa.fastq.gz").read_text() == "original"
    assert (tmp_path / "A_plus_1_aaa.fastq.gz").exists()
    assert "already exists" in capsys.readouterr().out


def test_organize_without_files(tmp_path, capsys):
    assert make_layout(tmp_path).organize_fastq_files() == []
    assert "No FASTQ files found to move." in capsys.readouterr().out
