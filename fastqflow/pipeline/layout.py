"""
Working-directory layout: raw reads and their reports under rawdata/, trimmed
reads and every fastp artifact under processed_data/.
"""

import shutil
from pathlib import Path
from typing import Any, Dict, List


class ProjectLayout:

    def __init__(self, root, settings: Dict[str, Any]):
        """
        Args:
            root: Directory the pipeline runs in
            settings: Full settings; the 'layout' and 'naming' sections are used
        """
        layout = settings['layout']
        self.root = Path(root)
        self.extension = settings['naming']['extension']

        self.raw_dir = self.root / layout['raw_dir']
        self.raw_fastqc_dir = self.raw_dir / layout['fastqc_reports']
        self.raw_multiqc_dir = self.raw_dir / layout['multiqc_reports']

        self.processed_dir = self.root / layout['processed_dir']
        self.processed_fastqc_dir = self.processed_dir / layout['fastqc_reports']
        self.processed_multiqc_dir = self.processed_dir / layout['multiqc_reports']
        self.fastp_dir = self.processed_dir / layout['fastp_reports']

        self.read_log = self.fastp_dir / layout['read_log']
        self.options_file = self.fastp_dir / "fastp_options.json"
        self.result_file = self.root / "pipeline_result.json"

    @property
    def directories(self) -> List[Path]:
        return [
            self.raw_fastqc_dir,
            self.raw_multiqc_dir,
            self.processed_fastqc_dir,
            self.processed_multiqc_dir,
            self.fastp_dir,
        ]

    def create(self) -> List[Path]:
        """Create every report directory; returns the ones that did not exist."""
        created = []
        for directory in self.directories:
            if not directory.is_dir():
                directory.mkdir(parents=True, exist_ok=True)
                created.append(directory)
        return created

    def organize_fastq_files(self) -> List[Path]:
        """
        Move read files sitting in the root into the raw directory.

        A file whose name already exists in the raw directory stays where it
        is, so re-running never overwrites raw data.
        """
        moved = []
        self.raw_dir.mkdir(parents=True, exist_ok=True)

        candidates = sorted(p for p in self.root.glob(f"*{self.extension}") if p.is_file())
        if not candidates:
            print("⚠️  No FASTQ files found to move.")
            return moved

        print(f"📦 Moving FASTQ files to {self.raw_dir.name}/...")
        for path in candidates:
            target = self.raw_dir / path.name
            if target.exists():
                print(f"⚠️  Warning: {target} already exists. Leaving {path.name} in place.")
                continue
            shutil.move(str(path), str(target))
            moved.append(target)

        print(f"✅ {len(moved)} FASTQ file(s) moved to {self.raw_dir.name}/")
        return moved

    def fastp_outputs(self, sample_name: str) -> Dict[str, Path]:
        return {
            'json': self.fastp_dir / f"{sample_name}_fastp.json",
            'html': self.fastp_dir / f"{sample_name}_fastp.html",
            'log': self.fastp_dir / f"{sample_name}_fastp.log",
        }
