"""
Per-sample execution of the external tools.

A sample whose read pair is incomplete is skipped with a warning in every stage.
Any tool failure (FastQC, fastp or MultiQC) stops the run at that sample.
"""

import subprocess
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional
from dataclasses import dataclass, asdict

from fastqflow.options.fastp_options import FastpOptions
from fastqflow.parser.sample_discovery import ReadPair
from fastqflow.pipeline.layout import ProjectLayout
from fastqflow.utils.errors import ToolExecutionError, ToolNotFoundError


class StageStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"


@dataclass
class StageResult:
    """Outcome of one tool invocation (or skip) for one sample"""
    stage: str
    sample: Optional[str]
    status: StageStatus
    command: Optional[List[str]] = None
    log_path: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['status'] = self.status.value
        return data


def build_fastp_command(pair: ReadPair, output_pair: ReadPair,
                        outputs: Dict[str, Path], options: FastpOptions) -> List[str]:
    command = [
        "fastp",
        "-i", str(pair.forward),
        "-I", str(pair.reverse),
        "-o", str(output_pair.forward),
        "-O", str(output_pair.reverse),
        "--json", str(outputs['json']),
        "--html", str(outputs['html']),
    ]
    command.extend(options.command_tokens())
    return command


class StageExecutor:

    def __init__(self, layout: ProjectLayout, verbose: bool = False):
        self.layout = layout
        self.verbose = verbose

    def _log(self, message: str):
        if self.verbose:
            print(f"[STAGE] {message}")

    def run_command(self, command: List[str], log_path: Path) -> int:
        """Run to completion with stdout and stderr written to log_path."""
        log_path = Path(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._log(f"Executing: {' '.join(command)}")

        with open(log_path, 'w') as log:
            try:
                result = subprocess.run(
                    command,
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    stdin=subprocess.DEVNULL,
                )
            except FileNotFoundError as e:
                raise ToolNotFoundError(command[0]) from e

        return result.returncode

    def run_fastqc_stage(self, pairs: List[ReadPair], report_dir: Path,
                         label: str = "raw") -> List[StageResult]:
        stage = f"fastqc_{label}"
        processed = label == "processed"
        results = []

        for pair in pairs:
            if not pair.exists():
                kind = "Processed pair" if processed else "Pair"
                print(f"⚠️  Warning: {kind} not found for sample {pair.sample_name}. Skipping FastQC.")
                results.append(StageResult(stage, pair.sample_name, StageStatus.SKIPPED,
                                           error="PairMissing"))
                continue

            target = "processed sample" if processed else "sample"
            print(f"🔧 Running FastQC for {target}: {pair.sample_name}")
            command = ["fastqc", "-o", str(report_dir), str(pair.forward), str(pair.reverse)]
            log_path = Path(report_dir) / f"{pair.sample_name}_fastqc.log"
            returncode = self.run_command(command, log_path)

            if returncode != 0:
                print(f"❌  Error: FastQC failed for {target}: {pair.sample_name}. "
                      f"Check the log file at {log_path}")
                raise ToolExecutionError("fastqc", str(log_path), returncode,
                                         sample=pair.sample_name)

            print(f"✔️  FastQC completed for {target}: {pair.sample_name}")
            results.append(StageResult(stage, pair.sample_name, StageStatus.SUCCESS,
                                       command=command, log_path=str(log_path)))

        return results

    def run_fastp_stage(self, pairs: List[ReadPair], options: FastpOptions) -> List[StageResult]:
        results = []

        for pair in pairs:
            if not pair.exists():
                print(f"⚠️  Warning: Pair not found for sample {pair.sample_name}. Skipping fastp.")
                results.append(StageResult("fastp", pair.sample_name, StageStatus.SKIPPED,
                                           error="PairMissing"))
                continue

            print(f"✂️  Running fastp for sample: {pair.sample_name}")
            outputs = self.layout.fastp_outputs(pair.sample_name)
            output_pair = pair.relocated(self.layout.processed_dir)
            command = build_fastp_command(pair, output_pair, outputs, options)
            print(f"📋 Running command: {' '.join(command)}")

            returncode = self.run_command(command, outputs['log'])
            if returncode != 0:
                print(f"❌  Error: fastp failed for sample: {pair.sample_name}. "
                      f"Check the log file at {outputs['log']}")
                raise ToolExecutionError("fastp", str(outputs['log']), returncode,
                                         sample=pair.sample_name)

            print(f"✔️  Fastp completed for sample: {pair.sample_name}")
            results.append(StageResult("fastp", pair.sample_name, StageStatus.SUCCESS,
                                       command=command, log_path=str(outputs['log'])))

        return results

    def run_multiqc(self, report_dir: Path, output_dir: Path, label: str = "raw") -> StageResult:
        command = ["multiqc", str(report_dir), "-o", str(output_dir)]
        log_path = Path(output_dir) / "multiqc.log"

        print("📊 Running MultiQC on FastQC reports...")
        returncode = self.run_command(command, log_path)
        if returncode != 0:
            print(f"❌  Error: MultiQC failed. Check the log file at {log_path}")
            raise ToolExecutionError("multiqc", str(log_path), returncode)

        print(f"✔️  MultiQC report generated in {output_dir}")
        return StageResult(f"multiqc_{label}", None, StageStatus.SUCCESS,
                           command=command, log_path=str(log_path))
