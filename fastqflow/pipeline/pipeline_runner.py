"""
Pipeline Runner for fastqflow

Runs the complete paired-end workflow:
check tools → organize → discover → FastQC/MultiQC (raw) → configure fastp →
fastp → FastQC/MultiQC (processed) → read statistics → graph
"""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field, asdict

from fastqflow.options.fastp_options import FastpOptions, OptionSetBuilder
from fastqflow.parser.sample_discovery import ReadPair, discover_pairs
from fastqflow.pipeline.layout import ProjectLayout
from fastqflow.pipeline.stage_executor import StageExecutor, StageResult
from fastqflow.prompt.prompter import Prompter
from fastqflow.reporter.read_stats_reporter import (
    ReadStatLog,
    ReadStatRecord,
    collect_read_stats,
    format_table,
    plot_read_statistics,
)
from fastqflow.utils.errors import PlotError
from fastqflow.utils.tool_checker import ToolChecker

TITLE_PIPELINE = "FASTQ Processing Pipeline"
TITLE_CHECK_TOOLS = "Checking Required Tools"
TITLE_CREATE_DIR = "Creating Directory Structure"
TITLE_MOVE_FILES = "Organizing FASTQ Files"
TITLE_IDENTIFY_PAIRS = "Identifying Paired-End Files"
TITLE_RUN_FASTQC_RAW = "Running FastQC on Raw Data"
TITLE_RUN_MULTIQC_RAW = "Running MultiQC on Raw Data"
TITLE_CONFIG_FASTP = "Configuring Fastp Parameters"
TITLE_RUN_FASTP = "Running Fastp on Raw Data"
TITLE_RUN_FASTQC_PROCESSED = "Running FastQC on Processed Data"
TITLE_RUN_MULTIQC_PROCESSED = "Running MultiQC on Processed Data"
TITLE_EXTRACT_STATS = "Extracting Fastp Read Statistics and Generating Graph"
TITLE_COMPLETED = "Pipeline Completed"


@dataclass
class PipelineResult:
    """Complete pipeline execution result"""
    root: str
    samples: List[str] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)
    steps: List[Dict[str, Any]] = field(default_factory=list)
    read_stats: List[Dict[str, Any]] = field(default_factory=list)
    read_summary: Optional[Dict[str, Any]] = None
    plot_status: str = "pending"  # "success", "failed", "skipped"
    plot_error: Optional[str] = None

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)


def display_step(title: str):
    print("")
    print(f"===== {title} =====")
    print("")


class PipelineRunner:
    """
    Runs the fastqflow pipeline in one working directory.

    Raises the PipelineError subclasses for fatal conditions (missing tool,
    no samples, a failing tool). A plotting failure is recorded on
    the result instead, since every file the pipeline produces already exists
    by then.
    """

    def __init__(
        self,
        root,
        settings: Dict[str, Any],
        prompter: Optional[Prompter] = None,
        options: Optional[FastpOptions] = None,
        plot: bool = True,
        tool_checker: Optional[ToolChecker] = None,
        verbose: bool = False
    ):
        """
        Initialize pipeline runner.

        Args:
            root: Working directory holding the FASTQ files
            settings: Effective settings from ConfigLoader
            prompter: Answers the fastp questions (stdin by default)
            options: Pre-built fastp options; skips the interactive configuration
            plot: Draw the read statistics graph at the end
            tool_checker: Checker used for the required-tool check
            verbose: Print every executed command
        """
        self.root = Path(root)
        self.settings = settings
        self.prompter = prompter or Prompter()
        self.options = options
        self.plot = plot
        self.tool_checker = tool_checker or ToolChecker()
        self.verbose = verbose

        self.layout = ProjectLayout(self.root, settings)
        self.executor = StageExecutor(self.layout, verbose=verbose)
        self.result = PipelineResult(root=str(self.root))

    def _log(self, message: str):
        if self.verbose:
            print(f"[PIPELINE] {message}")

    def _record(self, results):
        if isinstance(results, StageResult):
            results = [results]
        self.result.steps.extend(r.to_dict() for r in results)

    def run(self) -> PipelineResult:
        display_step(TITLE_PIPELINE)
        self._log(f"Working directory: {self.root}")

        # pipeline_result.json is written whether or not a stage fails
        try:
            self._run_stages()
        finally:
            self._save_result()

        display_step(TITLE_COMPLETED)
        print("✅ FASTQ processing pipeline has been successfully executed.")
        print(f"📄 Check '{self.layout.read_log}' for read statistics and the 'reports' "
              f"directories for detailed reports.")
        return self.result

    def _run_stages(self):
        display_step(TITLE_CHECK_TOOLS)
        self.tool_checker.require(self.settings['tools']['required'])

        self._prepare_directories()

        display_step(TITLE_IDENTIFY_PAIRS)
        pairs = discover_pairs(self.layout.raw_dir, self.settings['naming'])
        self.result.samples = [pair.sample_name for pair in pairs]
        print(f"🔍 Found {len(pairs)} paired-end samples.")
        print("")

        display_step(TITLE_RUN_FASTQC_RAW)
        self._record(self.executor.run_fastqc_stage(pairs, self.layout.raw_fastqc_dir, "raw"))

        display_step(TITLE_RUN_MULTIQC_RAW)
        self._record(self.executor.run_multiqc(
            self.layout.raw_fastqc_dir, self.layout.raw_multiqc_dir, "raw"))

        display_step(TITLE_CONFIG_FASTP)
        options = self._configure_fastp()

        display_step(TITLE_RUN_FASTP)
        self._record(self.executor.run_fastp_stage(pairs, options))

        display_step(TITLE_RUN_FASTQC_PROCESSED)
        processed_pairs = [pair.relocated(self.layout.processed_dir) for pair in pairs]
        self._record(self.executor.run_fastqc_stage(
            processed_pairs, self.layout.processed_fastqc_dir, "processed"))

        display_step(TITLE_RUN_MULTIQC_PROCESSED)
        self._record(self.executor.run_multiqc(
            self.layout.processed_fastqc_dir, self.layout.processed_multiqc_dir, "processed"))

        display_step(TITLE_EXTRACT_STATS)
        self._extract_read_stats(pairs)
        self._plot()

    def _prepare_directories(self):
        display_step(TITLE_CREATE_DIR)
        created = self.layout.create()
        if created:
            print("📁 Directory structure created:")
            for directory in created:
                print(f"- {directory.relative_to(self.root)}/")
        else:
            print("✅ Directory structure already exists.")
        print("")

        display_step(TITLE_MOVE_FILES)
        self.layout.organize_fastq_files()
        print("")

    def _configure_fastp(self) -> FastpOptions:
        if self.options is None:
            builder = OptionSetBuilder(self.prompter, self.settings['fastp'])
            self.options = builder.build()
        else:
            print("[INFO] Using pre-configured fastp options.")

        print("🔧 Configured Fastp Options:")
        for line in self.options.describe():
            print(line)
        print("")

        with open(self.layout.options_file, 'w') as f:
            f.write(self.options.to_json())
        self.result.options = self.options.to_dict()

        print("✅ Fastp configuration complete.")
        print("")
        return self.options

    def _extract_read_stats(self, pairs: List[ReadPair]) -> List[ReadStatRecord]:
        print("📈 Extracting Fastp read statistics...")
        log = ReadStatLog(self.layout.read_log)
        records = collect_read_stats(pairs, self.layout.fastp_dir, log)
        self.result.read_stats = [r.to_dict() for r in records]
        if records:
            self.result.read_summary = log.summary()

        print("📊 Read Statistics (Processed Data):")
        print(format_table(records))
        print("")
        return records

    def _plot(self):
        if not self.plot:
            self.result.plot_status = "skipped"
            return

        try:
            plot_read_statistics(self.layout.read_log, self.settings.get('plot'))
        except PlotError as e:
            print(f"❌  {e}")
            self.result.plot_status = "failed"
            self.result.plot_error = str(e)
            return

        self.result.plot_status = "success"
        print("")
        print("✅ Read Statistics Graph generated successfully.")
        print("")

    def _save_result(self):
        if not self.root.is_dir():
            return
        with open(self.layout.result_file, 'w') as f:
            f.write(self.result.to_json())
