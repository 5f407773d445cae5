"""
Exception types raised by fastqflow.

Per-sample data problems (a missing read mate, a missing fastp report) are not
exceptions: they are recorded as skipped stage results. Everything here stops
the run, or in the case of PlotError, the plotting step.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for fatal pipeline conditions"""


class ConfigError(PipelineError):
    """Invalid or unreadable configuration"""


class ToolNotFoundError(PipelineError):
    """A required executable is not on PATH"""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"Tool '{tool}' is not installed or not in PATH.")


class NoSamplesFoundError(PipelineError):
    """Discovery found no forward-read files"""

    def __init__(self, directory: str, pattern: str):
        self.directory = directory
        self.pattern = pattern
        super().__init__(
            f"No paired-end FASTQ files found in {directory} with pattern {pattern}"
        )


class ToolExecutionError(PipelineError):
    """An external tool exited non-zero in a stage where that is fatal"""

    def __init__(self, tool: str, log_path: str, returncode: int,
                 sample: Optional[str] = None):
        self.tool = tool
        self.sample = sample
        self.log_path = log_path
        self.returncode = returncode
        target = f" for sample: {sample}" if sample else ""
        super().__init__(
            f"{tool} failed{target} (exit code {returncode}). "
            f"Check the log file at {log_path}"
        )


class ReportFormatError(PipelineError):
    """A fastp JSON report lacks the expected read counts"""


class PlotError(PipelineError):
    """The statistics log cannot be plotted"""
