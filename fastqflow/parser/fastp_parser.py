import os
import json
from typing import Any, Dict, Optional
from dataclasses import dataclass, asdict

from fastqflow.utils.errors import ReportFormatError


@dataclass
class FastpSummary:
    sample_name: str
    before_reads: int
    after_reads: int
    before_bases: Optional[int] = None
    after_bases: Optional[int] = None

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=4)


class FastpReportParser:
    """Reads the before/after filtering counts out of a fastp JSON report."""

    def __init__(self, filepath: str, sample_name: Optional[str] = None):
        self.filepath = filepath
        self.sample_name = sample_name or os.path.basename(filepath).split('_fastp')[0]

    def parse(self) -> FastpSummary:
        if not os.path.exists(self.filepath):
            raise FileNotFoundError(f"File not found: {self.filepath}")

        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ReportFormatError(f"{self.filepath} is not valid JSON: {e}") from e

        summary = data.get('summary') if isinstance(data, dict) else None
        if not isinstance(summary, dict):
            raise ReportFormatError(f"{self.filepath} has no 'summary' section")

        return FastpSummary(
            sample_name=self.sample_name,
            before_reads=self._count(summary, 'before_filtering', 'total_reads'),
            after_reads=self._count(summary, 'after_filtering', 'total_reads'),
            before_bases=self._count(summary, 'before_filtering', 'total_bases', required=False),
            after_bases=self._count(summary, 'after_filtering', 'total_bases', required=False),
        )

    def _count(self, summary: Dict[str, Any], section: str, field: str,
               required: bool = True) -> Optional[int]:
        section_data = summary.get(section)
        value = section_data.get(field) if isinstance(section_data, dict) else None
        if value is None:
            if required:
                raise ReportFormatError(
                    f"{self.filepath} is missing summary.{section}.{field}"
                )
            return None
        # bool is an int subclass; JSON true/false is not a count
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ReportFormatError(
                f"summary.{section}.{field} in {self.filepath} is not a non-negative integer: {value!r}"
            )
        return value
