import subprocess
import shutil
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass

from fastqflow.utils.errors import ToolNotFoundError


@dataclass
class ToolInfo:
    """Information about an external executable"""
    name: str
    command: str
    version_flag: str
    is_installed: bool = False
    version: Optional[str] = None
    install_conda: Optional[str] = None
    install_pip: Optional[str] = None
    description: str = ""


class ToolChecker:

    def __init__(self):
        self._checked = {}
        self.tools = {
            'fastqc': ToolInfo(
                name="FastQC",
                command="fastqc",
                version_flag="--version",
                install_conda="conda install -c bioconda fastqc",
                description="Quality control reports for raw and trimmed reads"
            ),
            'multiqc': ToolInfo(
                name="MultiQC",
                command="multiqc",
                version_flag="--version",
                install_conda="conda install -c bioconda multiqc",
                install_pip="pip install multiqc",
                description="Aggregates FastQC reports into a single summary"
            ),
            'fastp': ToolInfo(
                name="fastp",
                command="fastp",
                version_flag="--version",
                install_conda="conda install -c bioconda fastp",
                description="Trimming, filtering and deduplication of paired reads"
            ),
        }

    def check_tool(self, tool_key: str) -> bool:
        if tool_key in self._checked:
            return self._checked[tool_key]

        tool = self.tools.get(tool_key)
        if tool is None:
            # Not in the registry: a bare PATH lookup is all we can do
            tool = ToolInfo(name=tool_key, command=tool_key, version_flag="--version")
            self.tools[tool_key] = tool

        if shutil.which(tool.command) is None:
            tool.is_installed = False
            self._checked[tool_key] = False
            return False
        try:
            # fastp prints its version to stderr
            result = subprocess.run(
                [tool.command, tool.version_flag],
                capture_output=True,
                text=True,
                timeout=30,
                errors='replace'
            )
            version_output = (result.stdout or "") + (result.stderr or "")
            if version_output.strip():
                tool.version = version_output.strip().split('\n')[0][:100]
            else:
                tool.version = "installed (version unknown)"
        except (subprocess.TimeoutExpired, subprocess.SubprocessError, OSError):
            # Command exists but version check failed - assume installed
            tool.version = "installed (version check failed)"

        tool.is_installed = True
        self._checked[tool_key] = True
        return True

    def filter_tool_categories(self, required_tools: List[str]) -> Tuple[List[str], List[str]]:
        available = []
        missing = []

        for tool_key in required_tools:
            if self.check_tool(tool_key):
                available.append(tool_key)
            else:
                missing.append(tool_key)

        return available, missing

    def require(self, required_tools: List[str]) -> None:
        """Print one status line per tool; raise on the first missing one."""
        print("")
        for tool_key in required_tools:
            if self.check_tool(tool_key):
                print(f"✔️  Tool '{tool_key}' is installed and accessible.")
            else:
                print(f"❌  Error: Tool '{tool_key}' is not installed or not in PATH.")
                raise ToolNotFoundError(tool_key)
        print("")
        print("All required tools are present.")
        print("")

    def print_tool_status(self, required_tools: List[str], verbose: bool = False) -> None:
        installed, missing = self.filter_tool_categories(required_tools)

        print("\n" + "="*70)
        print("Tool Availability Check")
        print("="*70)

        if installed:
            print("\n✓ Installed Tools:")
            for key in installed:
                tool = self.tools[key]
                if verbose:
                    print(f"  • {tool.name:15} {tool.version}")
                else:
                    print(f"  ✓ {tool.name}")

        if missing:
            print("\n✗ Missing Tools:")
            for key in missing:
                tool = self.tools[key]
                print(f"  ✗ {tool.name:15} - {tool.description}")

            print("\n" + "-"*70)
            print("Installation Suggestions:")
            print("-"*70)
            for key in missing:
                tool = self.tools[key]
                print(f"\n{tool.name}:")
                if tool.install_conda:
                    print(f"  Conda:  {tool.install_conda}")
                if tool.install_pip:
                    print(f"  Pip:    {tool.install_pip}")

        print("\n" + "="*70)
        print(f"Summary: {len(installed)} installed, {len(missing)} missing")
        print("="*70 + "\n")
