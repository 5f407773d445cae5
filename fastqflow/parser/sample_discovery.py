"""
Paired-end sample discovery from the forward/reverse file naming convention.
"""
import os
from pathlib import Path
from typing import Dict, List
from dataclasses import dataclass

from fastqflow.utils.errors import NoSamplesFoundError


@dataclass(frozen=True)
class ReadPair:
    """Forward and reverse read files of one sample"""
    sample_name: str
    forward: Path
    reverse: Path

    def exists(self) -> bool:
        return self.forward.is_file() and self.reverse.is_file()

    def relocated(self, directory: Path) -> 'ReadPair':
        """Same filenames under another directory"""
        directory = Path(directory)
        return ReadPair(
            sample_name=self.sample_name,
            forward=directory / self.forward.name,
            reverse=directory / self.reverse.name,
        )


def discover_pairs(directory, naming: Dict[str, str]) -> List[ReadPair]:
    """
    Find forward-read files in `directory` and pair each with its reverse mate.

    Args:
        directory: Directory holding the raw reads
        naming: The 'naming' configuration section (forward_tag, reverse_tag, extension)

    Returns:
        ReadPair list sorted by sample name. Reverse files are not required to exist.

    Raises:
        NoSamplesFoundError: No file matches <sample><forward_tag><extension>
    """
    directory = Path(directory)
    forward_suffix = naming['forward_tag'] + naming['extension']
    reverse_suffix = naming['reverse_tag'] + naming['extension']

    pairs = []
    if directory.is_dir():
        for filename in sorted(os.listdir(directory)):
            if not filename.endswith(forward_suffix) or filename == forward_suffix:
                continue
            if not (directory / filename).is_file():
                continue
            sample = filename[:-len(forward_suffix)]
            pairs.append(ReadPair(
                sample_name=sample,
                forward=directory / filename,
                reverse=directory / f"{sample}{reverse_suffix}",
            ))

    if not pairs:
        raise NoSamplesFoundError(str(directory), f"*{forward_suffix}")

    return pairs
