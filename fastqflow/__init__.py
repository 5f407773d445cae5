"""fastqflow: paired-end FASTQ preprocessing with FastQC, MultiQC and fastp"""

__version__ = "1.0.0"
