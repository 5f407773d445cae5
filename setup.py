"""
fastqflow: Paired-end FASTQ preprocessing with FastQC, MultiQC and fastp
"""
from setuptools import setup, find_packages
from pathlib import Path

# Read the long description from README
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="fastqflow",
    version="1.0.0",
    description="Interactive FastQC/MultiQC/fastp pipeline for paired-end FASTQ files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests*", "test_*"]),
    include_package_data=True,
    package_data={
        'fastqflow': ['config/*.yaml'],
    },
    install_requires=[
        "numpy>=1.20.0",
        "PyYAML>=5.4.0",
        "plotext>=5.2.0,<6",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
    keywords=[
        'bioinformatics', 'ngs', 'quality-control', 'fastqc', 'multiqc',
        'fastp', 'trimming', 'paired-end', 'sequencing', 'pipeline'
    ],
    entry_points={
        'console_scripts': [
            'fastqflow=fastqflow.cli.cli:main',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
    ],
)
