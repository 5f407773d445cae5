"""Pipeline module for the complete paired-end workflow"""

from fastqflow.pipeline.pipeline_runner import PipelineRunner, PipelineResult

__all__ = ['PipelineRunner', 'PipelineResult']
