"""
Pipeline orchestration module.
"""

from .orchestrator import WorkMapPipeline, run_workmap

__all__ = ['WorkMapPipeline', 'run_workmap']
