"""
Scrape and upload entry points.

Modules:
    orchestrator - Request handling for scrape and upload
    report - Console lines for the staged catalog and upload summary
"""

from .orchestrator import (
    PipelineResponse,
    run_upload,
    scrape_store,
    summarize_errors,
    upload_catalog,
)
from .report import staged_lines, upload_summary_lines

__all__ = [
    'PipelineResponse',
    'run_upload',
    'scrape_store',
    'staged_lines',
    'summarize_errors',
    'upload_catalog',
    'upload_summary_lines',
]
