"""Access Log Analyzer - Concurrent metrics over NDJSON access logs."""

from access_log_analyzer.aggregate.summary import Summary
from access_log_analyzer.pipeline.run import analyze, main_analyze

__all__ = ["Summary", "analyze", "main_analyze"]
