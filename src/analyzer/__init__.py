"""External analyzer invocation."""

from analyzer.adapter import DEFAULT_MAX_OUTPUT_BYTES, AnalyzerAdapter

__all__ = ["DEFAULT_MAX_OUTPUT_BYTES", "AnalyzerAdapter"]
