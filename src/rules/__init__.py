"""Run configuration for batchstats."""

from rules.config import (
    AnalyzerConfig,
    BatchStatsConfig,
    ConfigError,
    DiscoveryConfig,
    StatisticsConfig,
    load_config,
)

__all__ = [
    "AnalyzerConfig",
    "BatchStatsConfig",
    "ConfigError",
    "DiscoveryConfig",
    "StatisticsConfig",
    "load_config",
]
