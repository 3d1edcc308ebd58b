"""Developer tools module for radix stream conversion.

This module provides performance profiling of conversions and a benchmark over
radix pairs.
"""

from .profiling import PerformanceProfiler, PerformanceReport, benchmark_radix_pairs

__all__ = [
    "PerformanceProfiler",
    "PerformanceReport",
    "benchmark_radix_pairs",
]
