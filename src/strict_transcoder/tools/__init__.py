"""Developer tools for the strict transcoder.

This module provides performance benchmarking of the conversion engine
against Python's built-in codecs.
"""

from .benchmarks import BenchmarkResult, BenchmarkSuite, TranscodingBenchmark

__all__ = [
    "BenchmarkResult",
    "BenchmarkSuite",
    "TranscodingBenchmark",
]
