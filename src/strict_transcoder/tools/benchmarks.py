"""Performance benchmarking for the transcoding engine.

This module times the UTF-8 to UTF-16 byte pipeline on generated corpora,
compares it against Python's built-in codecs, and tracks performance
regression between runs.
"""

import gc
import psutil
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from strict_transcoder.api import Transcoder
from strict_transcoder.character.encoding import Encoding, EncodingFamily
from strict_transcoder.shared import TranscoderConfig, get_logger

ENGINE_NAME = "strict_transcoder"
CODECS_NAME = "python_codecs"

# Relative change in processing time treated as significant
REGRESSION_THRESHOLD = 0.05


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""

    engine_name: str
    test_case: str
    processing_time_ms: float
    memory_used_mb: float
    bytes_processed: int
    units_generated: int
    success: bool
    error_message: Optional[str] = None

    @property
    def bytes_per_second(self) -> float:
        """Calculate input bytes processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_processed * 1000.0) / self.processing_time_ms

    @property
    def units_per_second(self) -> float:
        """Calculate UTF-16 code units generated per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.units_generated * 1000.0) / self.processing_time_ms

    @property
    def memory_per_byte(self) -> float:
        if self.bytes_processed <= 0:
            return 0.0
        return (self.memory_used_mb * 1024 * 1024) / self.bytes_processed


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "Transcoding Benchmark"
    timestamp: float = field(default_factory=time.time)

    METRICS = (
        "processing_time_ms",
        "memory_used_mb",
        "bytes_per_second",
        "units_per_second",
        "memory_per_byte",
    )

    def add_result(self, result: BenchmarkResult) -> None:
        """Add a benchmark result to the suite."""
        self.results.append(result)

    def get_results_by_engine(self, engine_name: str) -> List[BenchmarkResult]:
        return [r for r in self.results if r.engine_name == engine_name]

    def get_results_by_test_case(self, test_case: str) -> List[BenchmarkResult]:
        return [r for r in self.results if r.test_case == test_case]

    def get_statistics(self, engine_name: str, metric: str) -> Dict[str, float]:
        """Get statistical analysis for an engine and metric.

        Args:
            engine_name: Engine whose results are summarized
            metric: One of ``METRICS``

        Returns:
            min/max/mean/median/stdev/count, empty when nothing matches
        """
        if metric not in self.METRICS:
            return {}
        values = [getattr(r, metric) for r in self.get_results_by_engine(engine_name)]
        if not values:
            return {}

        return {
            "min": min(values),
            "max": max(values),
            "mean": statistics.mean(values),
            "median": statistics.median(values),
            "stdev": statistics.stdev(values) if len(values) > 1 else 0.0,
            "count": len(values),
        }

    def generate_report(self) -> Dict[str, Any]:
        """Generate a benchmark report with per-engine and per-case sections."""
        engines = sorted(set(r.engine_name for r in self.results))
        test_cases = sorted(set(r.test_case for r in self.results))

        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "engines": engines,
            "test_cases": test_cases,
            "summary": {},
            "detailed_results": {},
        }

        for engine in engines:
            engine_results = self.get_results_by_engine(engine)
            successful = [r for r in engine_results if r.success]
            report["summary"][engine] = {
                "total_runs": len(engine_results),
                "successful_runs": len(successful),
                "success_rate": len(successful) / len(engine_results),
                "performance": self.get_statistics(engine, "bytes_per_second"),
                "memory": self.get_statistics(engine, "memory_used_mb"),
            }

        for test_case in test_cases:
            report["detailed_results"][test_case] = {}
            for result in self.get_results_by_test_case(test_case):
                # First result per engine and case
                report["detailed_results"][test_case].setdefault(result.engine_name, {
                    "processing_time_ms": result.processing_time_ms,
                    "memory_used_mb": result.memory_used_mb,
                    "bytes_per_second": result.bytes_per_second,
                    "units_per_second": result.units_per_second,
                    "success": result.success,
                    "error": result.error_message,
                })

        return report


class TranscodingBenchmark:
    """Benchmark of UTF-8 bytes to UTF-16LE bytes conversion."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        warmup_runs: int = 3,
        benchmark_runs: int = 10,
        corpus_size: int = 1000,
    ) -> None:
        """Initialize benchmark.

        Args:
            correlation_id: Optional correlation ID for tracking
            warmup_runs: Number of warmup runs before benchmarking
            benchmark_runs: Number of benchmark runs to average
            corpus_size: Repetitions of the sample text in each corpus
        """
        self.correlation_id = correlation_id
        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.logger = get_logger(__name__, correlation_id, "benchmark")

        self.transcoder = Transcoder(
            TranscoderConfig(
                raise_on_error=False,
                enable_diagnostics=False,
                correlation_id=correlation_id,
            )
        )
        self.test_cases = self._create_test_cases(corpus_size)

    def _create_test_cases(self, corpus_size: int) -> Dict[str, bytes]:
        """Create UTF-8 corpora covering each run length."""
        samples = {
            "ascii": "The quick brown fox jumps over the lazy dog. ",
            "latin": "Dès Noël où un zéphyr haï me vêt de glaçons würmiens. ",
            "cjk": "漢字かな交じり文。",
            "supplementary": "\U0001F600\U0001F680\U0001D11E\U00020BB7 ",
        }
        cases = {
            name: (text * corpus_size).encode("utf-8")
            for name, text in samples.items()
        }
        cases["mixed"] = b"".join(cases[name] for name in samples)
        cases["malformed"] = cases["ascii"] + b"\xc0\x80" + cases["ascii"]
        return cases

    def _measure_memory_usage(self) -> float:
        """Get current memory usage in MB."""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    def _engine_convert(self, data: bytes) -> int:
        decoded = self.transcoder.decode(data, EncodingFamily.UTF8)
        if not decoded.success:
            raise decoded.error  # type: ignore[misc]
        self.transcoder.encode(decoded.output, Encoding.UTF16_LE)
        return len(decoded.output)

    def _codecs_convert(self, data: bytes) -> int:
        return len(data.decode("utf-8").encode("utf-16-le")) // 2

    def _time_run(
        self,
        engine_name: str,
        test_case: str,
        data: bytes,
        convert: Callable[[bytes], int],
    ) -> BenchmarkResult:
        """Time one conversion and record memory growth."""
        gc.collect()
        memory_before = self._measure_memory_usage()
        start_time = time.perf_counter()

        try:
            units_generated = convert(data)
            success = True
            error_message = None
        except ValueError as e:
            success = False
            error_message = str(e)
            units_generated = 0

        processing_time = (time.perf_counter() - start_time) * 1000
        memory_used = max(0.0, self._measure_memory_usage() - memory_before)

        return BenchmarkResult(
            engine_name=engine_name,
            test_case=test_case,
            processing_time_ms=processing_time,
            memory_used_mb=memory_used,
            bytes_processed=len(data),
            units_generated=units_generated,
            success=success,
            error_message=error_message,
        )

    def run_benchmark(self, include_codecs: bool = True) -> BenchmarkSuite:
        """Run the benchmark suite.

        Args:
            include_codecs: Whether to include Python's codecs for comparison

        Returns:
            BenchmarkSuite with one averaged result per engine and case
        """
        suite = BenchmarkSuite()

        engines: Dict[str, Callable[[bytes], int]] = {ENGINE_NAME: self._engine_convert}
        if include_codecs:
            engines[CODECS_NAME] = self._codecs_convert

        self.logger.info(
            "Starting benchmark suite",
            extra={
                "test_cases": len(self.test_cases),
                "engines": list(engines),
                "warmup_runs": self.warmup_runs,
                "benchmark_runs": self.benchmark_runs,
            },
        )

        for test_case, data in self.test_cases.items():
            self.logger.info(f"Benchmarking test case: {test_case}")

            for engine_name, convert in engines.items():
                for _ in range(self.warmup_runs):
                    self._time_run(engine_name, test_case, data, convert)

                run_results = [
                    self._time_run(engine_name, test_case, data, convert)
                    for _ in range(self.benchmark_runs)
                ]
                if run_results:
                    suite.add_result(self._average(run_results))

        self.logger.info(
            "Benchmark suite completed",
            extra={
                "total_results": len(suite.results),
                "suite_duration_minutes": (time.time() - suite.timestamp) / 60,
            },
        )
        return suite

    def _average(self, run_results: List[BenchmarkResult]) -> BenchmarkResult:
        first = run_results[0]
        successful = [r for r in run_results if r.success]
        if not successful:
            return BenchmarkResult(
                engine_name=first.engine_name,
                test_case=first.test_case,
                processing_time_ms=0.0,
                memory_used_mb=0.0,
                bytes_processed=first.bytes_processed,
                units_generated=0,
                success=False,
                error_message=first.error_message,
            )
        return BenchmarkResult(
            engine_name=first.engine_name,
            test_case=first.test_case,
            processing_time_ms=statistics.mean(r.processing_time_ms for r in successful),
            memory_used_mb=statistics.mean(r.memory_used_mb for r in successful),
            bytes_processed=first.bytes_processed,
            units_generated=successful[0].units_generated,
            success=True,
        )

    def compare_performance(
        self,
        baseline_suite: BenchmarkSuite,
        current_suite: BenchmarkSuite,
    ) -> Dict[str, Any]:
        """Compare performance between two benchmark suites.

        Args:
            baseline_suite: Baseline benchmark results
            current_suite: Current benchmark results

        Returns:
            Performance comparison report
        """
        comparison: Dict[str, Any] = {
            "baseline_timestamp": baseline_suite.timestamp,
            "current_timestamp": current_suite.timestamp,
            "improvements": {},
            "regressions": {},
            "summary": {},
        }

        for baseline in baseline_suite.results:
            current = next(
                (
                    r for r in current_suite.get_results_by_test_case(baseline.test_case)
                    if r.engine_name == baseline.engine_name
                ),
                None,
            )
            if current is None or not (baseline.success and current.success):
                continue
            if baseline.processing_time_ms <= 0:
                continue

            time_change = (
                (current.processing_time_ms - baseline.processing_time_ms)
                / baseline.processing_time_ms
            )
            entry = {
                "change_percent": abs(time_change) * 100,
                "baseline_time_ms": baseline.processing_time_ms,
                "current_time_ms": current.processing_time_ms,
            }
            key = f"{baseline.engine_name}_{baseline.test_case}"
            if time_change < -REGRESSION_THRESHOLD:
                comparison["improvements"][key] = entry
            elif time_change > REGRESSION_THRESHOLD:
                comparison["regressions"][key] = entry

        comparison["summary"] = {
            "total_improvements": len(comparison["improvements"]),
            "total_regressions": len(comparison["regressions"]),
            "has_regressions": len(comparison["regressions"]) > 0,
        }
        return comparison
