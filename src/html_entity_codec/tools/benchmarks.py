"""Performance benchmarking for entity encoding and decoding.

This module measures throughput and memory of the encode and decode paths on
generated texts, optionally side by side with the standard library's
``html.escape`` / ``html.unescape``, and compares suites to detect
performance regressions.
"""

import gc
import html
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import psutil

from html_entity_codec.api import (
    decode_html,
    encode_attribute,
    encode_minimal,
)
from html_entity_codec.shared import DecodeError, get_logger

CODEC_NAME = "html_entity_codec"
STDLIB_NAME = "html"

# Relative change treated as significant when comparing suites
REGRESSION_THRESHOLD = 0.05


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""

    implementation: str
    operation: str
    test_case: str
    processing_time_ms: float
    memory_used_mb: float
    characters_processed: int
    success: bool
    error_message: Optional[str] = None

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def key(self) -> str:
        return f"{self.implementation}:{self.operation}:{self.test_case}"


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "Entity Codec Benchmark"
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        self.results.append(result)

    def get_results(
        self,
        implementation: Optional[str] = None,
        operation: Optional[str] = None,
        test_case: Optional[str] = None
    ) -> List[BenchmarkResult]:
        """Filter results; ``None`` matches anything."""
        return [
            r for r in self.results
            if (implementation is None or r.implementation == implementation)
            and (operation is None or r.operation == operation)
            and (test_case is None or r.test_case == test_case)
        ]

    def get_statistics(self, implementation: str, operation: str) -> Dict[str, float]:
        """Throughput statistics (characters per second) across test cases."""
        values = [
            r.characters_per_second
            for r in self.get_results(implementation, operation)
            if r.success
        ]
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
        """Summarise the suite per implementation and operation."""
        pairs = sorted({(r.implementation, r.operation) for r in self.results})
        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "summary": {},
            "detailed_results": {},
        }
        for implementation, operation in pairs:
            runs = self.get_results(implementation, operation)
            successful = [r for r in runs if r.success]
            report["summary"][f"{implementation}:{operation}"] = {
                "total_runs": len(runs),
                "successful_runs": len(successful),
                "throughput": self.get_statistics(implementation, operation),
            }
        for result in self.results:
            report["detailed_results"][result.key] = {
                "processing_time_ms": result.processing_time_ms,
                "memory_used_mb": result.memory_used_mb,
                "characters_per_second": result.characters_per_second,
                "success": result.success,
                "error": result.error_message,
            }
        return report


def _generate_prose(paragraphs: int) -> str:
    sentence = (
        "The moonstone was taken from the shrine at Somnauth, "
        "and it's said \"no good\" will come to whoever keeps it. "
        "Café owners in Götaland & Småland still tell the tale <quietly>. "
    )
    return "\n\n".join(sentence * 4 for _ in range(paragraphs))


def default_test_cases() -> Dict[str, str]:
    """Texts exercised by the benchmark."""
    return {
        "small_prose": _generate_prose(1),
        "large_prose": _generate_prose(500),
        "markup_heavy": "<a href=\"/x?a=1&b='2'\">link</a>" * 2000,
        "latin1_heavy": "ÅÄÖ åäö éèê ñ ü ß © ® ± ½ " * 2000,
        "no_specials": "abcdefghij0123456789" * 5000,
    }


class CodecBenchmark:
    """Throughput and memory benchmark for the codec."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        warmup_runs: int = 3,
        benchmark_runs: int = 10,
        test_cases: Optional[Dict[str, str]] = None
    ) -> None:
        """Initialize benchmark.

        Args:
            correlation_id: Optional correlation ID for tracking
            warmup_runs: Number of warmup runs before measuring
            benchmark_runs: Number of measured runs to average
            test_cases: Named input texts, defaults to ``default_test_cases()``
        """
        if warmup_runs < 0:
            raise ValueError("warmup_runs must be >= 0")
        if benchmark_runs <= 0:
            raise ValueError("benchmark_runs must be > 0")
        self.correlation_id = correlation_id
        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.logger = get_logger(__name__, correlation_id, "benchmark")
        self.test_cases = test_cases if test_cases is not None else default_test_cases()

    def _operations(self, include_stdlib: bool) -> Dict[str, Dict[str, Callable[[str], Any]]]:
        operations: Dict[str, Dict[str, Callable[[str], Any]]] = {
            CODEC_NAME: {
                "encode_minimal": encode_minimal,
                "encode_attribute": encode_attribute,
                "decode_minimal": decode_html,
                "decode_attribute": decode_html,
            },
        }
        if include_stdlib:
            operations[STDLIB_NAME] = {
                "encode_minimal": html.escape,
                "decode_minimal": html.unescape,
            }
        return operations

    def _prepare_input(self, operation: str, text: str) -> str:
        # Decoding is measured on the codec's own encodings, as in the encode runs.
        if operation == "decode_minimal":
            return encode_minimal(text)
        if operation == "decode_attribute":
            return encode_attribute(text)
        return text

    def _measure_memory_usage(self) -> float:
        """Get current resident memory in MB."""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    def _run_once(
        self,
        implementation: str,
        operation: str,
        test_case: str,
        func: Callable[[str], Any],
        data: str
    ) -> BenchmarkResult:
        gc.collect()
        memory_before = self._measure_memory_usage()
        start_time = time.perf_counter()

        try:
            func(data)
            success = True
            error_message = None
        except DecodeError as e:
            success = False
            error_message = str(e)

        processing_time = (time.perf_counter() - start_time) * 1000
        memory_used = max(0.0, self._measure_memory_usage() - memory_before)

        return BenchmarkResult(
            implementation=implementation,
            operation=operation,
            test_case=test_case,
            processing_time_ms=processing_time,
            memory_used_mb=memory_used,
            characters_processed=len(data),
            success=success,
            error_message=error_message,
        )

    def run_benchmark(self, include_stdlib: bool = True) -> BenchmarkSuite:
        """Run every operation on every test case.

        Args:
            include_stdlib: Also measure ``html.escape`` / ``html.unescape``

        Returns:
            BenchmarkSuite with one averaged result per combination
        """
        suite = BenchmarkSuite()
        operations = self._operations(include_stdlib)

        self.logger.info(
            "Starting benchmark suite",
            extra={
                "test_cases": len(self.test_cases),
                "implementations": list(operations),
                "warmup_runs": self.warmup_runs,
                "benchmark_runs": self.benchmark_runs,
            }
        )

        for test_case, text in self.test_cases.items():
            for implementation, funcs in operations.items():
                for operation, func in funcs.items():
                    data = self._prepare_input(operation, text)

                    for _ in range(self.warmup_runs):
                        self._run_once(implementation, operation, test_case, func, data)

                    runs = [
                        self._run_once(implementation, operation, test_case, func, data)
                        for _ in range(self.benchmark_runs)
                    ]
                    suite.add_result(self._average(runs))

        self.logger.info(
            "Benchmark suite completed",
            extra={"total_results": len(suite.results)}
        )
        return suite

    def _average(self, runs: List[BenchmarkResult]) -> BenchmarkResult:
        first = runs[0]
        successful = [r for r in runs if r.success]
        if not successful:
            return first
        return BenchmarkResult(
            implementation=first.implementation,
            operation=first.operation,
            test_case=first.test_case,
            processing_time_ms=statistics.mean(r.processing_time_ms for r in successful),
            memory_used_mb=statistics.mean(r.memory_used_mb for r in successful),
            characters_processed=first.characters_processed,
            success=True,
        )

    def compare_performance(
        self,
        baseline_suite: BenchmarkSuite,
        current_suite: BenchmarkSuite
    ) -> Dict[str, Any]:
        """Compare two suites and list improvements and regressions.

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
        current_by_key = {r.key: r for r in current_suite.results}

        for baseline in baseline_suite.results:
            current = current_by_key.get(baseline.key)
            if not current or not (baseline.success and current.success):
                continue
            if baseline.processing_time_ms <= 0:
                continue
            time_change = (
                (current.processing_time_ms - baseline.processing_time_ms)
                / baseline.processing_time_ms
            )
            entry = {
                "baseline_time_ms": baseline.processing_time_ms,
                "current_time_ms": current.processing_time_ms,
                "change_percent": time_change * 100,
            }
            if time_change < -REGRESSION_THRESHOLD:
                comparison["improvements"][baseline.key] = entry
            elif time_change > REGRESSION_THRESHOLD:
                comparison["regressions"][baseline.key] = entry

        comparison["summary"] = {
            "total_improvements": len(comparison["improvements"]),
            "total_regressions": len(comparison["regressions"]),
            "has_regressions": bool(comparison["regressions"]),
        }
        return comparison
