"""Performance profiling tools for radix stream conversion.

Provides timing analysis per conversion stage, memory tracking via psutil, JSON
reports and a benchmark over radix pairs.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import psutil

from radix_stream.api import RadixConverter
from radix_stream.shared.config import DEFAULT_ALPHABET, ConverterConfig, SideConfig
from radix_stream.shared.logging import get_logger

BYTE_RADIX = 256


@dataclass
class StagePerformance:
    """Performance metrics for a single conversion stage."""

    stage_name: str
    start_time: float
    end_time: float
    memory_start: int  # bytes
    memory_end: int  # bytes
    cpu_percent: float
    operations_count: int = 0

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Memory usage change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def ops_per_second(self) -> float:
        """Operations per second rate."""
        duration_s = self.end_time - self.start_time
        return self.operations_count / duration_s if duration_s > 0 else 0.0


@dataclass
class ProfilingSession:
    """Container for a complete profiling session."""

    session_id: str
    start_time: float
    end_time: float
    input_size: int  # source symbols
    stages: List[StagePerformance] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def symbols_per_second(self) -> float:
        """Source symbols converted per second."""
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return self.input_size / duration_s


@dataclass
class PerformanceReport:
    """Performance analysis report over a set of sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        """Total number of profiled sessions."""
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        """Average processing duration across sessions."""
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    @property
    def average_symbols_per_second(self) -> float:
        """Average throughput across sessions."""
        if not self.sessions:
            return 0.0
        return sum(s.symbols_per_second for s in self.sessions) / len(self.sessions)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form of the report, as written by ``save_report``."""
        return {
            "generation_time": self.generation_time,
            "summary": {
                "session_count": self.session_count,
                "average_duration_ms": self.average_duration_ms,
                "average_symbols_per_second": self.average_symbols_per_second,
            },
            "sessions": [
                {
                    "session_id": session.session_id,
                    "start_time": session.start_time,
                    "end_time": session.end_time,
                    "input_size": session.input_size,
                    "total_duration_ms": session.total_duration_ms,
                    "symbols_per_second": session.symbols_per_second,
                    "metadata": session.metadata,
                    "stages": [
                        {
                            "stage_name": stage.stage_name,
                            "duration_ms": stage.duration_ms,
                            "memory_delta": stage.memory_delta,
                            "cpu_percent": stage.cpu_percent,
                            "operations_count": stage.operations_count,
                            "ops_per_second": stage.ops_per_second,
                        }
                        for stage in session.stages
                    ],
                }
                for session in self.sessions
            ],
        }


class PerformanceProfiler:
    """Performance profiler for radix conversions.

    Examples:
        Whole conversion:
        >>> profiler = PerformanceProfiler()
        >>> with profiler.profile_conversion("session1") as session:
        ...     result = converter.convert(data)
        >>> report = profiler.generate_report()

        Stage breakdown:
        >>> session = profiler.start_session("detailed")
        >>> with profiler.profile_stage(session, "convert"):
        ...     result = converter.convert(data)
        >>> profiler.end_session(session)
    """

    def __init__(self, enable_memory_tracking: bool = True):
        """Initialize performance profiler.

        Args:
            enable_memory_tracking: Whether to sample process RSS around stages
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self.current_session: Optional[ProfilingSession] = None
        self.logger = get_logger(__name__, None, "performance_profiler")

    def start_session(self, session_id: str, input_size: int = 0) -> ProfilingSession:
        """Start a new profiling session.

        Args:
            session_id: Unique identifier for the session
            input_size: Number of source symbols, if known up front

        Returns:
            ProfilingSession object for tracking
        """
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            end_time=0.0,
            input_size=input_size
        )

        self.current_session = session
        self.logger.info(
            "Started profiling session",
            extra={
                "session_id": session_id,
                "input_size": input_size,
                "memory_tracking": self.enable_memory_tracking
            }
        )

        return session

    def end_session(self, session: ProfilingSession) -> None:
        """End a profiling session and store results."""
        session.end_time = time.time()
        self.sessions.append(session)

        if self.current_session is session:
            self.current_session = None

        self.logger.info(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "symbols_per_second": session.symbols_per_second,
                "stage_count": len(session.stages)
            }
        )

    def profile_stage(self, session: ProfilingSession, stage_name: str) -> "StageProfiler":
        """Context manager profiling one stage of ``session``."""
        return StageProfiler(self, session, stage_name)

    def profile_conversion(self, session_id: str) -> "ConversionProfiler":
        """Context manager profiling a complete conversion as one session."""
        return ConversionProfiler(self, session_id)

    def add_stage_performance(
        self,
        session: ProfilingSession,
        stage_perf: StagePerformance
    ) -> None:
        """Add stage performance data to session."""
        session.stages.append(stage_perf)

        self.logger.debug(
            "Added stage performance data",
            extra={
                "session_id": session.session_id,
                "stage_name": stage_perf.stage_name,
                "duration_ms": stage_perf.duration_ms,
                "memory_delta": stage_perf.memory_delta
            }
        )

    def generate_report(self) -> PerformanceReport:
        """Generate a report over all finished sessions."""
        return PerformanceReport(
            sessions=self.sessions.copy(),
            generation_time=time.time()
        )

    def save_report(self, report: PerformanceReport, output_path: Union[str, Path]) -> None:
        """Save performance report to a JSON file.

        Args:
            report: Report to save
            output_path: Path to save report to
        """
        output_path = Path(output_path)
        output_path.write_text(json.dumps(report.to_dict(), indent=2, default=str))

        self.logger.info(
            "Saved performance report",
            extra={
                "output_path": str(output_path),
                "session_count": report.session_count
            }
        )

    def get_optimization_recommendations(self, report: PerformanceReport) -> List[str]:
        """Generate recommendations based on performance data.

        Args:
            report: Performance report to analyze

        Returns:
            List of recommendations
        """
        if not report.sessions:
            return ["No profiling data available for analysis"]

        recommendations = []
        avg_duration = report.average_duration_ms

        for session in report.sessions:
            chunks_read = session.metadata.get("chunks_read", 0)
            if chunks_read and session.input_size / chunks_read < 2:
                recommendations.append(
                    f"Session '{session.session_id}' converts about one symbol per "
                    "chunk; per-chunk overhead dominates for this radix pair"
                )
                break

        # Identify bottleneck stages
        stage_stats: Dict[str, List[float]] = {}
        for session in report.sessions:
            for stage in session.stages:
                stage_stats.setdefault(stage.stage_name, []).append(stage.duration_ms)

        for stage_name, durations in stage_stats.items():
            avg_stage_duration = sum(durations) / len(durations)
            if len(stage_stats) > 1 and avg_stage_duration > avg_duration * 0.5:
                recommendations.append(
                    f"Stage '{stage_name}' takes more than half of the session time"
                )

        for session in report.sessions:
            growth = sum(stage.memory_delta for stage in session.stages if stage.memory_delta > 0)
            if session.input_size and growth > session.input_size * 64:
                recommendations.append(
                    "High memory growth detected; convert large inputs with "
                    "convert_stream instead of in memory"
                )
                break

        if not recommendations:
            recommendations.append("Performance appears optimal based on current analysis")

        return recommendations

    def clear_sessions(self) -> None:
        """Clear all stored profiling sessions."""
        session_count = len(self.sessions)
        self.sessions.clear()
        self.current_session = None

        self.logger.info(
            "Cleared profiling sessions",
            extra={"cleared_count": session_count}
        )


class StageProfiler:
    """Context manager for profiling one conversion stage."""

    def __init__(self, profiler: PerformanceProfiler, session: ProfilingSession, stage_name: str):
        self.profiler = profiler
        self.session = session
        self.stage_name = stage_name
        self.stage_perf: Optional[StagePerformance] = None
        self._process: Optional[psutil.Process] = None

    def __enter__(self) -> StagePerformance:
        """Start stage profiling."""
        if self.profiler.enable_memory_tracking:
            self._process = psutil.Process()
        process = self._process

        self.stage_perf = StagePerformance(
            stage_name=self.stage_name,
            start_time=time.time(),
            end_time=0.0,
            memory_start=process.memory_info().rss if process else 0,
            memory_end=0,
            cpu_percent=process.cpu_percent() if process else 0.0
        )

        return self.stage_perf

    def __exit__(self, exc_type, exc_val, exc_tb):
        """End stage profiling."""
        if self.stage_perf is None:
            return
        process = self._process

        self.stage_perf.end_time = time.time()
        self.stage_perf.memory_end = process.memory_info().rss if process else 0
        if process:
            self.stage_perf.cpu_percent = process.cpu_percent()

        self.profiler.add_stage_performance(self.session, self.stage_perf)


class ConversionProfiler:
    """Context manager for profiling a complete conversion."""

    def __init__(self, profiler: PerformanceProfiler, session_id: str):
        self.profiler = profiler
        self.session_id = session_id
        self.session: Optional[ProfilingSession] = None

    def __enter__(self) -> ProfilingSession:
        """Start conversion profiling."""
        self.session = self.profiler.start_session(self.session_id)
        return self.session

    def __exit__(self, exc_type, exc_val, exc_tb):
        """End conversion profiling."""
        if self.session:
            self.profiler.end_session(self.session)


def side_for_radix(radix: int) -> SideConfig:
    """Alphabet-mapped side when the default alphabet covers ``radix``, else numeric."""
    if radix <= len(DEFAULT_ALPHABET):
        return SideConfig(radix=radix)
    return SideConfig(radix=radix, numeric=True)


def benchmark_radix_pairs(
    data: bytes,
    pairs: Sequence[Tuple[int, int]],
    iterations: int = 10
) -> Dict[str, PerformanceReport]:
    """Benchmark conversions between radix pairs.

    ``data`` is first rendered in each pair's source radix (stage
    ``prepare``), then converted to the target radix (stage ``convert``).

    Args:
        data: Raw bytes used as the benchmark value
        pairs: ``(from_radix, to_radix)`` pairs to benchmark
        iterations: Number of iterations per pair

    Returns:
        Dictionary mapping ``"<from>-><to>"`` to performance reports
    """
    bytes_source = SideConfig(radix=BYTE_RADIX, numeric=True)
    results = {}

    for from_radix, to_radix in pairs:
        profiler = PerformanceProfiler()
        preparer = RadixConverter(ConverterConfig(
            source=bytes_source, target=side_for_radix(from_radix)
        ))
        converter = RadixConverter(ConverterConfig(
            source=side_for_radix(from_radix), target=side_for_radix(to_radix)
        ))
        pair_name = f"{from_radix}->{to_radix}"

        for i in range(iterations):
            with profiler.profile_conversion(f"{pair_name}_iteration_{i}") as session:
                session.metadata = {"pair": pair_name, "iteration": i}

                with profiler.profile_stage(session, "prepare") as stage:
                    symbols = preparer.convert(data).output
                    stage.operations_count = len(data)

                with profiler.profile_stage(session, "convert") as stage:
                    result = converter.convert(symbols)
                    stage.operations_count = result.metrics.chunks_read

                session.input_size = len(symbols)
                session.metadata.update(result.summary())

        results[pair_name] = profiler.generate_report()

    return results
