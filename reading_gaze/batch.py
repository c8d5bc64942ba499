"""
Batch analysis of independent reading sessions.

Sessions share nothing but the engine's configuration and measurer, so
they run on joblib's threading backend without coordination.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from joblib import Parallel, delayed

from .config import ScreenGeometry, TextLayoutConfig
from .domain.gaze import RawGazeSample
from .engine import AnalysisRun, ReadingAnalysisEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisSession:
    """Input snapshot of one trial."""

    raw_samples: Sequence[RawGazeSample]
    screen: ScreenGeometry
    layout_config: TextLayoutConfig
    name: str = ""


def _run_session(engine: ReadingAnalysisEngine, session: AnalysisSession) -> AnalysisRun:
    return engine.run(session.raw_samples, session.screen, session.layout_config)


def analyze_sessions(
    sessions: Sequence[AnalysisSession],
    engine: ReadingAnalysisEngine,
    n_jobs: int = 1,
) -> List[AnalysisRun]:
    """
    Run every session through ``engine``.

    Args:
        sessions: Independent trial snapshots.
        engine: Shared, stateless analysis engine.
        n_jobs: Number of parallel jobs (-1 = all CPUs, 1 = sequential).

    Returns:
        One :class:`AnalysisRun` per session, in input order.
    """
    if n_jobs == 1 or len(sessions) <= 1:
        return [_run_session(engine, s) for s in sessions]

    logger.info("Analyzing %s sessions with n_jobs=%s", len(sessions), n_jobs)
    runs = Parallel(n_jobs=n_jobs, prefer="threads")(
        delayed(_run_session)(engine, s) for s in sessions
    )
    return list(runs)
