"""Constrained nearest-neighbour matching over enrolled face descriptors.

The scan is linear over every enrolled descriptor. That is fine for a class
sized population; a larger one would need an indexed search.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np

MATCH_THRESHOLD = 0.6

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    student_id: str
    student_name: str
    descriptor: Sequence[float]


@dataclass(frozen=True)
class BestMatch:
    student_id: str
    student_name: str
    distance: float

    @property
    def confidence(self) -> str:
        return format_confidence(self.distance)


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """``sqrt(sum((a_i - b_i) ** 2))``; both vectors must have the same length."""
    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.shape != vb.shape:
        raise ValueError(f"Descriptor length mismatch: {va.shape[0]} != {vb.shape[0]}")
    return float(math.sqrt(float(np.sum((va - vb) ** 2))))


def confidence_from_distance(distance: float) -> float:
    return 100 - distance * 100


def format_confidence(distance: float) -> str:
    """Confidence percentage with two decimals, e.g. ``"41.00"``."""
    return f"{confidence_from_distance(distance):.2f}"


def find_best_match(
    query: Sequence[float],
    candidates: Iterable[Candidate],
    threshold: float = MATCH_THRESHOLD,
) -> Optional[BestMatch]:
    """Return the closest candidate strictly under ``threshold``.

    Candidates are scanned in the order given; on equal distances the first one
    wins, so callers pass them in a stable order (by student id).
    """
    query_vec = np.asarray(query, dtype=np.float64).ravel()
    best: Optional[Candidate] = None
    min_distance = float(threshold)

    for candidate in candidates:
        if candidate.descriptor is None:
            continue
        try:
            distance = euclidean_distance(query_vec, candidate.descriptor)
        except ValueError as exc:
            logger.warning("Skipping %s: %s", candidate.student_id, exc)
            continue
        if distance < min_distance:
            min_distance = distance
            best = candidate

    if best is None:
        return None
    return BestMatch(
        student_id=best.student_id,
        student_name=best.student_name,
        distance=min_distance,
    )


__all__ = [
    "MATCH_THRESHOLD",
    "Candidate",
    "BestMatch",
    "euclidean_distance",
    "confidence_from_distance",
    "format_confidence",
    "find_best_match",
]
