"""Metric sets: validation and wholesale replacement."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

from sqlalchemy.orm import Session

from ...models.recruitment import Metric
from ...platform.config import settings
from ...platform.database import commit_or_raise
from ...platform.errors import ConflictError, ValidationError
from ..rounds import repository as rounds_repo
from ..scoring.calculations import weights_sum_to_one
from . import repository

logger = logging.getLogger("recruitflow.metrics")


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def validate_metrics(metrics: Iterable[Any]) -> List[tuple[str, float]]:
    """Normalise metric input to (name, weight) pairs.

    An empty set is valid; a non-empty set must sum to 1.0 within
    ``METRIC_WEIGHT_TOLERANCE``.
    """
    normalized: List[tuple[str, float]] = []
    for entry in metrics or []:
        name = (_field(entry, "name") or "").strip()
        if not name:
            raise ValidationError("Metric name is required")
        weight = _field(entry, "weight")
        try:
            weight = float(weight)
        except (TypeError, ValueError):
            raise ValidationError(f"Metric '{name}' has an invalid weight")
        if weight < 0 or weight > 1:
            raise ValidationError(f"Metric '{name}' weight must be between 0 and 1")
        normalized.append((name, weight))

    if normalized and not weights_sum_to_one(
        (w for _, w in normalized), settings.METRIC_WEIGHT_TOLERANCE
    ):
        total = sum(w for _, w in normalized)
        raise ValidationError(
            "Metric weights must sum to 1.0",
            details={"weight_total": round(total, 6)},
        )
    return normalized


def add_metrics(db: Session, recruitment_round_id: int, metrics: List[tuple[str, float]]) -> List[Metric]:
    """Stage validated metrics on the session without committing."""
    rows = [
        Metric(recruitment_round_id=recruitment_round_id, name=name, weight=weight)
        for name, weight in metrics
    ]
    db.add_all(rows)
    return rows


def list_metrics(db: Session, recruitment_round_id: int) -> List[Metric]:
    rounds_repo.get_round_or_404(db, recruitment_round_id)
    return repository.list_metrics(db, recruitment_round_id)


def replace_metrics(db: Session, recruitment_round_id: int, metrics: Iterable[Any]) -> List[Metric]:
    """Delete every metric of the round and insert ``metrics`` in its place."""
    normalized = validate_metrics(metrics)
    rounds_repo.get_round_or_404(db, recruitment_round_id)

    ar_ids = rounds_repo.applicant_round_ids(db, recruitment_round_id)
    if repository.any_scores_for(db, ar_ids):
        logger.warning("Metric replacement blocked by scores round_id=%s", recruitment_round_id)
        raise ConflictError(
            "Cannot modify metrics after scoring has started. Delete all scores for this round first.",
            details={"recruitment_round_id": recruitment_round_id},
        )

    removed = repository.delete_metrics(db, recruitment_round_id)
    rows = add_metrics(db, recruitment_round_id, normalized)
    commit_or_raise(db, logger, "replace_metrics")
    for row in rows:
        db.refresh(row)
    logger.info(
        "Replaced metrics round_id=%s removed=%s inserted=%s",
        recruitment_round_id,
        removed,
        len(rows),
    )
    return rows
