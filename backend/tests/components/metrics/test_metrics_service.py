import pytest

from recruitflow.components.metrics import service as metrics_service
from recruitflow.components.scoring import service as scoring_service
from recruitflow.models.recruitment import Metric
from recruitflow.platform.errors import ConflictError, NotFoundError, ValidationError
from tests.conftest import setup_scoring_environment


def test_replace_metrics_swaps_whole_set(db):
    env = setup_scoring_environment(db)
    rows = metrics_service.replace_metrics(
        db,
        env["round"].id,
        [{"name": "Grit", "weight": 0.5}, {"name": "Humor", "weight": 0.25}, {"name": "Drive", "weight": 0.25}],
    )
    assert [m.name for m in rows] == ["Grit", "Humor", "Drive"]
    remaining = db.query(Metric).filter(Metric.recruitment_round_id == env["round"].id).all()
    assert sorted(m.name for m in remaining) == ["Drive", "Grit", "Humor"]


def test_empty_metric_set_allowed(db):
    env = setup_scoring_environment(db)
    assert metrics_service.replace_metrics(db, env["round"].id, []) == []
    assert db.query(Metric).filter(Metric.recruitment_round_id == env["round"].id).count() == 0


@pytest.mark.parametrize("weights", [[0.5, 0.4], [0.7, 0.4], [0.998]])
def test_weight_sum_outside_tolerance_rejected(db, weights):
    env = setup_scoring_environment(db)
    metrics = [{"name": f"m{i}", "weight": w} for i, w in enumerate(weights)]
    with pytest.raises(ValidationError):
        metrics_service.replace_metrics(db, env["round"].id, metrics)
    # Original set is untouched
    assert db.query(Metric).filter(Metric.recruitment_round_id == env["round"].id).count() == 2


def test_weight_sum_within_tolerance_accepted(db):
    env = setup_scoring_environment(db)
    rows = metrics_service.replace_metrics(
        db, env["round"].id, [{"name": "a", "weight": 0.3333}, {"name": "b", "weight": 0.6672}]
    )
    assert len(rows) == 2


def test_blank_name_rejected(db):
    env = setup_scoring_environment(db)
    with pytest.raises(ValidationError):
        metrics_service.replace_metrics(db, env["round"].id, [{"name": "  ", "weight": 1.0}])


def test_replace_blocked_once_scores_exist(db):
    env = setup_scoring_environment(db)
    scoring_service.submit_scores(
        db,
        applicant_id=env["applicant"].id,
        recruitment_round_id=env["round"].id,
        user_id=env["user"].id,
        entries=[{"metric_id": mid, "score_value": 5} for mid in env["metric_ids"]],
    )
    with pytest.raises(ConflictError) as exc_info:
        metrics_service.replace_metrics(db, env["round"].id, [{"name": "New", "weight": 1.0}])
    assert "Delete all scores" in exc_info.value.message


def test_replace_allowed_after_clearing_scores(db):
    env = setup_scoring_environment(db)
    scoring_service.submit_scores(
        db,
        applicant_id=env["applicant"].id,
        recruitment_round_id=env["round"].id,
        user_id=env["user"].id,
        entries=[{"metric_id": mid, "score_value": 5} for mid in env["metric_ids"]],
    )
    scoring_service.delete_all_scores_for_round(db, env["round"].id)
    rows = metrics_service.replace_metrics(db, env["round"].id, [{"name": "New", "weight": 1.0}])
    assert [m.name for m in rows] == ["New"]


def test_unknown_round(db):
    with pytest.raises(NotFoundError):
        metrics_service.replace_metrics(db, 999, [])
