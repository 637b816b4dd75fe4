import pytest

from recruitflow.components.rounds import service as rounds_service
from recruitflow.components.scoring import service as scoring_service
from recruitflow.models.applicant import Applicant, ApplicantRound, Comment, Score
from recruitflow.models.delibs import DelibsSession, DelibsVote
from recruitflow.models.recruitment import AnonymousReading, Metric, RecruitmentCycle, RecruitmentRound
from recruitflow.platform.errors import ConflictError, NotFoundError, StoreError, ValidationError
from tests.conftest import (
    fail_commits,
    make_applicant,
    make_applicant_round,
    make_cycle,
    make_org,
    make_round,
    setup_scoring_environment,
)


def _sort_orders(db, cycle):
    rows = (
        db.query(RecruitmentRound)
        .filter(RecruitmentRound.recruitment_cycle_id == cycle.id)
        .order_by(RecruitmentRound.sort_order.asc())
        .all()
    )
    return [(r.name, r.sort_order) for r in rows]


def test_create_first_round_starts_at_zero(db):
    cycle = make_cycle(db, make_org(db))
    created = rounds_service.create_round(
        db,
        recruitment_cycle_id=cycle.id,
        name="Info Night",
        metrics=[{"name": "Energy", "weight": 1.0}],
    )
    assert created["sort_order"] == 0
    assert [m["name"] for m in created["metrics"]] == ["Energy"]
    assert created["backfilled_applicants"] == 0


def test_create_round_appends_and_backfills_accepted(db):
    org = make_org(db)
    cycle = make_cycle(db, org)
    first = make_round(db, cycle, 0)
    accepted = make_applicant(db, cycle, name="Accepted")
    rejected = make_applicant(db, cycle, name="Rejected")
    make_applicant_round(db, accepted, first, status="accepted")
    make_applicant_round(db, rejected, first, status="rejected")

    created = rounds_service.create_round(db, recruitment_cycle_id=cycle.id, name="Second")
    assert created["sort_order"] == 1
    assert created["backfilled_applicants"] == 1
    rows = db.query(ApplicantRound).filter(ApplicantRound.recruitment_round_id == created["id"]).all()
    assert [r.applicant_id for r in rows] == [accepted.id]
    assert rows[0].status == "in_progress"


def test_create_round_validates_metrics(db):
    cycle = make_cycle(db, make_org(db))
    with pytest.raises(ValidationError):
        rounds_service.create_round(
            db, recruitment_cycle_id=cycle.id, name="Bad", metrics=[{"name": "a", "weight": 0.5}]
        )
    assert db.query(RecruitmentRound).count() == 0


def test_list_rounds_ordered(db):
    cycle = make_cycle(db, make_org(db))
    make_round(db, cycle, 2, name="C")
    make_round(db, cycle, 0, name="A", metrics=[("m", 1.0)])
    make_round(db, cycle, 1, name="B")
    listed = rounds_service.list_rounds(db, cycle.id)
    assert [r["name"] for r in listed] == ["A", "B", "C"]
    assert listed[0]["metrics"][0]["weight"] == 1.0


def test_delete_round_resequences_later_rounds(db):
    cycle = make_cycle(db, make_org(db))
    make_round(db, cycle, 0, name="R0")
    doomed = make_round(db, cycle, 1, name="R1", metrics=[("m", 1.0)])
    make_round(db, cycle, 2, name="R2")
    make_round(db, cycle, 3, name="R3")

    result = rounds_service.delete_round(db, doomed.id)
    assert result == {"success": True, "resequenced": 2}
    db.expire_all()
    assert _sort_orders(db, cycle) == [("R0", 0), ("R2", 1), ("R3", 2)]
    assert db.query(Metric).filter(Metric.recruitment_round_id == doomed.id).count() == 0


def test_delete_round_leaves_other_cycles_alone(db):
    org = make_org(db)
    cycle = make_cycle(db, org)
    other = make_cycle(db, org, name="Spring")
    doomed = make_round(db, cycle, 0)
    make_round(db, other, 1, name="Other")
    rounds_service.delete_round(db, doomed.id)
    db.expire_all()
    assert _sort_orders(db, other) == [("Other", 1)]


def test_delete_round_blocked_by_applicants(db):
    env = setup_scoring_environment(db)
    with pytest.raises(ConflictError):
        rounds_service.delete_round(db, env["round"].id)


def test_delete_round_blocked_by_anonymous_readings(db):
    cycle = make_cycle(db, make_org(db))
    rnd = make_round(db, cycle, 0)
    db.add(AnonymousReading(recruitment_round_id=rnd.id, slug="abc123"))
    db.commit()
    with pytest.raises(ConflictError):
        rounds_service.delete_round(db, rnd.id)


def test_delete_round_with_empty_session(db):
    env = setup_scoring_environment(db)
    db.add(DelibsSession(recruitment_round_id=env["next_round"].id, status="open"))
    db.commit()
    rounds_service.delete_round(db, env["next_round"].id)
    assert db.query(DelibsSession).count() == 0


def test_delete_applicant_cascades(db):
    env = setup_scoring_environment(db)
    scoring_service.submit_scores(
        db,
        applicant_id=env["applicant"].id,
        recruitment_round_id=env["round"].id,
        user_id=env["user"].id,
        entries=[{"metric_id": mid, "score_value": 3} for mid in env["metric_ids"]],
    )
    session = DelibsSession(recruitment_round_id=env["round"].id, status="open")
    db.add(session)
    db.flush()
    db.add(DelibsVote(
        delibs_session_id=session.id,
        applicant_round_id=env["applicant_round"].id,
        voter_user_id=env["user"].id,
        vote_value=5,
    ))
    db.add(Comment(applicant_round_id=env["applicant_round"].id, user_id=env["user"].id, comment_text="Strong"))
    db.commit()

    assert rounds_service.delete_applicant(db, env["applicant"].id) is True
    assert db.query(Applicant).count() == 0
    assert db.query(ApplicantRound).count() == 0
    assert db.query(Score).count() == 0
    assert db.query(Comment).count() == 0
    assert db.query(DelibsVote).count() == 0


def test_delete_unknown_applicant(db):
    with pytest.raises(NotFoundError):
        rounds_service.delete_applicant(db, 12345)


def test_cycle_delete_requires_archive_and_empty(db):
    org = make_org(db)
    cycle = make_cycle(db, org)
    with pytest.raises(ConflictError):
        rounds_service.delete_cycle(db, cycle.id)

    rounds_service.archive_cycle(db, cycle.id, True)
    rnd = make_round(db, cycle, 0)
    with pytest.raises(ConflictError):
        rounds_service.delete_cycle(db, cycle.id)

    rounds_service.delete_round(db, rnd.id)
    applicant = make_applicant(db, cycle)
    with pytest.raises(ConflictError):
        rounds_service.delete_cycle(db, cycle.id)

    rounds_service.delete_applicant(db, applicant.id)
    assert rounds_service.delete_cycle(db, cycle.id) is True
    assert db.query(RecruitmentCycle).count() == 0


def test_archive_toggle(db):
    cycle = make_cycle(db, make_org(db))
    assert rounds_service.archive_cycle(db, cycle.id, True)["archived"] is True
    assert rounds_service.archive_cycle(db, cycle.id, False)["archived"] is False


def test_create_and_list_cycles(db):
    org = make_org(db)
    other_org = make_org(db)
    make_cycle(db, other_org, name="Elsewhere")

    created = rounds_service.create_cycle(db, organization_id=org.id, name="  Spring 2027 ")
    assert created["name"] == "Spring 2027"
    assert created["organization_id"] == org.id
    assert created["archived"] is False
    archived = rounds_service.create_cycle(db, organization_id=org.id, name="Fall 2026")
    rounds_service.archive_cycle(db, archived["id"])

    listed = rounds_service.list_cycles(db, org.id)
    assert sorted(c["name"] for c in listed) == ["Fall 2026", "Spring 2027"]
    active = rounds_service.list_cycles(db, org.id, include_archived=False)
    assert [c["name"] for c in active] == ["Spring 2027"]


def test_create_cycle_validation(db):
    org = make_org(db)
    with pytest.raises(ValidationError):
        rounds_service.create_cycle(db, organization_id=org.id, name="   ")
    with pytest.raises(NotFoundError):
        rounds_service.create_cycle(db, organization_id=org.id + 100, name="Ghost")
    assert db.query(RecruitmentCycle).count() == 0


def test_failed_round_delete_rolls_back_resequencing(db, monkeypatch):
    cycle = make_cycle(db, make_org(db))
    make_round(db, cycle, 0, name="R0")
    doomed = make_round(db, cycle, 1, name="R1", metrics=[("m", 1.0)])
    make_round(db, cycle, 2, name="R2")
    make_round(db, cycle, 3, name="R3")
    fail_commits(monkeypatch, db)

    with pytest.raises(StoreError):
        rounds_service.delete_round(db, doomed.id)

    assert _sort_orders(db, cycle) == [("R0", 0), ("R1", 1), ("R2", 2), ("R3", 3)]
    assert db.query(Metric).filter(Metric.recruitment_round_id == doomed.id).count() == 1


def test_failed_applicant_delete_keeps_rows(db, monkeypatch):
    env = setup_scoring_environment(db)
    fail_commits(monkeypatch, db)
    with pytest.raises(StoreError):
        rounds_service.delete_applicant(db, env["applicant"].id)
    assert db.query(Applicant).count() == 1
    assert db.query(ApplicantRound).count() == 1
