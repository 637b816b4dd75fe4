import os
# Override DATABASE_URL before any app imports to avoid PostgreSQL driver requirement
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["WEIGHTED_SCORE_MODE"] = "mean_of_submissions"

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from recruitflow.platform.database import Base, get_db
from recruitflow.main import app
from recruitflow.models.applicant import STATUS_IN_PROGRESS, Applicant, ApplicantRound
from recruitflow.models.organization import ROLE_MEMBER, Organization, OrganizationUser
from recruitflow.models.recruitment import Metric, RecruitmentCycle, RecruitmentRound
from recruitflow.models.user import User

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Enable foreign key support for SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


# ---------------------------------------------------------------------------
# Factory helpers: create test entities quickly and consistently
# ---------------------------------------------------------------------------

_counter = 0

def _unique_id() -> str:
    global _counter
    _counter += 1
    return f"{_counter}-{uuid.uuid4().hex[:8]}"


def make_org(db, name=None):
    org = Organization(name=name or f"Org-{_unique_id()}")
    db.add(org)
    db.commit()
    db.refresh(org)
    return org


def make_user(db, org=None, role=ROLE_MEMBER, full_name="Test User", email=None):
    """Create a user, optionally as a member of ``org`` with ``role``."""
    user = User(email=email or f"user-{_unique_id()}@test.com", full_name=full_name)
    db.add(user)
    db.flush()
    if org is not None:
        db.add(OrganizationUser(organization_id=org.id, user_id=user.id, role=role))
    db.commit()
    db.refresh(user)
    return user


def make_cycle(db, org, name="Fall Rush", archived=False):
    cycle = RecruitmentCycle(organization_id=org.id, name=name, archived=archived)
    db.add(cycle)
    db.commit()
    db.refresh(cycle)
    return cycle


def make_round(db, cycle, sort_order, name=None, metrics=()):
    """Create a round directly, bypassing sort_order assignment.

    ``metrics`` is a sequence of (name, weight) pairs.
    """
    rnd = RecruitmentRound(
        recruitment_cycle_id=cycle.id,
        name=name or f"Round {sort_order}",
        sort_order=sort_order,
    )
    db.add(rnd)
    db.flush()
    for metric_name, weight in metrics:
        db.add(Metric(recruitment_round_id=rnd.id, name=metric_name, weight=weight))
    db.commit()
    db.refresh(rnd)
    return rnd


def make_applicant(db, cycle, name="Jane Doe", headshot_url=None):
    applicant = Applicant(
        recruitment_cycle_id=cycle.id,
        name=name,
        email=f"applicant-{_unique_id()}@test.com",
        headshot_url=headshot_url,
        data={"major": "CS"},
    )
    db.add(applicant)
    db.commit()
    db.refresh(applicant)
    return applicant


def make_applicant_round(db, applicant, rnd, status=STATUS_IN_PROGRESS):
    ar = ApplicantRound(applicant_id=applicant.id, recruitment_round_id=rnd.id, status=status)
    db.add(ar)
    db.commit()
    db.refresh(ar)
    return ar


def metric_ids(db, rnd):
    rows = db.query(Metric).filter(Metric.recruitment_round_id == rnd.id).order_by(Metric.id.asc()).all()
    return [m.id for m in rows]


def user_headers(user):
    return {"X-User-Id": str(user.id)}


def setup_scoring_environment(db, role=ROLE_MEMBER, metrics=(("Leadership", 0.6), ("Fit", 0.4))):
    """Org, member, cycle with two rounds, and one applicant placed in round 0.

    Returns a dict with every entity.
    """
    org = make_org(db)
    user = make_user(db, org, role=role)
    cycle = make_cycle(db, org)
    first = make_round(db, cycle, 0, name="Interview", metrics=metrics)
    second = make_round(db, cycle, 1, name="Final")
    applicant = make_applicant(db, cycle)
    ar = make_applicant_round(db, applicant, first)
    return {
        "org": org,
        "user": user,
        "cycle": cycle,
        "round": first,
        "next_round": second,
        "applicant": applicant,
        "applicant_round": ar,
        "metric_ids": metric_ids(db, first),
    }


def fail_commits(monkeypatch, db):
    """Make ``db.commit`` flush pending work and then fail like a dropped connection."""

    def _commit():
        db.flush()
        raise OperationalError("COMMIT", {}, Exception("server closed the connection unexpectedly"))

    monkeypatch.setattr(db, "commit", _commit)
