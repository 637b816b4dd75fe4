"""Seed the RecruitFlow database with a demo cycle.

Usage:
    PYTHONPATH=backend python scripts/seed_data.py
"""
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from recruitflow.platform.database import SessionLocal, engine, Base
from recruitflow.components.rounds import service as rounds_service
from recruitflow.models import (
    Applicant,
    ApplicantRound,
    Organization,
    OrganizationUser,
    User,
)
from recruitflow.models.organization import ROLE_ADMIN, ROLE_MEMBER, ROLE_OWNER

ROUNDS = [
    ("Info Session", [("Engagement", 1.0)]),
    ("Group Interview", [("Leadership", 0.4), ("Teamwork", 0.35), ("Communication", 0.25)]),
    ("Final Interview", [("Fit", 0.5), ("Commitment", 0.5)]),
]

APPLICANTS = ["Avery Chen", "Blake Morgan", "Casey Rivera", "Devon Patel", "Emerson Lee", "Finley Brooks"]


def seed():
    # Create tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        # Check if already seeded
        if db.query(User).first():
            print("Database already seeded. Skipping.")
            return

        # 1. Organization and members
        org = Organization(name="Delta Sigma Demo")
        db.add(org)
        db.flush()

        people = [
            ("owner@demo.test", "Olivia Owner", ROLE_OWNER),
            ("admin@demo.test", "Adrian Admin", ROLE_ADMIN),
            ("member@demo.test", "Morgan Member", ROLE_MEMBER),
        ]
        for email, name, role in people:
            user = User(email=email, full_name=name)
            db.add(user)
            db.flush()
            db.add(OrganizationUser(organization_id=org.id, user_id=user.id, role=role))

        db.commit()

        # 2. Cycle
        cycle_id = rounds_service.create_cycle(db, organization_id=org.id, name="Fall 2026")["id"]

        # 3. Rounds with metric sets
        round_ids = []
        for name, metrics in ROUNDS:
            created = rounds_service.create_round(
                db,
                recruitment_cycle_id=cycle_id,
                name=name,
                metrics=[{"name": m, "weight": w} for m, w in metrics],
            )
            round_ids.append(created["id"])

        # 4. Applicants, all starting in the first round
        for name in APPLICANTS:
            applicant = Applicant(
                recruitment_cycle_id=cycle_id,
                name=name,
                email=f"{name.split()[0].lower()}@applicants.test",
                data={"year": "Sophomore"},
            )
            db.add(applicant)
            db.flush()
            db.add(ApplicantRound(applicant_id=applicant.id, recruitment_round_id=round_ids[0]))
        db.commit()

        print(f"Seeded org={org.id} cycle={cycle_id} rounds={round_ids} applicants={len(APPLICANTS)}")
        print("Use X-User-Id: 1 (Owner), 2 (Admin) or 3 (Member)")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
