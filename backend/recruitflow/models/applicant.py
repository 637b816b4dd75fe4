from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..platform.database import Base

STATUS_IN_PROGRESS = "in_progress"
STATUS_MAYBE = "maybe"
STATUS_ACCEPTED = "accepted"
STATUS_REJECTED = "rejected"
APPLICANT_ROUND_STATUSES = (STATUS_IN_PROGRESS, STATUS_MAYBE, STATUS_ACCEPTED, STATUS_REJECTED)


class Applicant(Base):
    __tablename__ = "applicants"

    id = Column(Integer, primary_key=True, index=True)
    recruitment_cycle_id = Column(Integer, ForeignKey("recruitment_cycles.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    headshot_url = Column(String, nullable=True)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    cycle = relationship("RecruitmentCycle", back_populates="applicants")
    applicant_rounds = relationship("ApplicantRound", back_populates="applicant")


class ApplicantRound(Base):
    __tablename__ = "applicant_rounds"
    __table_args__ = (
        UniqueConstraint("applicant_id", "recruitment_round_id", name="uq_applicant_round"),
    )

    id = Column(Integer, primary_key=True, index=True)
    applicant_id = Column(Integer, ForeignKey("applicants.id"), index=True, nullable=False)
    recruitment_round_id = Column(Integer, ForeignKey("recruitment_rounds.id"), index=True, nullable=False)
    status = Column(String, default=STATUS_IN_PROGRESS, nullable=False)
    weighted_score = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    applicant = relationship("Applicant", back_populates="applicant_rounds")
    round = relationship("RecruitmentRound", back_populates="applicant_rounds")
    scores = relationship("Score", back_populates="applicant_round")
    comments = relationship("Comment", back_populates="applicant_round")


class Score(Base):
    __tablename__ = "scores"

    id = Column(Integer, primary_key=True, index=True)
    applicant_round_id = Column(Integer, ForeignKey("applicant_rounds.id"), index=True, nullable=False)
    metric_id = Column(Integer, ForeignKey("metrics.id"), index=True, nullable=False)
    score_value = Column(Float, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    # Legacy rows may have no submission id; they group by created_at instead.
    submission_id = Column(String(36), index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    applicant_round = relationship("ApplicantRound", back_populates="scores")
    metric = relationship("Metric")
    user = relationship("User")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    applicant_round_id = Column(Integer, ForeignKey("applicant_rounds.id"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    comment_text = Column(Text, nullable=False)
    source = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    applicant_round = relationship("ApplicantRound", back_populates="comments")
    user = relationship("User")
