from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..platform.database import Base


class RecruitmentCycle(Base):
    __tablename__ = "recruitment_cycles"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    archived = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    organization = relationship("Organization", back_populates="recruitment_cycles")
    rounds = relationship(
        "RecruitmentRound",
        back_populates="cycle",
        order_by="RecruitmentRound.sort_order",
    )
    applicants = relationship("Applicant", back_populates="cycle")


class RecruitmentRound(Base):
    __tablename__ = "recruitment_rounds"

    id = Column(Integer, primary_key=True, index=True)
    recruitment_cycle_id = Column(Integer, ForeignKey("recruitment_cycles.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    # Gaps allowed; duplicates are not rejected here.
    sort_order = Column(Integer, nullable=True, index=True)
    column_order = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    cycle = relationship("RecruitmentCycle", back_populates="rounds")
    metrics = relationship("Metric", back_populates="round", order_by="Metric.id")
    applicant_rounds = relationship("ApplicantRound", back_populates="round")


class Metric(Base):
    __tablename__ = "metrics"

    id = Column(Integer, primary_key=True, index=True)
    recruitment_round_id = Column(Integer, ForeignKey("recruitment_rounds.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    weight = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    round = relationship("RecruitmentRound", back_populates="metrics")


class AnonymousReading(Base):
    __tablename__ = "anonymous_readings"

    id = Column(Integer, primary_key=True, index=True)
    recruitment_round_id = Column(Integer, ForeignKey("recruitment_rounds.id"), index=True, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    # Applicant data keys hidden from readers.
    omitted_fields = Column(JSON, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    round = relationship("RecruitmentRound")
