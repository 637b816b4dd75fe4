from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..platform.database import Base

SESSION_OPEN = "open"
SESSION_LOCKED = "locked"


class DelibsSession(Base):
    __tablename__ = "delibs_sessions"
    __table_args__ = (
        UniqueConstraint("recruitment_round_id", name="uq_delibs_session_round"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recruitment_round_id = Column(Integer, ForeignKey("recruitment_rounds.id"), index=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(String, default=SESSION_OPEN, nullable=False)
    locked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    votes = relationship("DelibsVote", back_populates="session")


class DelibsVote(Base):
    __tablename__ = "delibs_votes"
    __table_args__ = (
        UniqueConstraint(
            "delibs_session_id",
            "applicant_round_id",
            "voter_user_id",
            name="uq_delibs_vote_voter",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    delibs_session_id = Column(Integer, ForeignKey("delibs_sessions.id"), index=True, nullable=False)
    applicant_round_id = Column(Integer, ForeignKey("applicant_rounds.id"), index=True, nullable=False)
    voter_user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    vote_value = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    session = relationship("DelibsSession", back_populates="votes")
