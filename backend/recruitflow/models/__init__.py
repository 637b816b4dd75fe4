from .user import User
from .organization import Organization, OrganizationUser
from .recruitment import AnonymousReading, Metric, RecruitmentCycle, RecruitmentRound
from .applicant import Applicant, ApplicantRound, Comment, Score
from .delibs import DelibsSession, DelibsVote

__all__ = [
    "User",
    "Organization",
    "OrganizationUser",
    "RecruitmentCycle",
    "RecruitmentRound",
    "Metric",
    "AnonymousReading",
    "Applicant",
    "ApplicantRound",
    "Score",
    "Comment",
    "DelibsSession",
    "DelibsVote",
]
