"""initial recruitment schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        *_timestamps(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f("ix_organizations_id"), "organizations", ["id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        *_timestamps(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"])
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "organization_users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="Member"),
        *_timestamps(),
        sa.UniqueConstraint("organization_id", "user_id", name="uq_organization_user"),
    )
    op.create_index(op.f("ix_organization_users_id"), "organization_users", ["id"])
    op.create_index(op.f("ix_organization_users_organization_id"), "organization_users", ["organization_id"])
    op.create_index(op.f("ix_organization_users_user_id"), "organization_users", ["user_id"])

    op.create_table(
        "recruitment_cycles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index(op.f("ix_recruitment_cycles_id"), "recruitment_cycles", ["id"])
    op.create_index(op.f("ix_recruitment_cycles_organization_id"), "recruitment_cycles", ["organization_id"])

    op.create_table(
        "recruitment_rounds",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recruitment_cycle_id", sa.Integer(), sa.ForeignKey("recruitment_cycles.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=True),
        sa.Column("column_order", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_recruitment_rounds_id"), "recruitment_rounds", ["id"])
    op.create_index(op.f("ix_recruitment_rounds_recruitment_cycle_id"), "recruitment_rounds", ["recruitment_cycle_id"])
    op.create_index(op.f("ix_recruitment_rounds_sort_order"), "recruitment_rounds", ["sort_order"])

    op.create_table(
        "metrics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recruitment_round_id", sa.Integer(), sa.ForeignKey("recruitment_rounds.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f("ix_metrics_id"), "metrics", ["id"])
    op.create_index(op.f("ix_metrics_recruitment_round_id"), "metrics", ["recruitment_round_id"])

    op.create_table(
        "anonymous_readings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recruitment_round_id", sa.Integer(), sa.ForeignKey("recruitment_rounds.id"), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("omitted_fields", sa.JSON(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_anonymous_readings_id"), "anonymous_readings", ["id"])
    op.create_index(op.f("ix_anonymous_readings_recruitment_round_id"), "anonymous_readings", ["recruitment_round_id"])
    op.create_index(op.f("ix_anonymous_readings_slug"), "anonymous_readings", ["slug"], unique=True)

    op.create_table(
        "applicants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recruitment_cycle_id", sa.Integer(), sa.ForeignKey("recruitment_cycles.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("headshot_url", sa.String(), nullable=True),
        sa.Column("data", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_applicants_id"), "applicants", ["id"])
    op.create_index(op.f("ix_applicants_recruitment_cycle_id"), "applicants", ["recruitment_cycle_id"])

    op.create_table(
        "applicant_rounds",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("applicant_id", sa.Integer(), sa.ForeignKey("applicants.id"), nullable=False),
        sa.Column("recruitment_round_id", sa.Integer(), sa.ForeignKey("recruitment_rounds.id"), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="in_progress"),
        sa.Column("weighted_score", sa.Float(), nullable=True),
        *_timestamps(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.UniqueConstraint("applicant_id", "recruitment_round_id", name="uq_applicant_round"),
    )
    op.create_index(op.f("ix_applicant_rounds_id"), "applicant_rounds", ["id"])
    op.create_index(op.f("ix_applicant_rounds_applicant_id"), "applicant_rounds", ["applicant_id"])
    op.create_index(op.f("ix_applicant_rounds_recruitment_round_id"), "applicant_rounds", ["recruitment_round_id"])

    op.create_table(
        "scores",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("applicant_round_id", sa.Integer(), sa.ForeignKey("applicant_rounds.id"), nullable=False),
        sa.Column("metric_id", sa.Integer(), sa.ForeignKey("metrics.id"), nullable=False),
        sa.Column("score_value", sa.Float(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("submission_id", sa.String(length=36), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_scores_id"), "scores", ["id"])
    op.create_index(op.f("ix_scores_applicant_round_id"), "scores", ["applicant_round_id"])
    op.create_index(op.f("ix_scores_metric_id"), "scores", ["metric_id"])
    op.create_index(op.f("ix_scores_user_id"), "scores", ["user_id"])
    op.create_index(op.f("ix_scores_submission_id"), "scores", ["submission_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("applicant_round_id", sa.Integer(), sa.ForeignKey("applicant_rounds.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("comment_text", sa.Text(), nullable=False),
        sa.Column("source", sa.String(), nullable=True),
        *_timestamps(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f("ix_comments_id"), "comments", ["id"])
    op.create_index(op.f("ix_comments_applicant_round_id"), "comments", ["applicant_round_id"])
    op.create_index(op.f("ix_comments_user_id"), "comments", ["user_id"])

    op.create_table(
        "delibs_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recruitment_round_id", sa.Integer(), sa.ForeignKey("recruitment_rounds.id"), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="open"),
        sa.Column("locked_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("recruitment_round_id", name="uq_delibs_session_round"),
    )
    op.create_index(op.f("ix_delibs_sessions_id"), "delibs_sessions", ["id"])
    op.create_index(op.f("ix_delibs_sessions_recruitment_round_id"), "delibs_sessions", ["recruitment_round_id"])

    op.create_table(
        "delibs_votes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("delibs_session_id", sa.Integer(), sa.ForeignKey("delibs_sessions.id"), nullable=False),
        sa.Column("applicant_round_id", sa.Integer(), sa.ForeignKey("applicant_rounds.id"), nullable=False),
        sa.Column("voter_user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("vote_value", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.UniqueConstraint(
            "delibs_session_id", "applicant_round_id", "voter_user_id", name="uq_delibs_vote_voter"
        ),
    )
    op.create_index(op.f("ix_delibs_votes_id"), "delibs_votes", ["id"])
    op.create_index(op.f("ix_delibs_votes_delibs_session_id"), "delibs_votes", ["delibs_session_id"])
    op.create_index(op.f("ix_delibs_votes_applicant_round_id"), "delibs_votes", ["applicant_round_id"])
    op.create_index(op.f("ix_delibs_votes_voter_user_id"), "delibs_votes", ["voter_user_id"])


def downgrade() -> None:
    for table in (
        "delibs_votes",
        "delibs_sessions",
        "comments",
        "scores",
        "applicant_rounds",
        "applicants",
        "anonymous_readings",
        "metrics",
        "recruitment_rounds",
        "recruitment_cycles",
        "organization_users",
        "users",
        "organizations",
    ):
        op.drop_table(table)
