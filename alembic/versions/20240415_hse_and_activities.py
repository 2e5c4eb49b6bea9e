"""HSE incidents, construction activity catalogue and project activities.

Revision ID: 20240415_hse_activities
Revises: 20240301_initial
Create Date: 2024-04-15 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20240415_hse_activities"
down_revision = "20240301_initial"
branch_labels = None
depends_on = None

INCIDENT_SEVERITY = ("LOW", "MEDIUM", "HIGH", "CRITICAL")
INCIDENT_STATUS = ("REPORTED", "INVESTIGATING", "RESOLVED", "CLOSED")
ACTIVITY_PRIORITY = ("LOW", "MEDIUM", "HIGH", "URGENT")
ACTIVITY_STATUS = ("PLANNED", "IN_PROGRESS", "ON_HOLD", "COMPLETED")


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        # ADD VALUE cannot run inside a transaction block; SQLite stores roles as VARCHAR.
        with op.get_context().autocommit_block():
            op.execute("ALTER TYPE userrole ADD VALUE IF NOT EXISTS 'HSE_OFFICER'")

    op.create_table(
        "hse_incidents",
        *_base_columns(),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("section_id", sa.Integer(), sa.ForeignKey("project_sections.id"), nullable=True),
        sa.Column("reported_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("incident_type", sa.String(length=100), nullable=False),
        sa.Column("severity", sa.Enum(*INCIDENT_SEVERITY, name="incidentseverity"), nullable=False),
        sa.Column("status", sa.Enum(*INCIDENT_STATUS, name="incidentstatus"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("incident_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(length=300), nullable=False),
        sa.Column("persons_involved", sa.JSON(), nullable=False),
        sa.Column("root_cause", sa.Text(), nullable=True),
        sa.Column("investigation", sa.Text(), nullable=True),
        sa.Column("preventive_measures", sa.JSON(), nullable=False),
        sa.Column("closure_date", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_hse_incidents_project_id", "hse_incidents", ["project_id"], unique=False)
    op.create_index("ix_hse_incidents_incident_type", "hse_incidents", ["incident_type"], unique=False)
    op.create_index("ix_hse_incidents_incident_date", "hse_incidents", ["incident_date"], unique=False)

    op.create_table(
        "construction_activities",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
    )

    op.create_table(
        "project_activities",
        *_base_columns(),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("activity_id", sa.Integer(), sa.ForeignKey("construction_activities.id"), nullable=False),
        sa.Column("assigned_user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("priority", sa.Enum(*ACTIVITY_PRIORITY, name="activitypriority"), nullable=False),
        sa.Column("status", sa.Enum(*ACTIVITY_STATUS, name="activitystatus"), nullable=False),
        sa.Column("estimated_hours", sa.Float(), nullable=True),
        sa.Column("total_length", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.UniqueConstraint("project_id", "activity_id", name="uq_project_activity"),
    )
    op.create_index("ix_project_activities_project_id", "project_activities", ["project_id"], unique=False)
    op.create_index("ix_project_activities_activity_id", "project_activities", ["activity_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_project_activities_activity_id", table_name="project_activities")
    op.drop_index("ix_project_activities_project_id", table_name="project_activities")
    op.drop_table("project_activities")
    op.drop_table("construction_activities")
    op.drop_index("ix_hse_incidents_incident_date", table_name="hse_incidents")
    op.drop_index("ix_hse_incidents_incident_type", table_name="hse_incidents")
    op.drop_index("ix_hse_incidents_project_id", table_name="hse_incidents")
    op.drop_table("hse_incidents")

    bind = op.get_bind()
    for name in ("activitystatus", "activitypriority", "incidentstatus", "incidentseverity"):
        sa.Enum(name=name).drop(bind, checkfirst=True)
