"""Initial road-construction tracking schema.

Revision ID: 20240301_initial
Revises:
Create Date: 2024-03-01 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20240301_initial"
down_revision = None
branch_labels = None
depends_on = None

USER_ROLE = (
    "ADMIN",
    "MANAGER",
    "SUPERVISOR",
    "ENGINEER",
    "QA_QC_OFFICER",
    "PROGRAM_MANAGER",
    "SITE_ENGINEER",
)
PROJECT_STATUS = ("PLANNING", "TENDERING", "IN_PROGRESS", "ON_HOLD", "COMPLETED", "CANCELLED")
SECTION_STATUS = ("NOT_STARTED", "IN_PROGRESS", "COMPLETED")
CONTRACT_STATUS = ("ACTIVE", "COMPLETED", "SUSPENDED", "TERMINATED")
PHASES = ("DRAIN", "BASKET", "SEALING")
SIDES = ("LEFT", "RIGHT", "CENTER")
POINT_STATUS = ("PENDING", "IN_PROGRESS", "COMPLETED", "REVIEWED")
COMPLIANCE = ("COMPLIANT", "NON_COMPLIANT", "PENDING", "REWORK_NEEDED")
QA_QC = ("PASS", "FAIL", "CONDITIONAL_PASS", "REWORK_REQUIRED")
SCHEDULE = ("AHEAD", "ON_TRACK", "BEHIND")
MILESTONE_STATUS = ("NOT_STARTED", "IN_PROGRESS", "COMPLETED", "DELAYED")
FUNDING_STATUS = ("ON_TRACK", "AT_RISK", "DELAYED", "COMPLETED")


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.Enum(*USER_ROLE, name="userrole"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "provinces",
        *_base_columns(),
        sa.Column("name", sa.String(length=120), nullable=False, unique=True),
        sa.Column("code", sa.String(length=10), nullable=False, unique=True),
        sa.Column("region", sa.String(length=50), nullable=False),
        sa.Column("capital", sa.String(length=120), nullable=True),
        sa.Column("population", sa.Integer(), nullable=True),
    )
    op.create_index("ix_provinces_region", "provinces", ["region"], unique=False)

    op.create_table(
        "contractors",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("license_number", sa.String(length=100), nullable=True, unique=True),
        sa.Column("contact_person", sa.String(length=200), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("certification_level", sa.String(length=50), nullable=True),
        sa.Column("specializations", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )

    op.create_table(
        "lookup_values",
        *_base_columns(),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("code", sa.String(length=100), nullable=False),
        sa.Column("label", sa.String(length=200), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("category", "code", name="uq_lookup_category_code"),
    )
    op.create_index("ix_lookup_values_category", "lookup_values", ["category"], unique=False)

    op.create_table(
        "audit_logs",
        *_base_columns(),
        sa.Column("actor", sa.String(length=100), nullable=False),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("entity", sa.String(length=100), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("data_json", sa.JSON(), nullable=False),
        sa.Column("at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "projects",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("project_code", sa.String(length=50), nullable=True, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("province_id", sa.Integer(), sa.ForeignKey("provinces.id"), nullable=True),
        sa.Column("status", sa.Enum(*PROJECT_STATUS, name="projectstatus"), nullable=False),
        sa.Column("total_distance", sa.Float(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("sponsor", sa.String(length=200), nullable=True),
        sa.Column("team_lead", sa.String(length=200), nullable=True),
        sa.Column("project_type", sa.String(length=100), nullable=True),
        sa.Column("overall_progress", sa.Float(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.CheckConstraint(
            "overall_progress >= 0 AND overall_progress <= 100",
            name="ck_project_overall_progress_range",
        ),
    )
    op.create_index("ix_projects_province_id", "projects", ["province_id"], unique=False)

    op.create_table(
        "project_sections",
        *_base_columns(),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("section_name", sa.String(length=200), nullable=False),
        sa.Column("start_km", sa.Float(), nullable=False),
        sa.Column("end_km", sa.Float(), nullable=False),
        sa.Column("length", sa.Float(), nullable=False),
        sa.Column("progress_percentage", sa.Float(), nullable=False),
        sa.Column("status", sa.Enum(*SECTION_STATUS, name="sectionstatus"), nullable=False),
        sa.Column("budget_allocated", sa.Numeric(18, 2), nullable=False),
        sa.Column("budget_spent", sa.Numeric(18, 2), nullable=False),
        sa.Column("assigned_contractor_id", sa.Integer(), sa.ForeignKey("contractors.id"), nullable=True),
        sa.CheckConstraint("length >= 0", name="ck_section_length_non_negative"),
        sa.CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="ck_section_progress_range",
        ),
    )
    op.create_index("ix_project_sections_project_id", "project_sections", ["project_id"], unique=False)
    op.create_index(
        "ix_project_sections_assigned_contractor_id",
        "project_sections",
        ["assigned_contractor_id"],
        unique=False,
    )

    op.create_table(
        "contractor_projects",
        *_base_columns(),
        sa.Column("contractor_id", sa.Integer(), sa.ForeignKey("contractors.id"), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("contract_value", sa.Numeric(18, 2), nullable=True),
        sa.Column("contract_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("contract_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("performance_bond", sa.Numeric(18, 2), nullable=True),
        sa.Column("contract_status", sa.Enum(*CONTRACT_STATUS, name="contractstatus"), nullable=False),
        sa.Column("performance_rating", sa.Float(), nullable=True),
        sa.UniqueConstraint("contractor_id", "project_id", name="uq_contractor_project"),
        sa.CheckConstraint(
            "performance_rating IS NULL OR (performance_rating >= 0 AND performance_rating <= 5)",
            name="ck_contractor_project_rating_range",
        ),
    )
    op.create_index("ix_contractor_projects_contractor_id", "contractor_projects", ["contractor_id"], unique=False)
    op.create_index("ix_contractor_projects_project_id", "contractor_projects", ["project_id"], unique=False)

    op.create_table(
        "user_project_access",
        *_base_columns(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("access_level", sa.String(length=50), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("user_id", "project_id", name="uq_user_project_access"),
    )
    op.create_index("ix_user_project_access_user_id", "user_project_access", ["user_id"], unique=False)
    op.create_index("ix_user_project_access_project_id", "user_project_access", ["project_id"], unique=False)

    op.create_table(
        "gps_points",
        *_base_columns(),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("section_id", sa.Integer(), sa.ForeignKey("project_sections.id"), nullable=True),
        sa.Column("contractor_id", sa.Integer(), sa.ForeignKey("contractors.id"), nullable=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("elevation", sa.Float(), nullable=True),
        sa.Column("accuracy", sa.Float(), nullable=True),
        sa.Column("phase", sa.Enum(*PHASES, name="constructionphase"), nullable=False),
        sa.Column("side", sa.Enum(*SIDES, name="roadside"), nullable=False),
        sa.Column("distance", sa.Float(), nullable=False),
        sa.Column("status", sa.Enum(*POINT_STATUS, name="pointstatus"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_gps_points_project_timestamp", "gps_points", ["project_id", "timestamp"], unique=False)

    op.create_table(
        "quality_reports",
        *_base_columns(),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("section_id", sa.Integer(), sa.ForeignKey("project_sections.id"), nullable=True),
        sa.Column("reported_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("report_type", sa.String(length=100), nullable=False),
        sa.Column("test_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("material_type", sa.String(length=100), nullable=True),
        sa.Column("test_results", sa.JSON(), nullable=False),
        sa.Column("spec_compliance", sa.Enum(*COMPLIANCE, name="speccompliance"), nullable=False),
        sa.Column(
            "environmental_compliance",
            sa.Enum(*COMPLIANCE, name="environmentalcompliance"),
            nullable=False,
        ),
        sa.Column("social_compliance", sa.Enum(*COMPLIANCE, name="socialcompliance"), nullable=False),
        sa.Column("qa_qc_status", sa.Enum(*QA_QC, name="qaqcstatus"), nullable=False),
        sa.Column("deficiencies", sa.JSON(), nullable=False),
        sa.Column("corrective_actions", sa.JSON(), nullable=False),
        sa.Column("inspection_findings", sa.Text(), nullable=True),
        sa.Column("recommendations", sa.Text(), nullable=True),
        sa.Column("follow_up_required", sa.Boolean(), nullable=False),
        sa.Column("follow_up_date", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_quality_reports_project_id", "quality_reports", ["project_id"], unique=False)
    op.create_index("ix_quality_reports_section_id", "quality_reports", ["section_id"], unique=False)
    op.create_index("ix_quality_reports_test_date", "quality_reports", ["test_date"], unique=False)

    op.create_table(
        "progress_reports",
        *_base_columns(),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("section_id", sa.Integer(), sa.ForeignKey("project_sections.id"), nullable=True),
        sa.Column("reported_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("report_type", sa.String(length=100), nullable=False),
        sa.Column("report_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("previous_progress", sa.Float(), nullable=False),
        sa.Column("current_progress", sa.Float(), nullable=False),
        sa.Column("progress_delta", sa.Float(), nullable=False),
        sa.Column("planned_progress", sa.Float(), nullable=False),
        sa.Column("schedule_status", sa.Enum(*SCHEDULE, name="schedulestatus"), nullable=False),
        sa.Column("delay_reason", sa.Text(), nullable=True),
        sa.Column("works_completed", sa.JSON(), nullable=False),
        sa.Column("weather_conditions", sa.String(length=200), nullable=True),
        sa.Column("site_conditions", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_progress_reports_project_id", "progress_reports", ["project_id"], unique=False)
    op.create_index("ix_progress_reports_section_id", "progress_reports", ["section_id"], unique=False)
    op.create_index("ix_progress_reports_report_date", "progress_reports", ["report_date"], unique=False)

    op.create_table(
        "milestones",
        *_base_columns(),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("milestone_name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("planned_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actual_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.Enum(*MILESTONE_STATUS, name="milestonestatus"), nullable=False),
    )
    op.create_index("ix_milestones_project_id", "milestones", ["project_id"], unique=False)

    op.create_table(
        "milestone_updates",
        *_base_columns(),
        sa.Column("milestone_id", sa.Integer(), sa.ForeignKey("milestones.id"), nullable=False),
        sa.Column("updated_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column(
            "previous_status",
            sa.Enum(*MILESTONE_STATUS, name="milestonepreviousstatus"),
            nullable=False,
        ),
        sa.Column("new_status", sa.Enum(*MILESTONE_STATUS, name="milestonenewstatus"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_milestone_updates_milestone_id", "milestone_updates", ["milestone_id"], unique=False)

    op.create_table(
        "project_fundings",
        *_base_columns(),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("funding_source", sa.String(length=100), nullable=False),
        sa.Column("source_name", sa.String(length=200), nullable=False),
        sa.Column("budget_allocated", sa.Numeric(18, 2), nullable=False),
        sa.Column("funds_released", sa.Numeric(18, 2), nullable=False),
        sa.Column("funds_utilized", sa.Numeric(18, 2), nullable=False),
        sa.Column("funds_committed", sa.Numeric(18, 2), nullable=False),
        sa.Column("pending_claims", sa.Numeric(18, 2), nullable=False),
        sa.Column("payment_certificates", sa.Integer(), nullable=False),
        sa.Column("utilization_rate", sa.Float(), nullable=False),
        sa.Column("status", sa.Enum(*FUNDING_STATUS, name="fundingstatus"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_project_fundings_project_id", "project_fundings", ["project_id"], unique=False)
    op.create_index("ix_project_fundings_funding_source", "project_fundings", ["funding_source"], unique=False)
    op.create_index("ix_project_fundings_created_at", "project_fundings", ["created_at"], unique=False)

    op.create_table(
        "funding_transactions",
        *_base_columns(),
        sa.Column("funding_id", sa.Integer(), sa.ForeignKey("project_fundings.id"), nullable=False),
        sa.Column("transaction_type", sa.String(length=50), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("transaction_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reference_number", sa.String(length=100), nullable=True),
        sa.Column("approved_by", sa.String(length=200), nullable=True),
    )
    op.create_index(
        "ix_funding_transactions_funding_id", "funding_transactions", ["funding_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_funding_transactions_funding_id", table_name="funding_transactions")
    op.drop_table("funding_transactions")
    op.drop_index("ix_project_fundings_created_at", table_name="project_fundings")
    op.drop_index("ix_project_fundings_funding_source", table_name="project_fundings")
    op.drop_index("ix_project_fundings_project_id", table_name="project_fundings")
    op.drop_table("project_fundings")
    op.drop_index("ix_milestone_updates_milestone_id", table_name="milestone_updates")
    op.drop_table("milestone_updates")
    op.drop_index("ix_milestones_project_id", table_name="milestones")
    op.drop_table("milestones")
    op.drop_index("ix_progress_reports_report_date", table_name="progress_reports")
    op.drop_index("ix_progress_reports_section_id", table_name="progress_reports")
    op.drop_index("ix_progress_reports_project_id", table_name="progress_reports")
    op.drop_table("progress_reports")
    op.drop_index("ix_quality_reports_test_date", table_name="quality_reports")
    op.drop_index("ix_quality_reports_section_id", table_name="quality_reports")
    op.drop_index("ix_quality_reports_project_id", table_name="quality_reports")
    op.drop_table("quality_reports")
    op.drop_index("ix_gps_points_project_timestamp", table_name="gps_points")
    op.drop_table("gps_points")
    op.drop_index("ix_user_project_access_project_id", table_name="user_project_access")
    op.drop_index("ix_user_project_access_user_id", table_name="user_project_access")
    op.drop_table("user_project_access")
    op.drop_index("ix_contractor_projects_project_id", table_name="contractor_projects")
    op.drop_index("ix_contractor_projects_contractor_id", table_name="contractor_projects")
    op.drop_table("contractor_projects")
    op.drop_index("ix_project_sections_assigned_contractor_id", table_name="project_sections")
    op.drop_index("ix_project_sections_project_id", table_name="project_sections")
    op.drop_table("project_sections")
    op.drop_index("ix_projects_province_id", table_name="projects")
    op.drop_table("projects")
    op.drop_table("audit_logs")
    op.drop_index("ix_lookup_values_category", table_name="lookup_values")
    op.drop_table("lookup_values")
    op.drop_table("contractors")
    op.drop_index("ix_provinces_region", table_name="provinces")
    op.drop_table("provinces")
    op.drop_table("users")

    bind = op.get_bind()
    for name in (
        "fundingstatus",
        "milestonenewstatus",
        "milestonepreviousstatus",
        "milestonestatus",
        "schedulestatus",
        "qaqcstatus",
        "socialcompliance",
        "environmentalcompliance",
        "speccompliance",
        "pointstatus",
        "roadside",
        "constructionphase",
        "contractstatus",
        "sectionstatus",
        "projectstatus",
        "userrole",
    ):
        sa.Enum(name=name).drop(bind, checkfirst=True)
