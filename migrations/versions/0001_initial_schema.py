"""initial_schema

Creates the daily report schema:
  - sales_persons   identity facts, one-hop manager_id hierarchy
  - customers       master data, unique casefolded name key
  - daily_reports   one per (sales person, date), status check
  - visit_records   report CASCADE, customer RESTRICT
  - comments        report CASCADE

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade():
    op.create_table(
        "sales_persons",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("is_manager", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("manager_id", sa.Integer(), nullable=True,
                  comment="Direct manager; at most one, no cycles"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["manager_id"], ["sales_persons.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_sales_persons_manager_id", "sales_persons", ["manager_id"])

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(length=100), nullable=False),
        sa.Column("customer_name_key", sa.String(length=400), nullable=False,
                  comment="casefold(customer_name)"),
        sa.Column("address", sa.String(length=200), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("contact_person", sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("customer_name_key", name="uq_customers_name_key"),
    )

    op.create_table(
        "daily_reports",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sales_person_id", sa.Integer(), nullable=False,
                  comment="Owner; immutable after creation"),
        sa.Column("report_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("problem", sa.Text(), nullable=True),
        sa.Column("plan", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status IN ('draft', 'submitted', 'confirmed')", name="ck_daily_reports_status"),
        sa.ForeignKeyConstraint(["sales_person_id"], ["sales_persons.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sales_person_id", "report_date", name="uq_daily_reports_owner_date"),
    )
    op.create_index("ix_daily_reports_sales_person_id", "daily_reports", ["sales_person_id"])
    op.create_index("ix_daily_reports_status_date", "daily_reports", ["status", "report_date"])

    op.create_table(
        "visit_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("visit_time", sa.Time(), nullable=True),
        sa.Column("visit_purpose", sa.String(length=100), nullable=True),
        sa.Column("visit_content", sa.Text(), nullable=False),
        sa.Column("visit_result", sa.String(length=200), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["report_id"], ["daily_reports.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_visit_records_report_id", "visit_records", ["report_id"])
    op.create_index("ix_visit_records_customer_id", "visit_records", ["customer_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("sales_person_id", sa.Integer(), nullable=False,
                  comment="Author; always a manager at write time"),
        sa.Column("comment_text", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["report_id"], ["daily_reports.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sales_person_id"], ["sales_persons.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comments_report_id", "comments", ["report_id"])
    op.create_index("ix_comments_sales_person_id", "comments", ["sales_person_id"])


def downgrade():
    op.drop_table("comments")
    op.drop_table("visit_records")
    op.drop_table("daily_reports")
    op.drop_table("customers")
    op.drop_table("sales_persons")
