"""
Daily Sales Report Service
Daily report domain models.

Models:
    - DailyReport: one salesperson's activity record for one calendar date
    - VisitRecord: one customer visit attached to a report
    - Comment: a manager's annotation on a report

Ownership chain: SalesPerson -> DailyReport -> VisitRecord / Comment
VisitRecord -> Customer is a lookup reference only (ON DELETE RESTRICT).

Status lifecycle: draft -> submitted -> confirmed. The entity only states what
each status permits; who may move a report between statuses is decided by
``dailyreport.services.access_control``.
"""

import enum
from datetime import datetime, timezone

from dailyreport.models import db
from dailyreport.utils.helpers import format_visit_time


class ReportStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def content_locked(self) -> bool:
        """Confirmed reports no longer accept problem/plan/visit changes."""
        return self is ReportStatus.CONFIRMED

    @property
    def accepts_visits(self) -> bool:
        return self is not ReportStatus.CONFIRMED

    @property
    def deletable(self) -> bool:
        """Only drafts may be deleted; submitted and confirmed are protected."""
        return self is ReportStatus.DRAFT

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(s.value for s in cls)


STATUS_LABELS = {
    ReportStatus.DRAFT: "Draft",
    ReportStatus.SUBMITTED: "Submitted",
    ReportStatus.CONFIRMED: "Confirmed",
}

# Statuses the owner may write through the content create/update path.
OWNER_WRITABLE_STATUSES = frozenset({ReportStatus.DRAFT, ReportStatus.SUBMITTED})


def _utcnow():
    return datetime.now(timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════
#  DAILY REPORT
# ═══════════════════════════════════════════════════════════════════════════

class DailyReport(db.Model):
    """One salesperson's report for one calendar date."""

    __tablename__ = "daily_reports"
    __table_args__ = (
        db.UniqueConstraint("sales_person_id", "report_date", name="uq_daily_reports_owner_date"),
        db.CheckConstraint(
            "status IN ('draft', 'submitted', 'confirmed')", name="ck_daily_reports_status",
        ),
        db.Index("ix_daily_reports_status_date", "status", "report_date"),
    )

    id = db.Column(db.Integer, primary_key=True)
    sales_person_id = db.Column(
        db.Integer,
        db.ForeignKey("sales_persons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owner; immutable after creation",
    )
    report_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=ReportStatus.DRAFT.value)
    problem = db.Column(db.Text, nullable=True)
    plan = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    sales_person = db.relationship("SalesPerson", foreign_keys=[sales_person_id])
    visits = db.relationship(
        "VisitRecord",
        back_populates="report",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [VisitRecord.visit_time.is_(None), VisitRecord.visit_time, VisitRecord.id],
    )
    comments = db.relationship(
        "Comment",
        back_populates="report",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [Comment.created_at, Comment.id],
    )

    @property
    def status_enum(self) -> ReportStatus:
        return ReportStatus(self.status)

    def to_summary_dict(self, visit_count: int | None = None, comment_count: int | None = None):
        """List-row shape: header fields plus child counts."""
        status = self.status_enum
        return {
            "report_id": self.id,
            "report_date": self.report_date.isoformat(),
            "sales_person_id": self.sales_person_id,
            "sales_person_name": self.sales_person.name if self.sales_person else None,
            "status": status.value,
            "status_label": status.label,
            "visit_count": visit_count if visit_count is not None else len(self.visits),
            "comment_count": comment_count if comment_count is not None else len(self.comments),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_dict(self, include_children: bool = True):
        status = self.status_enum
        data = {
            "report_id": self.id,
            "report_date": self.report_date.isoformat(),
            "sales_person_id": self.sales_person_id,
            "sales_person_name": self.sales_person.name if self.sales_person else None,
            "status": status.value,
            "status_label": status.label,
            "problem": self.problem,
            "plan": self.plan,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_children:
            data["visits"] = [v.to_dict() for v in self.visits]
            data["comments"] = [c.to_dict() for c in self.comments]
        return data

    def __repr__(self):
        return f"<DailyReport {self.id}: {self.sales_person_id}@{self.report_date} {self.status}>"


# ═══════════════════════════════════════════════════════════════════════════
#  VISIT RECORD
# ═══════════════════════════════════════════════════════════════════════════

class VisitRecord(db.Model):
    """A customer visit. Lifecycle is owned entirely by its report."""

    __tablename__ = "visit_records"
    # visit ids are never reused, even after a full replace
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    report_id = db.Column(
        db.Integer,
        db.ForeignKey("daily_reports.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_id = db.Column(
        db.Integer,
        db.ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    visit_time = db.Column(db.Time, nullable=True)
    visit_purpose = db.Column(db.String(100), nullable=True)
    visit_content = db.Column(db.Text, nullable=False)
    visit_result = db.Column(db.String(200), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    report = db.relationship("DailyReport", back_populates="visits")
    customer = db.relationship("Customer")

    def to_dict(self):
        return {
            "visit_id": self.id,
            "report_id": self.report_id,
            "customer_id": self.customer_id,
            # Live lookup: a customer rename is visible immediately.
            "customer_name": self.customer.customer_name if self.customer else None,
            "visit_time": format_visit_time(self.visit_time),
            "visit_purpose": self.visit_purpose,
            "visit_content": self.visit_content,
            "visit_result": self.visit_result,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<VisitRecord {self.id}: report={self.report_id} customer={self.customer_id}>"


# ═══════════════════════════════════════════════════════════════════════════
#  COMMENT
# ═══════════════════════════════════════════════════════════════════════════

class Comment(db.Model):
    """A manager's remark on a report. Append-only apart from author deletion."""

    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    report_id = db.Column(
        db.Integer,
        db.ForeignKey("daily_reports.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sales_person_id = db.Column(
        db.Integer,
        db.ForeignKey("sales_persons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Author; always a manager at write time",
    )
    comment_text = db.Column(db.Text, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    report = db.relationship("DailyReport", back_populates="comments")
    author = db.relationship("SalesPerson", foreign_keys=[sales_person_id])

    def to_dict(self):
        return {
            "comment_id": self.id,
            "report_id": self.report_id,
            "sales_person_id": self.sales_person_id,
            "sales_person_name": self.author.name if self.author else None,
            "comment_text": self.comment_text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Comment {self.id}: report={self.report_id} by={self.sales_person_id}>"
