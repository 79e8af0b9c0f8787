"""Personal dashboard aggregates.

Everything here is computed for the calling actor:
  - monthly_visit_count: visits on the actor's own reports dated this month
  - unconfirmed_report_count: submitted reports of direct subordinates
    (managers only, ``None`` otherwise)
  - recent_reports: the actor's five latest reports
  - recent_comments: the five latest comments others left on the actor's reports
"""
import calendar
from datetime import date

from sqlalchemy import func, select

from dailyreport.models import db
from dailyreport.models.report import Comment, DailyReport, ReportStatus, VisitRecord
from dailyreport.models.sales_person import SalesPerson

RECENT_LIMIT = 5


def _month_range(today: date) -> tuple[date, date]:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def monthly_visit_count(actor_id: int, today: date) -> int:
    start, end = _month_range(today)
    stmt = (
        select(func.count(VisitRecord.id))
        .join(DailyReport, VisitRecord.report_id == DailyReport.id)
        .where(
            DailyReport.sales_person_id == actor_id,
            DailyReport.report_date.between(start, end),
        )
    )
    return db.session.execute(stmt).scalar_one()


def unconfirmed_report_count(actor) -> int | None:
    if not actor.is_manager:
        return None
    stmt = (
        select(func.count(DailyReport.id))
        .join(SalesPerson, DailyReport.sales_person_id == SalesPerson.id)
        .where(
            SalesPerson.manager_id == actor.id,
            DailyReport.status == ReportStatus.SUBMITTED.value,
        )
    )
    return db.session.execute(stmt).scalar_one()


def recent_reports(actor_id: int) -> list[dict]:
    visit_count = (
        select(func.count(VisitRecord.id))
        .where(VisitRecord.report_id == DailyReport.id)
        .correlate(DailyReport)
        .scalar_subquery()
    )
    stmt = (
        select(DailyReport, visit_count)
        .where(DailyReport.sales_person_id == actor_id)
        .order_by(DailyReport.report_date.desc())
        .limit(RECENT_LIMIT)
    )
    rows = []
    for report, visits in db.session.execute(stmt).all():
        status = report.status_enum
        rows.append({
            "report_id": report.id,
            "report_date": report.report_date.isoformat(),
            "visit_count": visits,
            "status": status.value,
            "status_label": status.label,
        })
    return rows


def recent_comments(actor_id: int) -> list[dict]:
    stmt = (
        select(Comment)
        .join(DailyReport, Comment.report_id == DailyReport.id)
        .where(
            DailyReport.sales_person_id == actor_id,
            Comment.sales_person_id != actor_id,
        )
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .limit(RECENT_LIMIT)
    )
    return [
        {
            "comment_id": c.id,
            "report_id": c.report_id,
            "report_date": c.report.report_date.isoformat(),
            "commenter_name": c.author.name if c.author else None,
            "comment_text": c.comment_text,
            "created_at": c.created_at.isoformat() if c.created_at else None,
        }
        for c in db.session.execute(stmt).scalars()
    ]


def get_dashboard(actor, today: date | None = None) -> dict:
    today = today or date.today()
    return {
        "monthly_visit_count": monthly_visit_count(actor.id, today),
        "unconfirmed_report_count": unconfirmed_report_count(actor),
        "recent_reports": recent_reports(actor.id),
        "recent_comments": recent_comments(actor.id),
    }
