"""Daily report service layer.

Transaction policy: every public write runs in exactly one ``unit_of_work``
block. Business rules are checked before anything is added to the session,
so a rejected request leaves no trace; a store-level failure rolls back the
report row and its visits together.

Operations:
- create_report: insert a report with its ordered visit list
- update_report: full replace of header fields and visits
- delete_report: drafts only, visits and comments cascade
- get_report / build_report_query / summarize_reports: reads, access-filtered
"""
import logging
from datetime import date

from sqlalchemy import delete, func, select

from dailyreport.core.exceptions import (
    DuplicateEntryError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from dailyreport.models import db
from dailyreport.models.customer import Customer
from dailyreport.models.report import Comment, DailyReport, ReportStatus, VisitRecord
from dailyreport.services import access_control
from dailyreport.services.helpers.transactions import unit_of_work
from dailyreport.services.report_lifecycle import ensure_content_editable, ensure_deletable

logger = logging.getLogger(__name__)


def _today() -> date:
    return date.today()


# ── Rule checks ──────────────────────────────────────────────────────────


def check_not_future(report_date: date) -> None:
    if report_date > _today():
        raise ValidationError(
            "report_date must not be in the future",
            details={"report_date": "future dates are not allowed"},
        )


def check_submit_has_visits(status: ReportStatus, visits) -> None:
    if status is ReportStatus.SUBMITTED and not visits:
        raise ValidationError(
            "A submitted report needs at least one visit record",
            details={"visits": "at least one visit is required to submit"},
        )


def _duplicate(report_date: date) -> DuplicateEntryError:
    return DuplicateEntryError("DailyReport", "report_date", report_date.isoformat())


def check_unique_date(owner_id: int, report_date: date, exclude_id: int | None = None) -> None:
    stmt = select(DailyReport.id).where(
        DailyReport.sales_person_id == owner_id,
        DailyReport.report_date == report_date,
    )
    if exclude_id is not None:
        stmt = stmt.where(DailyReport.id != exclude_id)
    if db.session.execute(stmt).first() is not None:
        raise _duplicate(report_date)


def check_customers_exist(customer_ids) -> None:
    """Every referenced customer must exist; name all missing ids at once."""
    wanted = set(customer_ids)
    if not wanted:
        return
    found = set(db.session.execute(select(Customer.id).where(Customer.id.in_(wanted))).scalars())
    missing = sorted(wanted - found)
    if missing:
        raise ValidationError(
            "Referenced customer does not exist",
            details={"customer_id": f"unknown customer id(s): {', '.join(str(i) for i in missing)}"},
        )


def _build_visits(report_id: int, visits) -> list[VisitRecord]:
    return [
        VisitRecord(
            report_id=report_id,
            customer_id=v.customer_id,
            visit_time=v.visit_time,
            visit_purpose=v.visit_purpose,
            visit_content=v.visit_content,
            visit_result=v.visit_result,
        )
        for v in visits
    ]


def get_report_or_404(report_id: int) -> DailyReport:
    report = db.session.get(DailyReport, report_id)
    if report is None:
        raise NotFoundError(resource="DailyReport", resource_id=report_id)
    return report


# ── Writes ───────────────────────────────────────────────────────────────


def create_report(actor, data) -> DailyReport:
    """Create a report owned by ``actor`` together with its visits.

    Checks, in order: future date, submitted-without-visits, duplicate
    (owner, date), unknown customers. Nothing is written unless all pass.
    """
    check_not_future(data.report_date)
    check_submit_has_visits(data.status, data.visits)
    check_unique_date(actor.id, data.report_date)
    check_customers_exist(v.customer_id for v in data.visits)

    report = DailyReport(
        sales_person_id=actor.id,
        report_date=data.report_date,
        status=data.status.value,
        problem=data.problem,
        plan=data.plan,
    )
    with unit_of_work(conflict=lambda: _duplicate(data.report_date)):
        db.session.add(report)
        db.session.flush()
        db.session.add_all(_build_visits(report.id, data.visits))

    logger.info(
        "Report created: report=%s owner=%s date=%s status=%s visits=%d",
        report.id, actor.id, data.report_date, data.status.value, len(data.visits),
        extra={"actor_id": actor.id, "report_id": report.id},
    )
    return report


def update_report(actor, report_id: int, data) -> DailyReport:
    """Replace a report's header fields and its whole visit list."""
    report = get_report_or_404(report_id)
    access_control.require_owner(actor, report, "edit")
    ensure_content_editable(report)

    check_not_future(data.report_date)
    check_submit_has_visits(data.status, data.visits)
    if data.report_date != report.report_date:
        check_unique_date(report.sales_person_id, data.report_date, exclude_id=report.id)
    check_customers_exist(v.customer_id for v in data.visits)

    with unit_of_work(conflict=lambda: _duplicate(data.report_date)):
        db.session.execute(delete(VisitRecord).where(VisitRecord.report_id == report.id))
        db.session.expire(report, ["visits"])
        report.report_date = data.report_date
        report.status = data.status.value
        report.problem = data.problem
        report.plan = data.plan
        db.session.add_all(_build_visits(report.id, data.visits))

    logger.info(
        "Report replaced: report=%s status=%s visits=%d",
        report.id, data.status.value, len(data.visits),
        extra={"actor_id": actor.id, "report_id": report.id},
    )
    return report


def delete_report(actor, report_id: int) -> None:
    report = get_report_or_404(report_id)
    access_control.require_owner(actor, report, "delete")
    ensure_deletable(report)

    with unit_of_work():
        db.session.delete(report)

    logger.info(
        "Report deleted: report=%s", report_id,
        extra={"actor_id": actor.id, "report_id": report_id},
    )


# ── Reads ────────────────────────────────────────────────────────────────


def get_report(actor, report_id: int) -> DailyReport:
    report = get_report_or_404(report_id)
    access_control.require_view(actor, report)
    return report


def build_report_query(actor, filters):
    """Return a legacy ``Query`` of the reports ``actor`` may list.

    The access restriction is part of the WHERE clause, so pagination counts
    only ever see permitted rows. Asking for an owner outside the actor's
    reach is an error rather than an empty page.
    """
    owners = access_control.accessible_owner_ids(actor)
    if filters.sales_person_id is not None:
        if filters.sales_person_id not in owners:
            raise ForbiddenError("access", "You do not have permission to view this sales person's reports")
        owners = [filters.sales_person_id]

    q = DailyReport.query.filter(DailyReport.sales_person_id.in_(owners))
    if filters.date_from:
        q = q.filter(DailyReport.report_date >= filters.date_from)
    if filters.date_to:
        q = q.filter(DailyReport.report_date <= filters.date_to)
    if filters.status:
        q = q.filter(DailyReport.status == filters.status.value)

    column = DailyReport.created_at if filters.sort == "created_at" else DailyReport.report_date
    ordering = column.asc() if filters.order == "asc" else column.desc()
    return q.order_by(ordering, DailyReport.id.desc())


def _counts(model, report_ids) -> dict[int, int]:
    if not report_ids:
        return {}
    stmt = (
        select(model.report_id, func.count(model.id))
        .where(model.report_id.in_(report_ids))
        .group_by(model.report_id)
    )
    return dict(db.session.execute(stmt).all())


def summarize_reports(reports) -> list[dict]:
    """List-row dicts with visit/comment counts from two grouped queries."""
    ids = [r.id for r in reports]
    visits = _counts(VisitRecord, ids)
    comments = _counts(Comment, ids)
    return [
        r.to_summary_dict(visit_count=visits.get(r.id, 0), comment_count=comments.get(r.id, 0))
        for r in reports
    ]
