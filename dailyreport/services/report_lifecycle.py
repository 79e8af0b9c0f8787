"""
Report status gates.

The status machine itself is ``ReportStatus``; this module turns its gates
into the errors the write paths raise, and applies an authorized status
change.

    ensure_content_editable  -> ForbiddenError("edit")   on confirmed
    ensure_accepts_visits    -> ForbiddenError("edit")   on confirmed
    ensure_visit_removable   -> ForbiddenError("delete") on confirmed
    ensure_deletable         -> ForbiddenError("delete") unless draft
"""

import logging

from dailyreport.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from dailyreport.models import db
from dailyreport.models.report import DailyReport, ReportStatus
from dailyreport.services.access_control import authorize_status_change
from dailyreport.services.helpers.transactions import unit_of_work

logger = logging.getLogger(__name__)


def ensure_content_editable(report) -> None:
    if report.status_enum.content_locked:
        raise ForbiddenError("edit", "Confirmed reports cannot be edited")


def ensure_accepts_visits(report) -> None:
    if not report.status_enum.accepts_visits:
        raise ForbiddenError("edit", "Visits cannot be added to or edited in a confirmed report")


def ensure_visit_removable(report) -> None:
    if not report.status_enum.accepts_visits:
        raise ForbiddenError("delete", "Visits cannot be removed from a confirmed report")


def ensure_deletable(report) -> None:
    status = report.status_enum
    if not status.deletable:
        raise ForbiddenError("delete", f"Only draft reports can be deleted (current status: {status.value})")


def parse_status(value) -> ReportStatus:
    try:
        return ReportStatus(value)
    except ValueError:
        raise ValidationError(
            f"Invalid status: {value!r}",
            details={"status": f"must be one of {', '.join(ReportStatus.values())}"},
        ) from None


def change_status(actor, report_id: int, target) -> DailyReport:
    """Move a report to ``target`` after the resolver admits the change."""
    target = target if isinstance(target, ReportStatus) else parse_status(target)
    report = db.session.get(DailyReport, report_id)
    if report is None:
        raise NotFoundError(resource="DailyReport", resource_id=report_id)

    authorize_status_change(actor, report, target)

    previous = report.status
    with unit_of_work():
        report.status = target.value

    logger.info(
        "Report status changed: report=%s %s -> %s by actor=%s",
        report.id, previous, target.value, actor.id,
        extra={"actor_id": actor.id, "report_id": report.id},
    )
    return report
