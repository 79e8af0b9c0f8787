"""Visit record service layer.

Single-visit operations on an existing report. Only the report's owner may
write, and never while the report is confirmed. Bulk replacement of a
report's visits goes through ``report_service.update_report``.
"""
import logging

from dailyreport.core.exceptions import NotFoundError
from dailyreport.models import db
from dailyreport.models.report import VisitRecord
from dailyreport.services import access_control
from dailyreport.services.helpers.transactions import unit_of_work
from dailyreport.services.report_lifecycle import ensure_accepts_visits, ensure_visit_removable
from dailyreport.services.report_service import check_customers_exist, get_report_or_404

logger = logging.getLogger(__name__)


def _get_visit_or_404(visit_id: int) -> VisitRecord:
    visit = db.session.get(VisitRecord, visit_id)
    if visit is None:
        raise NotFoundError(resource="VisitRecord", resource_id=visit_id)
    return visit


def list_visits(actor, report_id: int) -> list[VisitRecord]:
    report = get_report_or_404(report_id)
    access_control.require_view(actor, report)
    return list(report.visits)


def add_visit(actor, report_id: int, data) -> VisitRecord:
    report = get_report_or_404(report_id)
    access_control.require_owner(actor, report, "add visits to")
    ensure_accepts_visits(report)
    check_customers_exist([data.customer_id])

    visit = VisitRecord(
        report_id=report.id,
        customer_id=data.customer_id,
        visit_time=data.visit_time,
        visit_purpose=data.visit_purpose,
        visit_content=data.visit_content,
        visit_result=data.visit_result,
    )
    with unit_of_work():
        db.session.add(visit)

    logger.info(
        "Visit added: visit=%s report=%s customer=%s", visit.id, report.id, data.customer_id,
        extra={"actor_id": actor.id, "report_id": report.id, "customer_id": data.customer_id},
    )
    return visit


def update_visit(actor, visit_id: int, data) -> VisitRecord:
    visit = _get_visit_or_404(visit_id)
    report = visit.report
    access_control.require_owner(actor, report, "edit visits of")
    ensure_accepts_visits(report)
    check_customers_exist([data.customer_id])

    with unit_of_work():
        visit.customer_id = data.customer_id
        visit.visit_time = data.visit_time
        visit.visit_purpose = data.visit_purpose
        visit.visit_content = data.visit_content
        visit.visit_result = data.visit_result

    logger.info(
        "Visit updated: visit=%s report=%s", visit.id, report.id,
        extra={"actor_id": actor.id, "report_id": report.id, "customer_id": data.customer_id},
    )
    return visit


def delete_visit(actor, visit_id: int) -> None:
    visit = _get_visit_or_404(visit_id)
    report = visit.report
    access_control.require_owner(actor, report, "remove visits from")
    ensure_visit_removable(report)

    with unit_of_work():
        db.session.delete(visit)

    logger.info(
        "Visit deleted: visit=%s report=%s", visit_id, report.id,
        extra={"actor_id": actor.id, "report_id": report.id},
    )
