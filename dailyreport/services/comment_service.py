"""Comment service layer.

Managers annotate the reports of their direct subordinates. Anyone who can
view a report can read its comments; only the author may delete one.
"""
import logging

from dailyreport.core.exceptions import ForbiddenError, NotFoundError
from dailyreport.models import db
from dailyreport.models.report import Comment
from dailyreport.services import access_control
from dailyreport.services.helpers.transactions import unit_of_work
from dailyreport.services.report_service import get_report_or_404

logger = logging.getLogger(__name__)


def list_comments(actor, report_id: int) -> list[Comment]:
    report = get_report_or_404(report_id)
    access_control.require_view(actor, report)
    return list(report.comments)


def create_comment(actor, report_id: int, comment_text: str) -> Comment:
    report = get_report_or_404(report_id)
    access_control.require_comment(actor, report)

    comment = Comment(report_id=report.id, sales_person_id=actor.id, comment_text=comment_text)
    with unit_of_work():
        db.session.add(comment)

    logger.info(
        "Comment created: comment=%s report=%s", comment.id, report.id,
        extra={"actor_id": actor.id, "report_id": report.id},
    )
    return comment


def delete_comment(actor, comment_id: int) -> None:
    comment = db.session.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError(resource="Comment", resource_id=comment_id)
    if comment.sales_person_id != actor.id:
        raise ForbiddenError("access", "Only the author can delete this comment")

    report_id = comment.report_id
    with unit_of_work():
        db.session.delete(comment)

    logger.info(
        "Comment deleted: comment=%s report=%s", comment_id, report_id,
        extra={"actor_id": actor.id, "report_id": report_id},
    )
