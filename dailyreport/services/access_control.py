"""
Report access control.

One question underlies every read and most writes: may actor A act on the
reports owned by salesperson O? ``can_access`` answers it with a one-hop
manager lookup; the ``require_*`` helpers wrap it and raise ``ForbiddenError``
with the error kind a client needs to tell "not yours" apart from "locked".

Rules:
    - an actor always reaches their own reports
    - a non-manager reaches nothing else
    - a manager reaches the reports of their direct subordinates only
      (no transitive hierarchy)

Usage:
    from dailyreport.services.access_control import can_access, require_view

    if can_access(actor.id, actor.is_manager, report.sales_person_id):
        ...
    require_view(actor, report)          # raises ForbiddenError("access")
"""

import logging

from sqlalchemy import select

from dailyreport.core.exceptions import ForbiddenError, ValidationError
from dailyreport.models import db
from dailyreport.models.report import ReportStatus
from dailyreport.models.sales_person import SalesPerson

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
#  Resolver
# ═══════════════════════════════════════════════════════════════════════════

def is_direct_manager(manager_id: int, subordinate_id: int) -> bool:
    """True iff ``subordinate_id``'s recorded manager is ``manager_id``."""
    stmt = select(SalesPerson.id).where(
        SalesPerson.id == subordinate_id,
        SalesPerson.manager_id == manager_id,
    )
    return db.session.execute(stmt).first() is not None


def can_access(actor_id: int, actor_is_manager: bool, owner_id: int) -> bool:
    if actor_id == owner_id:
        return True
    if not actor_is_manager:
        return False
    return is_direct_manager(actor_id, owner_id)


def subordinate_ids(manager_id: int) -> list[int]:
    stmt = select(SalesPerson.id).where(SalesPerson.manager_id == manager_id)
    return list(db.session.execute(stmt).scalars())


def accessible_owner_ids(actor) -> list[int]:
    """Owners whose reports ``actor`` may list: self, plus direct subordinates."""
    owners = [actor.id]
    if actor.is_manager:
        owners.extend(sid for sid in subordinate_ids(actor.id) if sid != actor.id)
    return owners


# ═══════════════════════════════════════════════════════════════════════════
#  Guards
# ═══════════════════════════════════════════════════════════════════════════

def require_view(actor, report) -> None:
    if not can_access(actor.id, actor.is_manager, report.sales_person_id):
        logger.info(
            "Access denied: actor=%s report=%s", actor.id, report.id,
            extra={"actor_id": actor.id, "report_id": report.id},
        )
        raise ForbiddenError("access", "You do not have permission to view this report")


def require_owner(actor, report, verb: str = "modify") -> None:
    """Content writes (report, visits) are reserved to the report's owner."""
    if actor.id != report.sales_person_id:
        logger.info(
            "Owner check failed: actor=%s report=%s verb=%s", actor.id, report.id, verb,
            extra={"actor_id": actor.id, "report_id": report.id},
        )
        raise ForbiddenError("access", f"You do not have permission to {verb} this report")


def require_manager(actor, what: str = "this resource") -> None:
    if not actor.is_manager:
        raise ForbiddenError("access", f"Only managers can view {what}")


def require_comment(actor, report) -> None:
    """Comment creation: manager role first, then the ordinary resolver."""
    if not actor.is_manager:
        raise ForbiddenError("comment", "Only managers can comment on reports")
    if not can_access(actor.id, actor.is_manager, report.sales_person_id):
        raise ForbiddenError("access", "You do not have permission to comment on this report")


def authorize_status_change(actor, report, target: ReportStatus) -> None:
    """Decide whether ``actor`` may move ``report`` to ``target``.

    The legality of a transition is a predicate over (actor, current status,
    target status). Checks run in a fixed order so the most specific reason
    wins:

        1. resolver must admit the actor at all
        2. confirm: never by the owner, only by a manager, only from submitted
        3. draft/submitted: owner only, and never out of confirmed
        4. submitted: the report must carry at least one visit
    """
    owner_id = report.sales_person_id
    current = report.status_enum

    if not can_access(actor.id, actor.is_manager, owner_id):
        raise ForbiddenError("access", "You do not have permission to change this report's status")

    if target is ReportStatus.CONFIRMED:
        if actor.id == owner_id:
            logger.info(
                "Self-confirm rejected: actor=%s report=%s", actor.id, report.id,
                extra={"actor_id": actor.id, "report_id": report.id},
            )
            raise ForbiddenError("edit", "You cannot confirm your own report")
        if not actor.is_manager:
            raise ForbiddenError("access", "Only a manager can confirm reports")
        if current is not ReportStatus.SUBMITTED:
            raise ForbiddenError(
                "edit", f"Only submitted reports can be confirmed (current status: {current.value})",
            )
        return

    if actor.id != owner_id:
        raise ForbiddenError("access", "Only the owner can set a report to draft or submitted")
    if current.content_locked:
        raise ForbiddenError("edit", "Confirmed reports cannot be changed")
    if target is ReportStatus.SUBMITTED and not report.visits:
        raise ValidationError(
            "A submitted report needs at least one visit record",
            details={"visits": "at least one visit is required to submit"},
        )
