"""
Tests: single-visit operations and comments.

Covers:
    - visit add/edit/delete gated by ownership and status
    - customer existence checked for single visits
    - comment role and reach checks, author-only deletion
"""

from datetime import time

import pytest

from dailyreport.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from dailyreport.models import db
from dailyreport.models.report import Comment, VisitRecord
from dailyreport.payloads import VisitInput
from dailyreport.services import comment_service, visit_service


def _visit(customer_id, content="Follow-up call", **kw):
    return VisitInput(customer_id=customer_id, visit_content=content, **kw)


class TestVisits:
    @pytest.mark.parametrize("status", ["draft", "submitted"])
    def test_owner_adds_visit_while_writable(self, org, make_report, as_actor, status):
        report = make_report(org.owner, status=status, customers=[org.c1])
        visit = visit_service.add_visit(as_actor(org.owner), report.id, _visit(org.c2.id, visit_time=time(11, 0)))
        assert visit.id is not None
        assert visit.report_id == report.id
        assert len(visit_service.list_visits(as_actor(org.owner), report.id)) == 2

    def test_add_to_confirmed_is_edit_forbidden(self, org, make_report, as_actor):
        report = make_report(org.owner, status="confirmed", customers=[org.c1])
        with pytest.raises(ForbiddenError) as exc:
            visit_service.add_visit(as_actor(org.owner), report.id, _visit(org.c2.id))
        assert exc.value.code == "ERR_FORBIDDEN_EDIT"

    def test_manager_cannot_add(self, org, make_report, as_actor):
        report = make_report(org.owner)
        with pytest.raises(ForbiddenError) as exc:
            visit_service.add_visit(as_actor(org.manager), report.id, _visit(org.c1.id))
        assert exc.value.code == "ERR_FORBIDDEN_ACCESS"

    def test_unknown_customer(self, org, make_report, as_actor):
        report = make_report(org.owner)
        with pytest.raises(ValidationError) as exc:
            visit_service.add_visit(as_actor(org.owner), report.id, _visit(99999))
        assert "99999" in exc.value.details["customer_id"]
        assert db.session.query(VisitRecord).count() == 0

    def test_update_visit(self, org, make_report, as_actor):
        report = make_report(org.owner, customers=[org.c1])
        visit_id = report.visits[0].id
        updated = visit_service.update_visit(
            as_actor(org.owner), visit_id, _visit(org.c2.id, "rewritten", visit_result="order placed"),
        )
        assert updated.customer_id == org.c2.id
        assert updated.visit_content == "rewritten"
        assert updated.to_dict()["customer_name"] == "Customer Two"

    def test_update_on_confirmed_is_edit_forbidden(self, org, make_report, as_actor):
        report = make_report(org.owner, status="confirmed", customers=[org.c1])
        with pytest.raises(ForbiddenError) as exc:
            visit_service.update_visit(as_actor(org.owner), report.visits[0].id, _visit(org.c1.id))
        assert exc.value.code == "ERR_FORBIDDEN_EDIT"

    def test_delete_visit_from_submitted(self, org, make_report, as_actor):
        report = make_report(org.owner, status="submitted", customers=[org.c1, org.c2])
        visit_id = report.visits[0].id
        visit_service.delete_visit(as_actor(org.owner), visit_id)
        assert db.session.get(VisitRecord, visit_id) is None

    def test_delete_from_confirmed_is_delete_forbidden(self, org, make_report, as_actor):
        report = make_report(org.owner, status="confirmed", customers=[org.c1])
        with pytest.raises(ForbiddenError) as exc:
            visit_service.delete_visit(as_actor(org.owner), report.visits[0].id)
        assert exc.value.code == "ERR_FORBIDDEN_DELETE"

    def test_missing_visit(self, org, as_actor):
        with pytest.raises(NotFoundError):
            visit_service.delete_visit(as_actor(org.owner), 424242)

    def test_list_visits_for_manager_not_outsider(self, org, make_report, as_actor):
        report = make_report(org.owner, customers=[org.c1])
        assert len(visit_service.list_visits(as_actor(org.manager), report.id)) == 1
        with pytest.raises(ForbiddenError):
            visit_service.list_visits(as_actor(org.other_manager), report.id)


class TestComments:
    def test_direct_manager_comments(self, org, make_report, as_actor):
        report = make_report(org.owner, status="submitted", customers=[org.c1])
        comment = comment_service.create_comment(as_actor(org.manager), report.id, "Good progress")
        assert comment.sales_person_id == org.manager.id
        assert comment.to_dict()["sales_person_name"] == "Manager M"

        visible = comment_service.list_comments(as_actor(org.owner), report.id)
        assert [c.comment_text for c in visible] == ["Good progress"]

    def test_comments_allowed_on_confirmed(self, org, make_report, as_actor):
        report = make_report(org.owner, status="confirmed", customers=[org.c1])
        comment_service.create_comment(as_actor(org.manager), report.id, "Signed off")
        assert db.session.query(Comment).count() == 1

    def test_non_manager_cannot_comment(self, org, make_report, as_actor):
        report = make_report(org.owner)
        with pytest.raises(ForbiddenError) as exc:
            comment_service.create_comment(as_actor(org.owner), report.id, "Note to self")
        assert exc.value.code == "ERR_FORBIDDEN_COMMENT"

    def test_other_manager_cannot_comment(self, org, make_report, as_actor):
        report = make_report(org.owner)
        with pytest.raises(ForbiddenError) as exc:
            comment_service.create_comment(as_actor(org.other_manager), report.id, "Drive-by")
        assert exc.value.code == "ERR_FORBIDDEN_ACCESS"

    def test_skip_level_manager_cannot_comment(self, org, make_report, as_actor):
        report = make_report(org.owner)
        with pytest.raises(ForbiddenError):
            comment_service.create_comment(as_actor(org.director), report.id, "From the top")

    def test_author_deletes(self, org, make_report, as_actor):
        report = make_report(org.owner)
        comment = comment_service.create_comment(as_actor(org.manager), report.id, "Typo")
        comment_id = comment.id
        comment_service.delete_comment(as_actor(org.manager), comment_id)
        assert db.session.get(Comment, comment_id) is None

    def test_report_owner_cannot_delete_comment(self, org, make_report, as_actor):
        report = make_report(org.owner)
        comment = comment_service.create_comment(as_actor(org.manager), report.id, "Keep this")
        with pytest.raises(ForbiddenError) as exc:
            comment_service.delete_comment(as_actor(org.owner), comment.id)
        assert exc.value.code == "ERR_FORBIDDEN_ACCESS"

    def test_missing_comment(self, org, as_actor):
        with pytest.raises(NotFoundError):
            comment_service.delete_comment(as_actor(org.manager), 424242)
