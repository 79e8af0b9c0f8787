"""
Tests: report access resolver and status-transition predicate.

Covers:
    - can_access: self, non-manager, direct manager, skip-level manager
    - accessible_owner_ids for listing
    - comment guard ordering (role before hierarchy)
    - authorize_status_change over (actor, current, target)
"""

import pytest

from dailyreport.core.exceptions import ForbiddenError, ValidationError
from dailyreport.models.report import ReportStatus
from dailyreport.services.access_control import (
    accessible_owner_ids,
    authorize_status_change,
    can_access,
    require_comment,
    require_owner,
    require_view,
)


class TestCanAccess:
    def test_owner_always_reaches_own_reports(self, org):
        assert can_access(org.owner.id, False, org.owner.id) is True
        assert can_access(org.manager.id, True, org.manager.id) is True

    def test_non_manager_never_reaches_others(self, org):
        assert can_access(org.peer.id, False, org.owner.id) is False

    def test_direct_manager_reaches_subordinate(self, org):
        assert can_access(org.manager.id, True, org.owner.id) is True

    def test_manager_flag_is_required(self, org):
        # the hierarchy alone is not enough without the manager role
        assert can_access(org.manager.id, False, org.owner.id) is False

    def test_skip_level_manager_is_denied(self, org):
        assert can_access(org.director.id, True, org.owner.id) is False

    def test_other_team_manager_is_denied(self, org):
        assert can_access(org.other_manager.id, True, org.owner.id) is False

    def test_subordinate_cannot_reach_manager(self, org):
        assert can_access(org.owner.id, False, org.manager.id) is False
        assert can_access(org.manager.id, True, org.director.id) is False

    def test_access_is_symmetric_across_report_operations(self, org, make_report, as_actor):
        report = make_report(org.owner)
        for person, allowed in (
            (org.owner, True),
            (org.manager, True),
            (org.peer, False),
            (org.director, False),
            (org.other_manager, False),
        ):
            actor = as_actor(person)
            assert can_access(actor.id, actor.is_manager, report.sales_person_id) is allowed
            if allowed:
                require_view(actor, report)
            else:
                with pytest.raises(ForbiddenError) as exc:
                    require_view(actor, report)
                assert exc.value.code == "ERR_FORBIDDEN_ACCESS"


class TestAccessibleOwners:
    def test_member_sees_only_self(self, org, as_actor):
        assert accessible_owner_ids(as_actor(org.owner)) == [org.owner.id]

    def test_manager_sees_self_and_direct_subordinates(self, org, as_actor):
        owners = accessible_owner_ids(as_actor(org.manager))
        assert sorted(owners) == sorted([org.manager.id, org.owner.id, org.peer.id])

    def test_director_does_not_see_second_level(self, org, as_actor):
        owners = set(accessible_owner_ids(as_actor(org.director)))
        assert owners == {org.director.id, org.manager.id, org.other_manager.id}
        assert org.owner.id not in owners


class TestGuards:
    def test_require_owner_rejects_manager(self, org, make_report, as_actor):
        report = make_report(org.owner)
        with pytest.raises(ForbiddenError) as exc:
            require_owner(as_actor(org.manager), report, "edit")
        assert exc.value.code == "ERR_FORBIDDEN_ACCESS"

    def test_comment_requires_manager_role_first(self, org, make_report, as_actor):
        report = make_report(org.owner)
        with pytest.raises(ForbiddenError) as exc:
            require_comment(as_actor(org.owner), report)
        assert exc.value.code == "ERR_FORBIDDEN_COMMENT"

    def test_comment_by_unrelated_manager_is_access_error(self, org, make_report, as_actor):
        report = make_report(org.owner)
        with pytest.raises(ForbiddenError) as exc:
            require_comment(as_actor(org.other_manager), report)
        assert exc.value.code == "ERR_FORBIDDEN_ACCESS"

    def test_comment_by_direct_manager_passes(self, org, make_report, as_actor):
        require_comment(as_actor(org.manager), make_report(org.owner))


class TestStatusTransitions:
    def test_manager_confirms_submitted(self, org, make_report, as_actor):
        report = make_report(org.owner, status="submitted", customers=[org.c1])
        authorize_status_change(as_actor(org.manager), report, ReportStatus.CONFIRMED)

    @pytest.mark.parametrize("current", ["draft", "submitted", "confirmed"])
    def test_self_confirm_rejected_in_every_status(self, org, make_report, as_actor, current):
        report = make_report(org.manager, status=current, customers=[org.c1])
        with pytest.raises(ForbiddenError) as exc:
            authorize_status_change(as_actor(org.manager), report, ReportStatus.CONFIRMED)
        assert exc.value.code == "ERR_FORBIDDEN_EDIT"
        assert "own report" in exc.value.message

    @pytest.mark.parametrize("current", ["draft", "confirmed"])
    def test_confirm_only_from_submitted(self, org, make_report, as_actor, current):
        report = make_report(org.owner, status=current, customers=[org.c1])
        with pytest.raises(ForbiddenError) as exc:
            authorize_status_change(as_actor(org.manager), report, ReportStatus.CONFIRMED)
        assert exc.value.code == "ERR_FORBIDDEN_EDIT"

    def test_skip_level_manager_cannot_confirm(self, org, make_report, as_actor):
        report = make_report(org.owner, status="submitted", customers=[org.c1])
        with pytest.raises(ForbiddenError) as exc:
            authorize_status_change(as_actor(org.director), report, ReportStatus.CONFIRMED)
        assert exc.value.code == "ERR_FORBIDDEN_ACCESS"

    def test_owner_submits_draft_with_visits(self, org, make_report, as_actor):
        report = make_report(org.owner, customers=[org.c1])
        authorize_status_change(as_actor(org.owner), report, ReportStatus.SUBMITTED)

    def test_owner_cannot_submit_without_visits(self, org, make_report, as_actor):
        report = make_report(org.owner)
        with pytest.raises(ValidationError):
            authorize_status_change(as_actor(org.owner), report, ReportStatus.SUBMITTED)

    def test_owner_returns_submitted_to_draft(self, org, make_report, as_actor):
        report = make_report(org.owner, status="submitted", customers=[org.c1])
        authorize_status_change(as_actor(org.owner), report, ReportStatus.DRAFT)

    @pytest.mark.parametrize("target", [ReportStatus.DRAFT, ReportStatus.SUBMITTED])
    def test_manager_cannot_set_owner_statuses(self, org, make_report, as_actor, target):
        report = make_report(org.owner, status="submitted", customers=[org.c1])
        with pytest.raises(ForbiddenError) as exc:
            authorize_status_change(as_actor(org.manager), report, target)
        assert exc.value.code == "ERR_FORBIDDEN_ACCESS"

    @pytest.mark.parametrize("target", [ReportStatus.DRAFT, ReportStatus.SUBMITTED])
    def test_confirmed_is_terminal_for_owner(self, org, make_report, as_actor, target):
        report = make_report(org.owner, status="confirmed", customers=[org.c1])
        with pytest.raises(ForbiddenError) as exc:
            authorize_status_change(as_actor(org.owner), report, target)
        assert exc.value.code == "ERR_FORBIDDEN_EDIT"
