"""
Tests: personal dashboard aggregates.
"""

from datetime import date

from dailyreport.models import db
from dailyreport.models.report import Comment
from dailyreport.services.dashboard_service import RECENT_LIMIT, get_dashboard

TODAY = date(2024, 1, 20)


def _comment(report, author, text):
    db.session.add(Comment(report_id=report.id, sales_person_id=author.id, comment_text=text))
    db.session.commit()


class TestDashboard:
    def test_monthly_visits_only_count_this_month(self, org, make_report, as_actor):
        make_report(org.owner, report_date=date(2024, 1, 2), customers=[org.c1, org.c2])
        make_report(org.owner, report_date=date(2024, 1, 19), customers=[org.c1])
        make_report(org.owner, report_date=date(2023, 12, 31), customers=[org.c1])
        make_report(org.peer, report_date=date(2024, 1, 19), customers=[org.c1])

        dashboard = get_dashboard(as_actor(org.owner), today=TODAY)
        assert dashboard["monthly_visit_count"] == 3

    def test_unconfirmed_count_is_for_managers(self, org, make_report, as_actor):
        make_report(org.owner, status="submitted", customers=[org.c1])
        make_report(org.peer, status="submitted", customers=[org.c1])
        make_report(org.peer, report_date=date(2024, 1, 16), status="confirmed", customers=[org.c1])
        make_report(org.outsider, status="submitted", customers=[org.c1])

        assert get_dashboard(as_actor(org.manager), today=TODAY)["unconfirmed_report_count"] == 2
        assert get_dashboard(as_actor(org.director), today=TODAY)["unconfirmed_report_count"] == 0
        assert get_dashboard(as_actor(org.owner), today=TODAY)["unconfirmed_report_count"] is None

    def test_recent_reports_newest_first_and_capped(self, org, make_report, as_actor):
        for day in range(1, RECENT_LIMIT + 3):
            make_report(org.owner, report_date=date(2024, 1, day), customers=[org.c1] * (day % 2))

        recent = get_dashboard(as_actor(org.owner), today=TODAY)["recent_reports"]
        assert len(recent) == RECENT_LIMIT
        assert recent[0]["report_date"] == "2024-01-07"
        assert recent[0]["visit_count"] == 1
        assert recent[1]["visit_count"] == 0
        assert recent[0]["status_label"]

    def test_recent_comments_exclude_own(self, org, make_report, as_actor):
        report = make_report(org.owner, status="submitted", customers=[org.c1])
        _comment(report, org.manager, "Call them again")
        _comment(report, org.owner, "Will do")

        comments = get_dashboard(as_actor(org.owner), today=TODAY)["recent_comments"]
        assert [c["comment_text"] for c in comments] == ["Call them again"]
        assert comments[0]["commenter_name"] == "Manager M"
        assert comments[0]["report_date"] == "2024-01-15"

    def test_empty_dashboard(self, org, as_actor):
        dashboard = get_dashboard(as_actor(org.peer), today=TODAY)
        assert dashboard == {
            "monthly_visit_count": 0,
            "unconfirmed_report_count": None,
            "recent_reports": [],
            "recent_comments": [],
        }
