"""
Tests: request payload and query-string parsing.
"""

from datetime import date, time

import pytest
from werkzeug.datastructures import MultiDict

from dailyreport.core.exceptions import ValidationError
from dailyreport.models.report import ReportStatus
from dailyreport.payloads import (
    parse_comment_input,
    parse_customer_filters,
    parse_customer_input,
    parse_report_filters,
    parse_report_input,
    parse_status_input,
    parse_visit_input,
)


def _details(fn, *args):
    with pytest.raises(ValidationError) as exc:
        fn(*args)
    return exc.value.details


class TestReportInput:
    def test_full_body(self):
        data = parse_report_input({
            "report_date": "2024-01-15",
            "status": "submitted",
            "problem": "Pricing pressure",
            "visits": [
                {"customer_id": 1, "visit_content": "Demo", "visit_time": "09:05"},
                {"customer_id": 2, "visit_content": "Quote", "visit_result": "Won"},
            ],
        })
        assert data.report_date == date(2024, 1, 15)
        assert data.status is ReportStatus.SUBMITTED
        assert data.visits[0].visit_time == time(9, 5)
        assert data.visits[1].visit_result == "Won"
        assert data.plan is None

    def test_status_defaults_to_draft(self):
        assert parse_report_input({"report_date": "2024-01-15"}).status is ReportStatus.DRAFT

    def test_confirmed_not_accepted_on_write(self):
        details = _details(parse_report_input, {"report_date": "2024-01-15", "status": "confirmed"})
        assert "status" in details

    def test_every_bad_field_reported(self):
        details = _details(parse_report_input, {
            "report_date": "15/01/2024",
            "plan": "x" * 2001,
            "visits": [{"customer_id": 0, "visit_content": ""}, {"customer_id": True, "visit_content": "ok", "visit_time": "25:00"}],
        })
        assert set(details) == {
            "report_date",
            "plan",
            "visits[0].customer_id",
            "visits[0].visit_content",
            "visits[1].customer_id",
            "visits[1].visit_time",
        }

    @pytest.mark.parametrize("raw", [20240115, "20240115", "2024-W03-1", "2024-01-15T00:00", "２０２４-０１-１５"])
    def test_only_plain_iso_dates_accepted(self, raw):
        assert "report_date" in _details(parse_report_input, {"report_date": raw})

    @pytest.mark.parametrize("raw", [{}, "", "visit", 3])
    def test_visits_must_be_a_list(self, raw):
        details = _details(parse_report_input, {"report_date": "2024-01-15", "visits": raw})
        assert details["visits"] == "must be a list"

    def test_null_visits_means_none(self):
        assert parse_report_input({"report_date": "2024-01-15", "visits": None}).visits == []

    def test_missing_date(self):
        assert _details(parse_report_input, {})["report_date"] == "is required"

    def test_body_must_be_object(self):
        with pytest.raises(ValidationError):
            parse_report_input(["not", "an", "object"])

    def test_length_ceiling_is_inclusive(self):
        data = parse_report_input({"report_date": "2024-01-15", "problem": "p" * 2000})
        assert len(data.problem) == 2000


class TestSmallBodies:
    def test_visit(self):
        visit = parse_visit_input({"customer_id": 3, "visit_content": "Call", "visit_purpose": "Renewal"})
        assert visit.customer_id == 3
        assert visit.visit_purpose == "Renewal"

    def test_visit_result_ceiling(self):
        assert "visit_result" in _details(parse_visit_input, {"customer_id": 3, "visit_content": "x", "visit_result": "r" * 201})

    def test_status(self):
        assert parse_status_input({"status": "confirmed"}) == "confirmed"
        assert "status" in _details(parse_status_input, {"status": "archived"})

    def test_comment(self):
        assert parse_comment_input({"comment_text": "Nice"}) == "Nice"
        assert _details(parse_comment_input, {"comment_text": "   "})["comment_text"] == "is required"
        assert "comment_text" in _details(parse_comment_input, {"comment_text": "c" * 501})

    def test_customer_name_is_trimmed(self):
        assert parse_customer_input({"customer_name": "  Acme  "}).customer_name == "Acme"

    def test_customer_ceilings(self):
        details = _details(parse_customer_input, {"customer_name": "n" * 101, "phone": "0" * 21})
        assert set(details) == {"customer_name", "phone"}


class TestFilters:
    def test_report_defaults(self):
        filters = parse_report_filters(MultiDict())
        assert filters.sort == "report_date"
        assert filters.order == "desc"
        assert filters.status is None

    def test_report_filters(self):
        filters = parse_report_filters(MultiDict({
            "date_from": "2024-01-01", "date_to": "2024-01-31",
            "status": "submitted", "sales_person_id": "7", "order": "asc",
        }))
        assert filters.date_from == date(2024, 1, 1)
        assert filters.status is ReportStatus.SUBMITTED
        assert filters.sales_person_id == 7
        assert filters.order == "asc"

    def test_bad_report_filters(self):
        details = _details(parse_report_filters, MultiDict({
            "status": "archived", "sales_person_id": "abc", "sort": "name",
        }))
        assert set(details) == {"status", "sales_person_id", "sort"}

    def test_compact_date_filter_rejected(self):
        assert "date_from" in _details(parse_report_filters, MultiDict({"date_from": "20240101"}))

    def test_inverted_range(self):
        details = _details(parse_report_filters, MultiDict({"date_from": "2024-02-01", "date_to": "2024-01-01"}))
        assert "date_to" in details

    def test_customer_filters(self):
        assert parse_customer_filters(MultiDict({"customer_name": " acme "})) == {
            "name": "acme", "sort": "customer_name", "order": "asc",
        }
