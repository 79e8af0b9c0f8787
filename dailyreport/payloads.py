"""
Request payload parsing.

Blueprints hand the decoded JSON body to one of the ``parse_*`` functions
below and pass the resulting dataclass to the service layer. Only syntax is
checked here (types, ISO dates, HH:MM times, length ceilings, enum values);
business rules such as "no future dates" live in the services.

All failures raise ``ValidationError`` with one entry per offending field.
"""

from dataclasses import dataclass, field
from datetime import date, time

from dailyreport.core.exceptions import ValidationError
from dailyreport.models.report import OWNER_WRITABLE_STATUSES, ReportStatus
from dailyreport.utils.helpers import parse_date_input, parse_visit_time

# Length ceilings
PROBLEM_MAX = 2000
PLAN_MAX = 2000
VISIT_PURPOSE_MAX = 100
VISIT_CONTENT_MAX = 1000
VISIT_RESULT_MAX = 200
COMMENT_MAX = 500
CUSTOMER_NAME_MAX = 100
ADDRESS_MAX = 200
PHONE_MAX = 20
CONTACT_PERSON_MAX = 50


@dataclass
class VisitInput:
    customer_id: int
    visit_content: str
    visit_time: time | None = None
    visit_purpose: str | None = None
    visit_result: str | None = None


@dataclass
class ReportInput:
    report_date: date
    status: ReportStatus = ReportStatus.DRAFT
    problem: str | None = None
    plan: str | None = None
    visits: list[VisitInput] = field(default_factory=list)


@dataclass
class CustomerInput:
    customer_name: str
    address: str | None = None
    phone: str | None = None
    contact_person: str | None = None


# ── Field readers ────────────────────────────────────────────────────────


class _Errors:
    """Collects field errors so one response reports every bad field."""

    def __init__(self):
        self.details: dict[str, str] = {}

    def add(self, name, message):
        self.details.setdefault(name, message)

    def raise_if_any(self, message="Invalid request payload"):
        if self.details:
            raise ValidationError(message, details=self.details)


def _require_object(data, what="Request body"):
    if not isinstance(data, dict):
        raise ValidationError(f"{what} must be a JSON object")
    return data


def _text(data, name, errors, *, max_len, required=False, prefix=""):
    key = f"{prefix}{name}"
    value = data.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            errors.add(key, "is required")
        return None
    if not isinstance(value, str):
        errors.add(key, "must be a string")
        return None
    if len(value) > max_len:
        errors.add(key, f"must be at most {max_len} characters")
        return None
    return value


def _positive_int(data, name, errors, *, prefix=""):
    key = f"{prefix}{name}"
    value = data.get(name)
    if value is None:
        errors.add(key, "is required")
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        errors.add(key, "must be a positive integer")
        return None
    return value


# ── Parsers ──────────────────────────────────────────────────────────────


def _parse_visit(data, errors, prefix=""):
    if not isinstance(data, dict):
        errors.add(prefix.rstrip("."), "must be an object")
        return None
    customer_id = _positive_int(data, "customer_id", errors, prefix=prefix)
    content = _text(data, "visit_content", errors, max_len=VISIT_CONTENT_MAX, required=True, prefix=prefix)
    purpose = _text(data, "visit_purpose", errors, max_len=VISIT_PURPOSE_MAX, prefix=prefix)
    result = _text(data, "visit_result", errors, max_len=VISIT_RESULT_MAX, prefix=prefix)
    try:
        visit_time = parse_visit_time(data.get("visit_time"))
    except ValueError as exc:
        errors.add(f"{prefix}visit_time", str(exc))
        visit_time = None
    if customer_id is None or content is None:
        return None
    return VisitInput(
        customer_id=customer_id,
        visit_content=content,
        visit_time=visit_time,
        visit_purpose=purpose,
        visit_result=result,
    )


def parse_visit_input(data) -> VisitInput:
    _require_object(data)
    errors = _Errors()
    visit = _parse_visit(data, errors)
    errors.raise_if_any("Invalid visit record")
    return visit


def parse_report_input(data) -> ReportInput:
    """Parse a create/update report body.

    ``status`` may only be ``draft`` or ``submitted`` here; confirmation goes
    through the status endpoint.
    """
    _require_object(data)
    errors = _Errors()

    report_date = None
    if data.get("report_date") in (None, ""):
        errors.add("report_date", "is required")
    else:
        try:
            report_date = parse_date_input(data.get("report_date"))
        except ValueError as exc:
            errors.add("report_date", str(exc))

    status = ReportStatus.DRAFT
    raw_status = data.get("status", ReportStatus.DRAFT.value)
    try:
        status = ReportStatus(raw_status)
    except ValueError:
        errors.add("status", "must be one of draft, submitted")
    else:
        if status not in OWNER_WRITABLE_STATUSES:
            errors.add("status", "must be one of draft, submitted")

    problem = _text(data, "problem", errors, max_len=PROBLEM_MAX)
    plan = _text(data, "plan", errors, max_len=PLAN_MAX)

    visits = []
    raw_visits = data.get("visits")
    if raw_visits is None:
        raw_visits = []
    if not isinstance(raw_visits, list):
        errors.add("visits", "must be a list")
    else:
        for index, raw in enumerate(raw_visits):
            visit = _parse_visit(raw, errors, prefix=f"visits[{index}].")
            if visit is not None:
                visits.append(visit)

    errors.raise_if_any()
    return ReportInput(report_date=report_date, status=status, problem=problem, plan=plan, visits=visits)


def parse_status_input(data) -> str:
    _require_object(data)
    status = data.get("status")
    if status not in ReportStatus.values():
        raise ValidationError(
            "Invalid status",
            details={"status": f"must be one of {', '.join(ReportStatus.values())}"},
        )
    return status


def parse_comment_input(data) -> str:
    _require_object(data)
    errors = _Errors()
    text = _text(data, "comment_text", errors, max_len=COMMENT_MAX, required=True)
    errors.raise_if_any("Invalid comment")
    return text


def parse_customer_input(data) -> CustomerInput:
    _require_object(data)
    errors = _Errors()
    name = _text(data, "customer_name", errors, max_len=CUSTOMER_NAME_MAX, required=True)
    address = _text(data, "address", errors, max_len=ADDRESS_MAX)
    phone = _text(data, "phone", errors, max_len=PHONE_MAX)
    contact = _text(data, "contact_person", errors, max_len=CONTACT_PERSON_MAX)
    errors.raise_if_any("Invalid customer")
    return CustomerInput(customer_name=name.strip(), address=address, phone=phone, contact_person=contact)


# ── Query-string filters ─────────────────────────────────────────────────

REPORT_SORT_FIELDS = ("report_date", "created_at")
CUSTOMER_SORT_FIELDS = ("customer_name", "created_at")
SORT_ORDERS = ("asc", "desc")


@dataclass
class ReportFilters:
    date_from: date | None = None
    date_to: date | None = None
    status: ReportStatus | None = None
    sales_person_id: int | None = None
    sort: str = "report_date"
    order: str = "desc"


def _choice(args, name, choices, default, errors):
    value = args.get(name) or default
    if value not in choices:
        errors.add(name, f"must be one of {', '.join(choices)}")
        return default
    return value


def parse_report_filters(args) -> ReportFilters:
    """Parse the report list query string (``request.args``)."""
    errors = _Errors()
    filters = ReportFilters()

    for name in ("date_from", "date_to"):
        try:
            setattr(filters, name, parse_date_input(args.get(name)))
        except ValueError as exc:
            errors.add(name, str(exc))

    raw_status = args.get("status")
    if raw_status:
        try:
            filters.status = ReportStatus(raw_status)
        except ValueError:
            errors.add("status", f"must be one of {', '.join(ReportStatus.values())}")

    raw_owner = args.get("sales_person_id")
    if raw_owner:
        try:
            filters.sales_person_id = int(raw_owner)
        except ValueError:
            errors.add("sales_person_id", "must be an integer")

    filters.sort = _choice(args, "sort", REPORT_SORT_FIELDS, "report_date", errors)
    filters.order = _choice(args, "order", SORT_ORDERS, "desc", errors)

    if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
        errors.add("date_to", "must not be before date_from")

    errors.raise_if_any("Invalid query parameters")
    return filters


def parse_customer_filters(args) -> dict:
    errors = _Errors()
    filters = {
        "name": (args.get("customer_name") or "").strip() or None,
        "sort": _choice(args, "sort", CUSTOMER_SORT_FIELDS, "customer_name", errors),
        "order": _choice(args, "order", SORT_ORDERS, "asc", errors),
    }
    errors.raise_if_any("Invalid query parameters")
    return filters
