"""Demo data for local development (``flask seed-demo``).

Builds a three-level hierarchy (director -> two team managers -> members),
five customers and a handful of reports in different statuses so every
screen has something to show. Refuses to run on a non-empty database.
"""
import logging
from datetime import date, time, timedelta

from sqlalchemy import func, select

from dailyreport.models import db
from dailyreport.models.customer import Customer
from dailyreport.models.report import Comment, DailyReport, ReportStatus, VisitRecord
from dailyreport.models.sales_person import SalesPerson

logger = logging.getLogger(__name__)

_PEOPLE = [
    # key, name, email, department, is_manager, manager key
    ("director", "Taro Yamada", "yamada@example.com", "Sales", True, None),
    ("lead1", "Ichiro Suzuki", "suzuki@example.com", "Sales 1", True, "director"),
    ("lead2", "Hanako Sato", "sato@example.com", "Sales 2", True, "director"),
    ("member1", "Jiro Tanaka", "tanaka@example.com", "Sales 1", False, "lead1"),
    ("member2", "Saburo Takahashi", "takahashi@example.com", "Sales 1", False, "lead1"),
    ("member3", "Misaki Ito", "ito@example.com", "Sales 2", False, "lead2"),
]

_CUSTOMERS = [
    ("ABC Corporation", "1-1-1 Shibuya, Tokyo", "03-1234-5678", "Nakamura"),
    ("XYZ Inc.", "2-2-2 Shinjuku, Tokyo", "03-2345-6789", "Kobayashi"),
    ("DEF Industries", "3-3-3 Umeda, Osaka", "06-3456-7890", "Kato"),
    ("GHI Trading", "4-4-4 Sakae, Nagoya", "052-4567-8901", "Watanabe"),
    ("JKL Solutions", "5-5-5 Hakata, Fukuoka", "092-5678-9012", "Yamamoto"),
]


class SeedError(RuntimeError):
    pass


def seed_demo(today: date | None = None) -> dict:
    """Insert the demo data set and return row counts per table."""
    if db.session.execute(select(func.count(SalesPerson.id))).scalar_one():
        raise SeedError("Database already contains sales persons; refusing to seed")

    today = today or date.today()
    yesterday = today - timedelta(days=1)

    people = {}
    for key, name, email, department, is_manager, manager_key in _PEOPLE:
        person = SalesPerson(
            name=name,
            email=email,
            department=department,
            is_manager=is_manager,
            manager=people.get(manager_key),
        )
        db.session.add(person)
        people[key] = person

    customers = [
        Customer(customer_name=n, address=a, phone=p, contact_person=c)
        for n, a, p, c in _CUSTOMERS
    ]
    db.session.add_all(customers)
    db.session.flush()

    submitted = DailyReport(
        sales_person_id=people["member1"].id,
        report_date=yesterday,
        status=ReportStatus.SUBMITTED.value,
        problem="A competitor announced a new product; customers are asking for comparisons.",
        plan="Prepare a comparison sheet for tomorrow's visits.",
        visits=[
            VisitRecord(customer_id=customers[0].id, visit_time=time(10, 0), visit_purpose="Regular visit",
                        visit_content="Checked last month's delivery; running without issues.",
                        visit_result="Considering an additional order next month"),
            VisitRecord(customer_id=customers[1].id, visit_time=time(14, 0), visit_purpose="Proposal",
                        visit_content="Presented the new product line to the purchasing team.",
                        visit_result="Quote requested"),
        ],
    )
    confirmed = DailyReport(
        sales_person_id=people["member2"].id,
        report_date=yesterday,
        status=ReportStatus.CONFIRMED.value,
        plan="Follow up on the quote.",
        visits=[
            VisitRecord(customer_id=customers[2].id, visit_time=time(11, 30), visit_purpose="Follow-up",
                        visit_content="Discussed delivery schedule for the pending order."),
        ],
    )
    draft = DailyReport(
        sales_person_id=people["member3"].id,
        report_date=today,
        status=ReportStatus.DRAFT.value,
        visits=[
            VisitRecord(customer_id=customers[3].id, visit_content="Introductory meeting."),
        ],
    )
    db.session.add_all([submitted, confirmed, draft])
    db.session.flush()

    db.session.add(Comment(
        report_id=confirmed.id,
        sales_person_id=people["lead1"].id,
        comment_text="Good follow-up. Please share the schedule with logistics.",
    ))
    db.session.commit()

    counts = {
        "sales_persons": len(people),
        "customers": len(customers),
        "daily_reports": 3,
        "comments": 1,
    }
    logger.info("Demo data seeded: %s", counts)
    return counts
