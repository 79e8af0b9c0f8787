"""
Shared pytest fixtures for the daily report test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - make_person / make_customer / make_report: ORM row factories
    - org: a small two-team hierarchy with two customers
    - auth_headers: Bearer headers for a sales person
"""

from datetime import date
from types import SimpleNamespace

import pytest

from dailyreport import create_app
from dailyreport.core.identity import Actor
from dailyreport.models import db as _db
from dailyreport.models.customer import Customer
from dailyreport.models.report import DailyReport, ReportStatus, VisitRecord
from dailyreport.models.sales_person import SalesPerson
from dailyreport.services.jwt_service import generate_access_token


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Factories ────────────────────────────────────────────────────────────


@pytest.fixture()
def make_person():
    counter = {"n": 0}

    def _make(name=None, is_manager=False, manager=None, department="Sales"):
        counter["n"] += 1
        person = SalesPerson(
            name=name or f"Person {counter['n']}",
            email=f"person{counter['n']}@example.com",
            department=department,
            is_manager=is_manager,
            manager_id=manager.id if manager is not None else None,
        )
        _db.session.add(person)
        _db.session.commit()
        return person

    return _make


@pytest.fixture()
def make_customer():
    def _make(name, **kw):
        customer = Customer(customer_name=name, **kw)
        _db.session.add(customer)
        _db.session.commit()
        return customer

    return _make


@pytest.fixture()
def make_report():
    """Insert a report directly, bypassing the service rules."""

    def _make(owner, report_date=date(2024, 1, 15), status=ReportStatus.DRAFT, customers=()):
        report = DailyReport(
            sales_person_id=owner.id,
            report_date=report_date,
            status=ReportStatus(status).value,
        )
        _db.session.add(report)
        _db.session.flush()
        for customer in customers:
            _db.session.add(VisitRecord(
                report_id=report.id,
                customer_id=customer.id,
                visit_content=f"Visited {customer.customer_name}",
            ))
        _db.session.commit()
        return report

    return _make


@pytest.fixture()
def org(make_person, make_customer):
    """Director -> (manager M -> owner O, peer P) and (other manager -> outsider)."""
    director = make_person("Director", is_manager=True)
    manager = make_person("Manager M", is_manager=True, manager=director)
    other_manager = make_person("Other Manager", is_manager=True, manager=director)
    owner = make_person("Owner O", manager=manager)
    peer = make_person("Peer P", manager=manager)
    outsider = make_person("Outsider", manager=other_manager)
    c1 = make_customer("Customer One")
    c2 = make_customer("Customer Two")
    return SimpleNamespace(
        director=director,
        manager=manager,
        other_manager=other_manager,
        owner=owner,
        peer=peer,
        outsider=outsider,
        c1=c1,
        c2=c2,
    )


def actor(person):
    return Actor(id=person.id, is_manager=person.is_manager)


@pytest.fixture()
def as_actor():
    return actor


@pytest.fixture()
def auth_headers():
    def _headers(person):
        token = generate_access_token(person.id, person.is_manager)
        return {"Authorization": f"Bearer {token}"}

    return _headers
