"""Customer master data service.

Customers are referenced by visit records through ``customer_id`` only, so a
rename is visible everywhere immediately and nothing has to be rewritten.
Deletion is guarded: a customer with at least one visit is reported as in
use, and the ``ON DELETE RESTRICT`` foreign key catches anything the count
missed.

Names are unique case-insensitively ("Acme" and "ACME", "École" and "école"
clash). Both the check and the search run against the casefolded
``customer_name_key`` column, whose unique constraint backs up the check.
"""
import logging

from sqlalchemy import func, select

from dailyreport.core.exceptions import DuplicateEntryError, NotFoundError, ResourceInUseError
from dailyreport.models import db
from dailyreport.models.customer import Customer, name_key
from dailyreport.models.report import VisitRecord
from dailyreport.services.helpers.transactions import unit_of_work

logger = logging.getLogger(__name__)


def _duplicate(name: str) -> DuplicateEntryError:
    return DuplicateEntryError("Customer", "customer_name", name)


def get_customer(customer_id: int) -> Customer:
    customer = db.session.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError(resource="Customer", resource_id=customer_id)
    return customer


def build_customer_query(name: str | None = None, sort: str = "customer_name", order: str = "asc"):
    q = Customer.query
    if name:
        q = q.filter(Customer.customer_name_key.contains(name_key(name), autoescape=True))
    column = Customer.created_at if sort == "created_at" else Customer.customer_name
    ordering = column.desc() if order == "desc" else column.asc()
    return q.order_by(ordering, Customer.id.asc())


def check_name_available(name: str, exclude_id: int | None = None) -> None:
    stmt = select(Customer.id).where(Customer.customer_name_key == name_key(name))
    if exclude_id is not None:
        stmt = stmt.where(Customer.id != exclude_id)
    if db.session.execute(stmt).first() is not None:
        raise _duplicate(name)


def create_customer(data) -> Customer:
    check_name_available(data.customer_name)
    customer = Customer(
        customer_name=data.customer_name,
        address=data.address,
        phone=data.phone,
        contact_person=data.contact_person,
    )
    with unit_of_work(conflict=lambda: _duplicate(data.customer_name)):
        db.session.add(customer)

    logger.info("Customer created: customer=%s", customer.id, extra={"customer_id": customer.id})
    return customer


def update_customer(customer_id: int, data) -> Customer:
    """Replace a customer's fields. Visits keep pointing at the same id."""
    customer = get_customer(customer_id)
    check_name_available(data.customer_name, exclude_id=customer.id)

    with unit_of_work(conflict=lambda: _duplicate(data.customer_name)):
        customer.customer_name = data.customer_name
        customer.address = data.address
        customer.phone = data.phone
        customer.contact_person = data.contact_person

    logger.info("Customer updated: customer=%s", customer.id, extra={"customer_id": customer.id})
    return customer


def count_references(customer_id: int) -> int:
    stmt = select(func.count(VisitRecord.id)).where(VisitRecord.customer_id == customer_id)
    return db.session.execute(stmt).scalar_one()


def delete_customer(customer_id: int) -> None:
    customer = get_customer(customer_id)
    references = count_references(customer.id)
    if references > 0:
        logger.info(
            "Customer delete blocked: customer=%s references=%d", customer.id, references,
            extra={"customer_id": customer.id},
        )
        raise ResourceInUseError("Customer", customer.id, reference_count=references)

    # a visit inserted after the count still trips ON DELETE RESTRICT
    with unit_of_work(in_use=lambda: ResourceInUseError("Customer", customer_id)):
        db.session.delete(customer)

    logger.info("Customer deleted: customer=%s", customer_id, extra={"customer_id": customer_id})
