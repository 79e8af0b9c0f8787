"""Read-only access to sales person identity facts.

Rows are owned by account administration; this service never writes them.
"""
from sqlalchemy import func

from dailyreport.core.exceptions import NotFoundError
from dailyreport.models import db
from dailyreport.models.sales_person import SalesPerson


def get_sales_person(sales_person_id: int) -> SalesPerson:
    person = db.session.get(SalesPerson, sales_person_id)
    if person is None:
        raise NotFoundError(resource="SalesPerson", resource_id=sales_person_id)
    return person


def build_sales_person_query(name=None, department=None, is_manager=None):
    """Filter by partial name / department (case-insensitive) and manager flag."""
    q = SalesPerson.query
    if name:
        q = q.filter(func.lower(SalesPerson.name).contains(name.lower(), autoescape=True))
    if department:
        q = q.filter(func.lower(SalesPerson.department).contains(department.lower(), autoescape=True))
    if is_manager is not None:
        q = q.filter(SalesPerson.is_manager.is_(is_manager))
    return q.order_by(SalesPerson.id.asc())
