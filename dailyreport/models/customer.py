"""
Daily Sales Report Service
Customer master data.

Visit records reference customers by id only. Nothing about a customer is
copied into a visit, so renaming a customer shows up in every report that
mentions it the next time the report is read.

Name uniqueness ignores case for every script, not only ASCII: the unique
``customer_name_key`` column holds ``casefold()`` of the name and is kept in
step with ``customer_name`` on every assignment.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import validates

from dailyreport.models import db


def name_key(name: str) -> str:
    return name.casefold()


class Customer(db.Model):
    """A customer that salespeople visit."""

    __tablename__ = "customers"

    id = db.Column(db.Integer, primary_key=True)
    customer_name = db.Column(db.String(100), nullable=False)
    customer_name_key = db.Column(db.String(400), nullable=False, comment="casefold(customer_name)")
    address = db.Column(db.String(200), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    contact_person = db.Column(db.String(50), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint("customer_name_key", name="uq_customers_name_key"),
    )

    @validates("customer_name")
    def _sync_name_key(self, key, value):
        self.customer_name_key = name_key(value) if value is not None else None
        return value

    def to_dict(self):
        return {
            "customer_id": self.id,
            "customer_name": self.customer_name,
            "address": self.address,
            "phone": self.phone,
            "contact_person": self.contact_person,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Customer {self.id}: {self.customer_name[:40]}>"
