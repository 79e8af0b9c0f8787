"""
Daily Sales Report Service
Sales person identity facts.

Rows are maintained by the HR / account-administration system; this service
only reads them. The single ``manager_id`` column is the whole hierarchy:
a manager sees the reports of people whose ``manager_id`` points at them,
one hop and no further.
"""

from datetime import datetime, timezone

from dailyreport.models import db


class SalesPerson(db.Model):
    """A salesperson, optionally flagged as a manager."""

    __tablename__ = "sales_persons"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True)
    department = db.Column(db.String(100), nullable=False)
    is_manager = db.Column(db.Boolean, nullable=False, default=False)
    manager_id = db.Column(
        db.Integer,
        db.ForeignKey("sales_persons.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Direct manager; at most one, no cycles",
    )

    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    manager = db.relationship("SalesPerson", remote_side=[id], foreign_keys=[manager_id])

    def to_dict(self):
        return {
            "sales_person_id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "is_manager": self.is_manager,
            "manager_id": self.manager_id,
            "manager_name": self.manager.name if self.manager else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<SalesPerson {self.id}: {self.name}>"
