"""
Daily Sales Report Service
SQLAlchemy extension instance and model registry.

Models import ``db`` from here; importing the submodules below registers
every table on ``db.metadata`` for ``db.create_all()`` and Alembic.
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def import_all_models():
    """Import every model module so the metadata is complete."""
    from dailyreport.models import sales_person as _sales_person_models  # noqa: F401
    from dailyreport.models import customer as _customer_models          # noqa: F401
    from dailyreport.models import report as _report_models              # noqa: F401
