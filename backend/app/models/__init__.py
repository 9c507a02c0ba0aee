"""SQLAlchemy models for the rental dashboard.

All models are imported here so that ``Base.metadata`` knows every table
before ``create_all`` runs. If you add a new model, import it in this file.
"""

from app.models.property import Property
from app.models.reservation import Reservation

__all__ = [
    "Property",
    "Reservation",
]
