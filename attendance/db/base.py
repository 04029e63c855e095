"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here for Alembic to detect them
from attendance.db.models.state_blob import StateBlob  # noqa: F401, E402
