"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from academy.models.player import PlayerPerformance  # noqa: F401
from academy.models.training_session import TrainingSession  # noqa: F401
