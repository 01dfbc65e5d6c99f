"""SQLAlchemy models. Importing this package registers every table on Base.metadata."""

from rd_prediction.infrastructure.persistence.sqlalchemy.config.base import Base
from rd_prediction.infrastructure.persistence.sqlalchemy.models.prediction import PredictionModel
from rd_prediction.infrastructure.persistence.sqlalchemy.models.user import UserModel

__all__ = ["Base", "PredictionModel", "UserModel"]
