from rd_prediction.infrastructure.persistence.sqlalchemy.config.base import Base, TimestampMixin, utcnow

__all__ = ["Base", "TimestampMixin", "utcnow"]
