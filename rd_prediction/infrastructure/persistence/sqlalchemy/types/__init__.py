from rd_prediction.infrastructure.persistence.sqlalchemy.types.json_type import JSONType

__all__ = ["JSONType"]
