from rd_prediction.infrastructure.security.jwt.jwt_service import JWTService, TokenPayload

__all__ = ["JWTService", "TokenPayload"]
