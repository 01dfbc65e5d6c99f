from rd_prediction.presentation.middleware.request_id import RequestIdMiddleware
from rd_prediction.presentation.middleware.security_headers import SecurityHeadersMiddleware

__all__ = ["RequestIdMiddleware", "SecurityHeadersMiddleware"]
