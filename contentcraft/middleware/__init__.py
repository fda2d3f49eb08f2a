"""HTTP middleware."""
from contentcraft.middleware.correlation_id import HEADER_CORRELATION_ID, HEADER_SESSION_ID, CorrelationIdMiddleware

__all__ = ["HEADER_CORRELATION_ID", "HEADER_SESSION_ID", "CorrelationIdMiddleware"]
