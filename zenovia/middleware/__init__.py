"""Middleware pipeline"""
from zenovia.middleware.cors import (
    AllowListOriginPolicy,
    DevelopmentOriginPolicy,
    OriginPolicyCORSMiddleware,
    build_origin_policy,
)
from zenovia.middleware.monitoring import AccessLogMiddleware
from zenovia.middleware.rate_limit import (
    GlobalRateLimitMiddleware,
    create_limiter,
    rate_limit_exceeded_handler,
)
from zenovia.middleware.security import BodySizeLimitMiddleware, SecurityHeadersMiddleware

__all__ = [
    "AccessLogMiddleware",
    "AllowListOriginPolicy",
    "BodySizeLimitMiddleware",
    "DevelopmentOriginPolicy",
    "GlobalRateLimitMiddleware",
    "OriginPolicyCORSMiddleware",
    "SecurityHeadersMiddleware",
    "build_origin_policy",
    "create_limiter",
    "rate_limit_exceeded_handler",
]
