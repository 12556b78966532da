"""Middleware components for the application."""

from onlinejudge.middleware.rate_limiter import limiter, rate_limit_exceeded_handler

__all__ = ["limiter", "rate_limit_exceeded_handler"]
