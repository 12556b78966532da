"""
API routes for the online judge.
"""

from fastapi import APIRouter

from onlinejudge.api.problems import router as problems_router
from onlinejudge.api.submissions import router as submissions_router
from onlinejudge.api.users import router as users_router

# Create main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(problems_router, prefix="/problems", tags=["Problems"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(submissions_router, prefix="/submissions", tags=["Submissions"])
