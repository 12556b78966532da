"""
Shared FastAPI dependencies for the judge services.

The dispatcher is created once at startup and kept on ``app.state``;
tests replace it through ``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from onlinejudge.services.dispatcher import Dispatcher
from onlinejudge.services.requeue import RequeueCoordinator


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


def get_requeue_coordinator(dispatcher: Dispatcher = Depends(get_dispatcher)) -> RequeueCoordinator:
    return RequeueCoordinator(dispatcher)
