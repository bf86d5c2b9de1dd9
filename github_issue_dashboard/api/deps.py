"""Request-scoped access to the process services."""

from fastapi import Request

from ..services import DashboardServices


def get_services(request: Request) -> DashboardServices:
    return request.app.state.services
