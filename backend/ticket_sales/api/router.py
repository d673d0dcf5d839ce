"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from ticket_sales.api.routes import events, tickets, reservations

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(events.router)
api_router.include_router(tickets.router)
api_router.include_router(reservations.router)
