"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from finance_tracker.tracker import FinanceTracker


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_tracker(request: Request) -> FinanceTracker:
    """Provide the application's single tracker instance"""
    return request.app.state.tracker
