"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from paycycle.infrastructure.clients.text_extraction import TextExtractionClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_text_extraction_client() -> TextExtractionClient:
    """Provide text extraction client instance"""
    return TextExtractionClient()
