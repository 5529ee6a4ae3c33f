"""
HTTP route layer.

Validates requests at the edge and delegates to TutorService.
"""

from .assess import router as assess_router
from .chat import router as chat_router
from .upload import UPLOADS_MOUNT, router as upload_router

__all__ = ["assess_router", "chat_router", "upload_router", "UPLOADS_MOUNT"]
