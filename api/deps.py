from fastapi import HTTPException, Request, status

from agent.tutor import TutorService


def get_tutor(request: Request) -> TutorService:
    """TutorService wired at start-up; 503 until the gateway is ready."""
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Gateway not ready",
        )
    return gateway.tutor
