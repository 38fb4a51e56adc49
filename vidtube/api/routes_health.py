"""Health check endpoint for the VidTube API."""

from fastapi import APIRouter

from vidtube.api.responses import api_response

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/healthcheck")
async def health_check():
    """
    Health check endpoint.

    Returns:
        The success envelope with a simple status object
    """
    return api_response({"status": "OK"}, "Health check passed")
