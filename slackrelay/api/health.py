"""Health endpoint.

Exposes:
- GET /health: lightweight liveness probe; does not read the config file.
"""

from fastapi import APIRouter

from slackrelay import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Container/load-balancer friendly health probe."""
    return {"status": "healthy", "version": __version__}
