"""
Health check route - public, no authentication required.
"""
from fastapi import APIRouter, Request

router = APIRouter()


@router.get(
    "",
    summary="System health check",
)
def health_check(request: Request):
    """
    Check system health status.

    Reports whether configuration loaded, whether the order store is
    connected and whether a writer currently holds the sheet lock.
    """
    health = {
        "status": "healthy",
        "service": "Sheet Order Tracker API",
        "version": "1.0.0",
        "components": {}
    }

    try:
        import config
        health["components"]["config"] = "ok" if config.GOOGLE_SHEET_ID else "missing GOOGLE_SHEET_ID"
    except Exception as e:
        health["components"]["config"] = f"error: {str(e)}"
        health["status"] = "degraded"

    store = getattr(request.app.state, "order_store", None)
    if store is None:
        health["components"]["sheets"] = "unavailable"
        health["status"] = "degraded"
    else:
        health["components"]["sheets"] = "connected"
        health["components"]["write_lock"] = "busy" if store.lock.locked() else "free"

    return health
