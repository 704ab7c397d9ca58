"""
Health check route - public, no workbook call required.
"""
from fastapi import APIRouter

from supply_orders import __version__

router = APIRouter()


@router.get(
    "",
    summary="System health check",
)
async def health_check():
    """
    Check system health status.

    Reports which collaborators are configured. Does not contact Google
    Sheets or the mail server.
    """
    health = {
        "status": "healthy",
        "service": "Supply Order API",
        "version": __version__,
        "components": {}
    }

    try:
        from supply_orders import config
        health["components"]["config"] = "ok"
    except Exception as e:
        health["components"]["config"] = f"error: {str(e)}"
        health["status"] = "degraded"
        return health

    health["components"]["sheets"] = "configured" if config.GOOGLE_SHEET_ID else "not configured"
    if not config.GOOGLE_SHEET_ID:
        health["status"] = "degraded"

    if not config.ENABLE_ORDER_EMAILS:
        health["components"]["email"] = "disabled"
    elif config.SMTP_HOST and config.ORDER_NOTIFY_RECIPIENTS:
        health["components"]["email"] = "configured"
    else:
        health["components"]["email"] = "not configured"

    return health
