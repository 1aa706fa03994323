"""
Service information endpoints
"""

from fastapi import APIRouter

from app.core.config import config

router = APIRouter()


@router.get("/")
async def root():
    return {
        "service": config.service_name,
        "version": config.service_version,
        "environment": config.environment,
        "message": "Catalog Service is running",
        "status": "operational",
        "collections": {
            "categories": "/categories",
            "products": "/product",
            "search": "/search/{collection}/{term}",
        },
    }


@router.get("/version")
def get_version():
    """Deployed version, for rollout checks"""
    return {"version": config.service_version, "service": config.service_name}
