"""
Health check endpoint.
Reports which storage providers are usable.
"""
from fastapi import APIRouter, Depends, HTTPException

from uploader.api.deps import get_registry
from uploader.storage.factory import ProviderRegistry

router = APIRouter()


@router.get("")
def health_check(registry: ProviderRegistry = Depends(get_registry)):
    """
    Health check endpoint.
    Returns per-provider usability; 503 when no provider can serve requests.
    """
    health_status = {
        "status": "healthy",
        "providers": {},
    }

    for provider, client in registry.items():
        if client.is_usable:
            health_status["providers"][provider.value] = "configured"
        else:
            health_status["providers"][provider.value] = f"unavailable: {client.reason}"

    if not any(client.is_usable for client in registry.values()):
        health_status["status"] = "unhealthy"
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
