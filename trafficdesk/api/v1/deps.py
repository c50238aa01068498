from typing import Optional

from fastapi import Request

from trafficdesk.core.config import settings


def client_ip(request: Request) -> Optional[str]:
    """Caller address for audit entries; forwarded headers count only from trusted proxies."""
    peer = request.client.host if request.client else None
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and peer in settings.TRUSTED_PROXIES:
        # The trusted proxy appends the address it saw
        return forwarded.split(",")[-1].strip()
    return peer
