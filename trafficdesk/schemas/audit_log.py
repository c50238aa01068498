from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class AuditLogEntryResponse(BaseModel):
    id: int
    userId: int
    action: str
    details: Dict[str, Any]
    timestamp: datetime
    ipAddress: Optional[str] = None
