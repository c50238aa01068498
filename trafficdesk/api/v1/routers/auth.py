from fastapi import APIRouter, Depends

from trafficdesk.api.v1.serializers import user_out
from trafficdesk.core.security import get_current_user
from trafficdesk.models.user import User
from trafficdesk.schemas.user import UserOut

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.get("/me", response_model=UserOut)
async def get_me(user: User = Depends(get_current_user)):
    """The identity the presented token resolves to"""
    return user_out(user)
