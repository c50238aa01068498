from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import asc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.api.v1.serializers import driver_response
from trafficdesk.core.database import aget_db
from trafficdesk.core.exceptions import DriverNotFoundError, DuplicateVehicleError
from trafficdesk.core.permissions import Action, require
from trafficdesk.models.driver import Driver
from trafficdesk.models.user import User
from trafficdesk.schemas.driver import DriverCreate, DriverResponse
from trafficdesk.services.transaction import atomic

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("", response_model=List[DriverResponse])
async def get_drivers(
    search: Optional[str] = None,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.MANAGE_DRIVERS))
):
    query = select(Driver)
    if search:
        search_term = f"%{search}%"
        query = query.where(
            Driver.name.ilike(search_term)
            | Driver.email.ilike(search_term)
            | Driver.vehicle_number.ilike(search_term)
        )
    query = query.order_by(asc(Driver.name))

    result = await db.execute(query)
    return [driver_response(driver) for driver in result.scalars().all()]


@router.post("", response_model=DriverResponse, status_code=201)
async def create_driver(
    payload: DriverCreate,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.MANAGE_DRIVERS))
):
    existing = await db.execute(select(Driver.id).where(Driver.vehicle_number == payload.vehicleNumber))
    if existing.scalar_one_or_none() is not None:
        raise DuplicateVehicleError(payload.vehicleNumber)

    async with atomic(db, "create driver"):
        driver = Driver(
            name=payload.name,
            email=payload.email.lower(),
            license_number=payload.licenseNumber,
            vehicle_number=payload.vehicleNumber,
            phone_number=payload.phoneNumber,
            address=payload.address,
            offence_count=0,
        )
        db.add(driver)
        try:
            await db.flush()
        except IntegrityError as exc:
            raise DuplicateVehicleError(payload.vehicleNumber) from exc

    return driver_response(driver)


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: int,
    db: AsyncSession = Depends(aget_db),
    user: User = Depends(require(Action.MANAGE_DRIVERS))
):
    driver = await db.get(Driver, driver_id)
    if not driver:
        raise DriverNotFoundError(driver_id)
    return driver_response(driver)
