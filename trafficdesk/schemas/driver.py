from pydantic import BaseModel, EmailStr, Field


class DriverCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    licenseNumber: str = Field(..., min_length=1)
    vehicleNumber: str = Field(..., min_length=1)
    phoneNumber: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)


class DriverResponse(BaseModel):
    id: int
    name: str
    email: str
    licenseNumber: str
    vehicleNumber: str
    phoneNumber: str
    address: str
    offences: int
    status: str
