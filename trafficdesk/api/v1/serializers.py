from typing import Optional

from trafficdesk.models.audit_log import AuditLog
from trafficdesk.models.deletion_request import DeletionRequest
from trafficdesk.models.driver import Driver
from trafficdesk.models.offenses import TrafficOffense
from trafficdesk.models.payment import Payment
from trafficdesk.models.user import User
from trafficdesk.schemas.audit_log import AuditLogEntryResponse
from trafficdesk.schemas.deletion_request import (
    DeletionRequestDetail,
    DeletionRequestResponse,
    RequesterSummary,
)
from trafficdesk.schemas.driver import DriverResponse
from trafficdesk.schemas.offense import OffenseResponse
from trafficdesk.schemas.payment import PaymentResponse
from trafficdesk.schemas.user import UserOut


def user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role.value,
        profileImage=user.profile_image,
        twoFactorEnabled=user.two_factor_enabled,
    )


def audit_entry_response(entry: AuditLog) -> AuditLogEntryResponse:
    return AuditLogEntryResponse(
        id=entry.id,
        userId=entry.user_id,
        action=entry.action.value,
        details=entry.details,
        timestamp=entry.timestamp,
        ipAddress=entry.ip_address,
    )


def driver_response(driver: Driver) -> DriverResponse:
    return DriverResponse(
        id=driver.id,
        name=driver.name,
        email=driver.email,
        licenseNumber=driver.license_number,
        vehicleNumber=driver.vehicle_number,
        phoneNumber=driver.phone_number,
        address=driver.address,
        offences=driver.offence_count,
        status=driver.status.value,
    )


def offense_response(offense: TrafficOffense) -> OffenseResponse:
    return OffenseResponse(
        id=offense.id,
        driverId=offense.driver_id,
        officerId=offense.officer_id,
        driverName=offense.driver_name,
        driverEmail=offense.driver_email,
        vehicleNumber=offense.vehicle_number,
        offenceType=offense.offence_type.value,
        location=offense.location,
        date=offense.date,
        fine=offense.fine,
        status=offense.status.value,
        deletionRequested=offense.deletion_requested,
        deletionRequestedBy=offense.deletion_requested_by,
        deletionRequestReason=offense.deletion_request_reason,
        createdAt=offense.created_at,
    )


def payment_response(payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=payment.id,
        offenseId=payment.offense_id,
        driverName=payment.driver_name,
        driverEmail=payment.driver_email,
        vehicleNumber=payment.vehicle_number,
        amount=payment.amount,
        paymentMethod=payment.payment_method.value,
        status=payment.status.value,
        date=payment.date,
        recordedBy=payment.recorded_by,
    )


def _request_fields(deletion_request: DeletionRequest) -> dict:
    return dict(
        id=deletion_request.id,
        offenseId=deletion_request.offense_id,
        requestedBy=deletion_request.requested_by,
        reason=deletion_request.reason,
        status=deletion_request.status.value,
        timestamp=deletion_request.timestamp,
        resolvedBy=deletion_request.resolved_by,
        resolvedAt=deletion_request.resolved_at,
        originalOffense=deletion_request.original_offense,
    )


def deletion_request_response(deletion_request: DeletionRequest) -> DeletionRequestResponse:
    return DeletionRequestResponse(**_request_fields(deletion_request))


def deletion_request_detail(
    deletion_request: DeletionRequest,
    offense: Optional[TrafficOffense],
) -> DeletionRequestDetail:
    """Queue row: the live offense when it still exists, else only the snapshot."""
    requester = deletion_request.requester
    return DeletionRequestDetail(
        **_request_fields(deletion_request),
        requester=RequesterSummary(id=requester.id, name=requester.name, email=requester.email) if requester else None,
        offense=offense_response(offense) if offense else None,
    )
