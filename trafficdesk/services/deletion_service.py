"""
Two-phase offense deletion.

An offense is never deleted directly. A deletion request is submitted first
and a superadmin then approves it (the offense is removed) or rejects it (the
offense stays and can be requested again)::

    offense.deletion_requested  False --submit--> True, request PENDING
    request PENDING --approve--> APPROVED   offense removed
    request PENDING --reject---> REJECTED   offense flag cleared

Both transitions are conditional writes, so concurrent callers cannot open two
requests for one offense or resolve the same request twice. The flag change,
the request write and the audit entry are committed together or not at all.
"""
import logging
from typing import List, Optional, Tuple, Union

from sqlalchemy import desc, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.core.constants import (
    DECISION_AUDIT_ACTIONS,
    DELETION_DECISIONS,
    AuditAction,
    DeletionRequestStatus,
)
from trafficdesk.core.exceptions import (
    DeletionRequestNotFoundError,
    DuplicateDeletionRequestError,
    OffenseNotFoundError,
    RequestAlreadyResolvedError,
    ValidationError,
)
from trafficdesk.core.permissions import Action, ensure_access, ensure_capability
from trafficdesk.models.base import utcnow
from trafficdesk.models.deletion_request import DeletionRequest
from trafficdesk.models.offenses import TrafficOffense
from trafficdesk.models.user import User
from trafficdesk.services import audit_service, offense_store
from trafficdesk.services.transaction import atomic

logger = logging.getLogger(__name__)

QueueRow = Tuple[DeletionRequest, Optional[TrafficOffense]]


def clean_reason(reason: Optional[str]) -> str:
    if reason is None or not str(reason).strip():
        raise ValidationError("A reason is required to request deletion", field="reason")
    return str(reason).strip()


def parse_decision(decision: Union[str, DeletionRequestStatus, None]) -> DeletionRequestStatus:
    if isinstance(decision, str):
        try:
            decision = DeletionRequestStatus(decision.strip().lower())
        except ValueError:
            decision = None
    if decision not in DELETION_DECISIONS:
        raise ValidationError("Invalid status", field="status")
    return decision


async def submit_deletion_request(
    db: AsyncSession,
    actor: User,
    offense_id: int,
    reason: Optional[str],
    ip_address: Optional[str] = None,
) -> DeletionRequest:
    reason = clean_reason(reason)

    offense = await offense_store.find_by_id(db, offense_id)
    if not offense:
        raise OffenseNotFoundError(offense_id)

    ensure_access(actor, Action.REQUEST_DELETION, offense.driver_email)

    async with atomic(db, "create deletion request"):
        if not await offense_store.mark_deletion_requested(db, offense.id, actor.id, reason):
            # Zero rows also means the offense was removed after it was read
            if await offense_store.find_by_id(db, offense.id) is None:
                raise OffenseNotFoundError(offense.id)
            raise DuplicateDeletionRequestError(offense.id)

        request = DeletionRequest(
            offense_id=offense.id,
            requested_by=actor.id,
            reason=reason,
            status=DeletionRequestStatus.PENDING,
            timestamp=utcnow(),
            original_offense=offense.snapshot(),
        )
        db.add(request)
        try:
            await db.flush()
        except IntegrityError as exc:
            raise DuplicateDeletionRequestError(offense.id) from exc

        await audit_service.record(
            db,
            actor.id,
            AuditAction.DELETION_REQUESTED,
            {
                "requestId": request.id,
                "offenseId": offense.id,
                "reason": reason,
                "requestedBy": actor.email,
                "originalData": request.original_offense,
            },
            ip_address,
        )

    logger.info("Deletion of offense %s requested by user %s (request %s)", offense.id, actor.id, request.id)
    return request


async def close_request(
    db: AsyncSession,
    request_id: int,
    decision: DeletionRequestStatus,
    resolved_by: int,
) -> bool:
    """Move a request out of PENDING. False when it was no longer pending."""
    result = await db.execute(
        update(DeletionRequest)
        .where(
            DeletionRequest.id == request_id,
            DeletionRequest.status == DeletionRequestStatus.PENDING,
        )
        .values(status=decision, resolved_by=resolved_by, resolved_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def resolve_deletion_request(
    db: AsyncSession,
    actor: User,
    request_id: int,
    decision: Union[str, DeletionRequestStatus],
    ip_address: Optional[str] = None,
) -> DeletionRequest:
    ensure_capability(actor, Action.RESOLVE_DELETION)
    decision = parse_decision(decision)

    request = await db.get(DeletionRequest, request_id, populate_existing=True)
    if not request:
        raise DeletionRequestNotFoundError(request_id)

    async with atomic(db, "update deletion request"):
        if not await close_request(db, request.id, decision, actor.id):
            current = await db.scalar(select(DeletionRequest.status).where(DeletionRequest.id == request.id))
            raise RequestAlreadyResolvedError(request.id, current.value if current else None)

        if decision is DeletionRequestStatus.APPROVED:
            offense_removed = await offense_store.remove(db, request.offense_id)
        else:
            await offense_store.clear_deletion_request(db, request.offense_id)
            offense_removed = False

        await audit_service.record(
            db,
            actor.id,
            DECISION_AUDIT_ACTIONS[decision],
            {
                "requestId": request.id,
                "offenseId": request.offense_id,
                "offenseRemoved": offense_removed,
                "originalOffense": request.original_offense,
            },
            ip_address,
        )

    await db.refresh(request)
    logger.info("Deletion request %s %s by user %s", request.id, decision.value, actor.id)
    return request


def _queue_query():
    return (
        select(DeletionRequest, TrafficOffense)
        .join(TrafficOffense, TrafficOffense.id == DeletionRequest.offense_id, isouter=True)
        .execution_options(populate_existing=True)
    )


async def list_deletion_requests(
    db: AsyncSession,
    actor: User,
    status: Optional[DeletionRequestStatus] = None,
) -> List[QueueRow]:
    """All requests, newest first, each paired with its live offense if any."""
    ensure_capability(actor, Action.VIEW_DELETION_QUEUE)

    query = _queue_query()
    if status is not None:
        query = query.where(DeletionRequest.status == status)
    query = query.order_by(desc(DeletionRequest.timestamp), desc(DeletionRequest.id))

    result = await db.execute(query)
    return [(request, offense) for request, offense in result.all()]


async def get_deletion_request(db: AsyncSession, actor: User, request_id: int) -> QueueRow:
    ensure_capability(actor, Action.VIEW_DELETION_QUEUE)

    result = await db.execute(_queue_query().where(DeletionRequest.id == request_id))
    row = result.first()
    if not row:
        raise DeletionRequestNotFoundError(request_id)

    request, offense = row
    return request, offense
