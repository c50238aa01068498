import pytest
from httpx import AsyncClient
from sqlalchemy import select

from trafficdesk.core.constants import AuditAction
from trafficdesk.models import AuditLog, Driver

BASE = '/api/v1'
DRIVER_EMAIL = 'a@x.com'
DRIVER_VEHICLE = 'GR-1234-24'


class TestCreateOffense:
    """POST /offenses"""

    @pytest.mark.asyncio
    async def test_officer_records_offense(self, client: AsyncClient, headers_for, officer, registered_driver, session_factory):
        response = await client.post(
            f'{BASE}/offenses',
            json={
                'vehicleNumber': DRIVER_VEHICLE,
                'offenceType': 'Red Light',
                'location': 'Kwame Nkrumah Circle',
                'fine': 250,
            },
            headers=headers_for(officer),
        )

        assert response.status_code == 201
        data = response.json()
        assert data['driverEmail'] == DRIVER_EMAIL
        assert data['driverName'] == registered_driver.name
        assert data['status'] == 'Unpaid'
        assert data['officerId'] == officer.id
        assert data['deletionRequested'] is False

        async with session_factory() as db:
            driver = await db.get(Driver, registered_driver.id)
            audit = await db.execute(select(AuditLog).where(AuditLog.action == AuditAction.OFFENSE_CREATED))
        assert driver.offence_count == 1
        assert audit.scalar_one().details['offenseId'] == data['id']

    @pytest.mark.asyncio
    async def test_unknown_vehicle(self, client: AsyncClient, headers_for, officer):
        response = await client.post(
            f'{BASE}/offenses',
            json={'vehicleNumber': 'XX-0000-00', 'offenceType': 'Parking', 'location': 'Osu', 'fine': 50},
            headers=headers_for(officer),
        )
        assert response.status_code == 404
        assert response.json()['code'] == 'DRIVER_NOT_FOUND'

    @pytest.mark.asyncio
    async def test_driver_cannot_record(self, client: AsyncClient, headers_for, driver_user, registered_driver):
        response = await client.post(
            f'{BASE}/offenses',
            json={'vehicleNumber': DRIVER_VEHICLE, 'offenceType': 'Parking', 'location': 'Osu', 'fine': 50},
            headers=headers_for(driver_user),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_fine_must_be_positive(self, client: AsyncClient, headers_for, officer, registered_driver):
        response = await client.post(
            f'{BASE}/offenses',
            json={'vehicleNumber': DRIVER_VEHICLE, 'offenceType': 'Parking', 'location': 'Osu', 'fine': 0},
            headers=headers_for(officer),
        )
        assert response.status_code == 422


class TestReadOffenses:
    """GET /offenses and /offenses/{id}"""

    @pytest.mark.asyncio
    async def test_driver_sees_only_own(self, client: AsyncClient, headers_for, driver_user, other_driver, offense):
        own = await client.get(f'{BASE}/offenses', headers=headers_for(driver_user))
        foreign = await client.get(f'{BASE}/offenses', headers=headers_for(other_driver))

        assert [row['id'] for row in own.json()] == [offense.id]
        assert foreign.json() == []

    @pytest.mark.asyncio
    async def test_driver_cannot_open_foreign_offense(self, client: AsyncClient, headers_for, other_driver, offense):
        response = await client.get(f'{BASE}/offenses/{offense.id}', headers=headers_for(other_driver))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_staff_see_everything(self, client: AsyncClient, headers_for, officer, superadmin, offense):
        for user in (officer, superadmin):
            response = await client.get(f'{BASE}/offenses', headers=headers_for(user))
            assert [row['id'] for row in response.json()] == [offense.id]

    @pytest.mark.asyncio
    async def test_status_filter(self, client: AsyncClient, headers_for, officer, offense):
        unpaid = await client.get(f'{BASE}/offenses', params={'status': 'Unpaid'}, headers=headers_for(officer))
        paid = await client.get(f'{BASE}/offenses', params={'status': 'Paid'}, headers=headers_for(officer))

        assert len(unpaid.json()) == 1
        assert paid.json() == []

    @pytest.mark.asyncio
    async def test_missing_offense(self, client: AsyncClient, headers_for, officer):
        response = await client.get(f'{BASE}/offenses/31337', headers=headers_for(officer))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, headers_for, officer, other_driver, offense):
        response = await client.get(f'{BASE}/offenses/stats', headers=headers_for(officer))

        assert response.status_code == 200
        data = response.json()
        assert data['totalOffenses'] == 1
        assert data['byStatus']['Unpaid'] == 1
        assert data['byStatus']['Paid'] == 0
        assert data['byType']['Speeding'] == 1
        assert data['totalFines'] == 100
        assert data['outstandingFines'] == 100

        scoped = await client.get(f'{BASE}/offenses/stats', headers=headers_for(other_driver))
        assert scoped.json()['totalOffenses'] == 0


class TestEditOffense:
    """PUT /offenses/{id}"""

    @pytest.mark.asyncio
    async def test_officer_edits(self, client: AsyncClient, headers_for, officer, offense, session_factory):
        response = await client.put(
            f'{BASE}/offenses/{offense.id}',
            json={'location': 'Tema Motorway', 'fine': 150},
            headers=headers_for(officer),
        )

        assert response.status_code == 200
        assert response.json()['location'] == 'Tema Motorway'
        assert response.json()['fine'] == 150

        async with session_factory() as db:
            result = await db.execute(select(AuditLog).where(AuditLog.action == AuditAction.OFFENSE_UPDATED))
            entry = result.scalar_one()
        assert entry.details['originalData']['location'] == 'Ring Road Central'
        assert entry.details['newData'] == {'location': 'Tema Motorway', 'fine': 150.0}

    @pytest.mark.asyncio
    async def test_superadmin_cannot_edit(self, client: AsyncClient, headers_for, superadmin, offense):
        response = await client.put(
            f'{BASE}/offenses/{offense.id}',
            json={'location': 'Tema Motorway'},
            headers=headers_for(superadmin),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, client: AsyncClient, headers_for, officer, offense):
        response = await client.put(f'{BASE}/offenses/{offense.id}', json={}, headers=headers_for(officer))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_null_field_rejected(self, client: AsyncClient, headers_for, officer, offense):
        response = await client.put(
            f'{BASE}/offenses/{offense.id}', json={'location': None}, headers=headers_for(officer)
        )
        assert response.status_code == 422


class TestOffenseStatus:
    """PATCH /offenses/{id}/status"""

    @pytest.mark.asyncio
    async def test_status_change_is_audited(self, client: AsyncClient, headers_for, superadmin, offense, session_factory):
        response = await client.patch(
            f'{BASE}/offenses/{offense.id}/status',
            json={'status': 'Paid'},
            headers=headers_for(superadmin),
        )

        assert response.status_code == 200
        assert response.json()['status'] == 'Paid'

        async with session_factory() as db:
            result = await db.execute(
                select(AuditLog).where(AuditLog.action == AuditAction.OFFENSE_STATUS_UPDATED)
            )
            entry = result.scalar_one()
        assert entry.details == {'offenseId': offense.id, 'originalStatus': 'Unpaid', 'newStatus': 'Paid'}

    @pytest.mark.asyncio
    async def test_driver_cannot_change_status(self, client: AsyncClient, headers_for, driver_user, offense):
        response = await client.patch(
            f'{BASE}/offenses/{offense.id}/status',
            json={'status': 'Paid'},
            headers=headers_for(driver_user),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_status(self, client: AsyncClient, headers_for, officer, offense):
        response = await client.patch(
            f'{BASE}/offenses/{offense.id}/status',
            json={'status': 'Forgiven'},
            headers=headers_for(officer),
        )
        assert response.status_code == 422
