"""
Token resolution tests
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import delete

from trafficdesk.core.config import settings
from trafficdesk.core.security import create_access_token, create_jwt_token
from trafficdesk.models import User


class TestCurrentUser:
    """GET /api/v1/auth/me"""

    @pytest.mark.asyncio
    async def test_bearer_token(self, client: AsyncClient, headers_for, officer):
        response = await client.get('/api/v1/auth/me', headers=headers_for(officer))

        assert response.status_code == 200
        data = response.json()
        assert data['id'] == officer.id
        assert data['email'] == officer.email
        assert data['role'] == 'officer'

    @pytest.mark.asyncio
    async def test_cookie_token(self, client: AsyncClient, driver_user):
        client.cookies.set(settings.AUTH_COOKIE_NAME, create_access_token(driver_user))

        response = await client.get('/api/v1/auth/me')

        assert response.status_code == 200
        assert response.json()['role'] == 'driver'

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get('/api/v1/auth/me')

        assert response.status_code == 401
        assert response.json()['code'] == 'NOT_AUTHENTICATED'

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})

        assert response.status_code == 401
        assert response.json()['code'] == 'INVALID_TOKEN'

    @pytest.mark.asyncio
    async def test_expired_token(self, client: AsyncClient, officer):
        token = create_access_token(officer, expires_delta=timedelta(minutes=-5))

        response = await client.get('/api/v1/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_without_subject(self, client: AsyncClient):
        token = create_jwt_token({'role': 'superadmin'})

        response = await client.get('/api/v1/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_deleted_user(self, client: AsyncClient, headers_for, officer, session_factory):
        headers = headers_for(officer)
        async with session_factory() as db:
            await db.execute(delete(User).where(User.id == officer.id))
            await db.commit()

        response = await client.get('/api/v1/auth/me', headers=headers)
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get('/health')
    assert response.status_code == 200
    assert response.json() == {'status': 'ok'}
