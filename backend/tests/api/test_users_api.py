"""
API Tests for user management
"""
import pytest
from httpx import AsyncClient
from faker import Faker

from countapp.models.user import Role
from conftest import PASSWORD, COMPANY_A, COMPANY_B

fake = Faker()


def new_user(**overrides) -> dict:
    data = {
        'name': fake.name(),
        'userId': fake.user_name(),
        'password': 'freshpassword1',
        'role': 'surveyor',
    }
    data.update(overrides)
    return data


class TestListUsers:

    @pytest.mark.asyncio
    async def test_master_lists_own_company_without_hashes(
        self, client: AsyncClient, master, surveyor, other_master, auth_headers
    ):
        response = await client.get('/api/users', headers=auth_headers(master))

        assert response.status_code == 200
        data = response.json()
        assert {u['id'] for u in data} == {master.id, surveyor.id}
        for user in data:
            assert 'passwordHash' not in user
            assert 'password_hash' not in user
            assert 'password' not in user

    @pytest.mark.asyncio
    async def test_super_lists_every_company(self, client: AsyncClient, super_user, master, other_master, auth_headers):
        response = await client.get('/api/users', headers=auth_headers(super_user))

        assert {u['id'] for u in response.json()} == {super_user.id, master.id, other_master.id}

    @pytest.mark.asyncio
    async def test_surveyor_forbidden(self, client: AsyncClient, surveyor, auth_headers):
        response = await client.get('/api/users', headers=auth_headers(surveyor))
        assert response.status_code == 403


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_master_creates_user_in_own_company(self, client: AsyncClient, master, auth_headers):
        body = new_user()

        response = await client.post('/api/users', json=body, headers=auth_headers(master))
        assert response.status_code == 201

        login = await client.post('/api/login', json={
            'companyCode': COMPANY_A, 'userId': body['userId'], 'password': body['password'],
        })
        assert login.status_code == 200
        assert login.json()['user']['role'] == 'surveyor'

    @pytest.mark.asyncio
    async def test_master_cannot_target_other_company(self, client: AsyncClient, master, auth_headers):
        response = await client.post('/api/users', json=new_user(companyCode=COMPANY_B), headers=auth_headers(master))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_master_cannot_grant_super(self, client: AsyncClient, master, auth_headers):
        response = await client.post('/api/users', json=new_user(role='super'), headers=auth_headers(master))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_super_must_name_company(self, client: AsyncClient, super_user, auth_headers):
        response = await client.post('/api/users', json=new_user(), headers=auth_headers(super_user))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_super_creates_in_any_company(self, client: AsyncClient, super_user, auth_headers):
        body = new_user(role='master', companyCode=COMPANY_B)

        response = await client.post('/api/users', json=body, headers=auth_headers(super_user))
        assert response.status_code == 201

        login = await client.post('/api/login', json={
            'companyCode': COMPANY_B, 'userId': body['userId'], 'password': body['password'],
        })
        assert login.json()['user']['companyCode'] == COMPANY_B

    @pytest.mark.asyncio
    @pytest.mark.parametrize('missing', ['name', 'userId', 'password', 'role'])
    async def test_required_fields(self, client: AsyncClient, master, auth_headers, missing):
        body = new_user()
        body.pop(missing)

        response = await client.post('/api/users', json=body, headers=auth_headers(master))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_role(self, client: AsyncClient, master, auth_headers):
        response = await client.post('/api/users', json=new_user(role='owner'), headers=auth_headers(master))
        assert response.status_code == 400


class TestUpdateUser:

    @pytest.mark.asyncio
    async def test_update_name_and_password(self, client: AsyncClient, create_user, master, auth_headers):
        target = await create_user(Role.SURVEYOR, COMPANY_A, user_id='hanako')

        response = await client.put(
            f'/api/users/{target.id}', json={'name': 'Hanako', 'password': 'changed-pass'},
            headers=auth_headers(master),
        )
        assert response.status_code == 200

        old = await client.post('/api/login', json={'companyCode': COMPANY_A, 'userId': 'hanako', 'password': PASSWORD})
        assert old.status_code == 401
        new = await client.post('/api/login', json={'companyCode': COMPANY_A, 'userId': 'hanako', 'password': 'changed-pass'})
        assert new.json()['user']['name'] == 'Hanako'

    @pytest.mark.asyncio
    async def test_other_company_user_not_found(self, client: AsyncClient, master, other_surveyor, auth_headers):
        response = await client.put(
            f'/api/users/{other_surveyor.id}', json={'name': 'Intruder'}, headers=auth_headers(master)
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_master_cannot_move_user_to_other_company(self, client: AsyncClient, master, surveyor, auth_headers):
        response = await client.put(
            f'/api/users/{surveyor.id}', json={'companyCode': COMPANY_B}, headers=auth_headers(master)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_super_moves_user(self, client: AsyncClient, super_user, surveyor, auth_headers):
        response = await client.put(
            f'/api/users/{surveyor.id}', json={'companyCode': COMPANY_B}, headers=auth_headers(super_user)
        )
        assert response.status_code == 200

        users = (await client.get('/api/users', headers=auth_headers(super_user))).json()
        moved = next(u for u in users if u['id'] == surveyor.id)
        assert moved['companyCode'] == COMPANY_B
        assert moved['updatedAt'] is not None

    @pytest.mark.asyncio
    async def test_master_cannot_grant_super(self, client: AsyncClient, master, surveyor, auth_headers):
        response = await client.put(
            f'/api/users/{surveyor.id}', json={'role': 'super'}, headers=auth_headers(master)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_master_cannot_reset_super_password(self, client: AsyncClient, create_user, master, auth_headers):
        boss = await create_user(Role.SUPER, COMPANY_A, user_id='boss')

        response = await client.put(
            f'/api/users/{boss.id}', json={'password': 'taken-over'}, headers=auth_headers(master)
        )
        assert response.status_code == 403

        login = await client.post('/api/login', json={'companyCode': COMPANY_A, 'userId': 'boss', 'password': PASSWORD})
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_blank_company_code_rejected(self, client: AsyncClient, super_user, surveyor, auth_headers):
        response = await client.put(
            f'/api/users/{surveyor.id}', json={'companyCode': '   '}, headers=auth_headers(super_user)
        )
        assert response.status_code == 400

        users = (await client.get('/api/users', headers=auth_headers(super_user))).json()
        unchanged = next(u for u in users if u['id'] == surveyor.id)
        assert unchanged['companyCode'] == COMPANY_A


class TestDeleteUsers:

    @pytest.mark.asyncio
    async def test_bulk_delete(self, client: AsyncClient, create_user, master, auth_headers):
        first = await create_user(Role.SURVEYOR, COMPANY_A)
        second = await create_user(Role.SURVEYOR, COMPANY_A)

        response = await client.request(
            'DELETE', '/api/users', json={'ids': [first.id, second.id]}, headers=auth_headers(master)
        )
        assert response.status_code == 200

        remaining = (await client.get('/api/users', headers=auth_headers(master))).json()
        assert [u['id'] for u in remaining] == [master.id]

    @pytest.mark.asyncio
    async def test_batch_with_own_id_deletes_nothing(self, client: AsyncClient, master, surveyor, auth_headers):
        response = await client.request(
            'DELETE', '/api/users', json={'ids': [surveyor.id, master.id]}, headers=auth_headers(master)
        )
        assert response.status_code == 403

        remaining = (await client.get('/api/users', headers=auth_headers(master))).json()
        assert {u['id'] for u in remaining} == {master.id, surveyor.id}

    @pytest.mark.asyncio
    async def test_single_delete(self, client: AsyncClient, master, surveyor, auth_headers):
        response = await client.delete(f'/api/users/{surveyor.id}', headers=auth_headers(master))
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_single_delete_self_forbidden(self, client: AsyncClient, master, auth_headers):
        response = await client.delete(f'/api/users/{master.id}', headers=auth_headers(master))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_other_company_user_untouched(self, client: AsyncClient, master, other_surveyor, super_user, auth_headers):
        response = await client.request(
            'DELETE', '/api/users', json={'ids': [other_surveyor.id]}, headers=auth_headers(master)
        )
        assert response.status_code == 200

        users = (await client.get('/api/users', headers=auth_headers(super_user))).json()
        assert other_surveyor.id in {u['id'] for u in users}

    @pytest.mark.asyncio
    async def test_master_cannot_bulk_delete_super(self, client: AsyncClient, create_user, master, surveyor, super_user, auth_headers):
        boss = await create_user(Role.SUPER, COMPANY_A, user_id='boss')

        response = await client.request(
            'DELETE', '/api/users', json={'ids': [surveyor.id, boss.id]}, headers=auth_headers(master)
        )
        assert response.status_code == 403

        users = (await client.get('/api/users', headers=auth_headers(super_user))).json()
        assert {surveyor.id, boss.id} <= {u['id'] for u in users}

    @pytest.mark.asyncio
    async def test_master_cannot_delete_super(self, client: AsyncClient, create_user, master, auth_headers):
        boss = await create_user(Role.SUPER, COMPANY_A, user_id='boss')

        response = await client.delete(f'/api/users/{boss.id}', headers=auth_headers(master))
        assert response.status_code == 403

        login = await client.post('/api/login', json={'companyCode': COMPANY_A, 'userId': 'boss', 'password': PASSWORD})
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_super_deletes_super(self, client: AsyncClient, create_user, super_user, auth_headers):
        boss = await create_user(Role.SUPER, COMPANY_A, user_id='boss')

        response = await client.delete(f'/api/users/{boss.id}', headers=auth_headers(super_user))
        assert response.status_code == 200
