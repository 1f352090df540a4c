"""
API Tests for the survey instance lifecycle
Tests for: start, resume, complete, discard and their conflicts
"""
import asyncio

import pytest
from httpx import AsyncClient

START = {'surveyTemplateId': 'tpl-1', 'surveyTemplateName': 'Assembly line'}
TALLY = {'counts': {'assemble': 7, 'walk': 2, 'wait': 1}, 'totalCount': 10, 'discoveryRate': 70.0, 'rank': 'A'}


async def start_instance(client: AsyncClient, headers) -> str:
    response = await client.post('/api/surveys/instances', json=START, headers=headers)
    assert response.status_code == 201
    return response.json()['instanceId']


class TestStart:

    @pytest.mark.asyncio
    async def test_start_returns_instance_id(self, client: AsyncClient, surveyor, auth_headers):
        response = await client.post('/api/surveys/instances', json=START, headers=auth_headers(surveyor))

        assert response.status_code == 201
        data = response.json()
        assert data['instanceId']
        assert data['message']

    @pytest.mark.asyncio
    @pytest.mark.parametrize('missing', ['surveyTemplateId', 'surveyTemplateName'])
    async def test_start_requires_template_fields(self, client: AsyncClient, surveyor, auth_headers, missing):
        body = dict(START)
        body.pop(missing)

        response = await client.post('/api/surveys/instances', json=body, headers=auth_headers(surveyor))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_start_requires_authentication(self, client: AsyncClient):
        response = await client.post('/api/surveys/instances', json=START)
        assert response.status_code == 401


class TestResume:

    @pytest.mark.asyncio
    async def test_nothing_in_progress(self, client: AsyncClient, surveyor, auth_headers):
        response = await client.get('/api/surveys/instances/in-progress', headers=auth_headers(surveyor))

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_returns_latest_in_progress(self, client: AsyncClient, surveyor, auth_headers):
        headers = auth_headers(surveyor)
        await start_instance(client, headers)
        await asyncio.sleep(0.01)
        latest = await start_instance(client, headers)

        response = await client.get('/api/surveys/instances/in-progress', headers=headers)

        [instance] = response.json()
        assert instance['id'] == latest
        assert instance['status'] == 'in-progress'
        assert instance['surveyTemplateId'] == 'tpl-1'
        assert instance['name'] == 'Assembly line'
        assert instance['surveyorId'] == surveyor.id
        assert instance['counts'] == {}

    @pytest.mark.asyncio
    async def test_other_surveyors_session_not_resumed(self, client: AsyncClient, surveyor, master, auth_headers):
        await start_instance(client, auth_headers(master))

        response = await client.get('/api/surveys/instances/in-progress', headers=auth_headers(surveyor))
        assert response.json() == []


class TestComplete:

    @pytest.mark.asyncio
    async def test_start_then_complete(self, client: AsyncClient, surveyor, master, auth_headers):
        headers = auth_headers(surveyor)
        instance_id = await start_instance(client, headers)

        response = await client.post('/api/results', json={'instanceId': instance_id, **TALLY}, headers=headers)

        assert response.status_code == 200
        assert response.json()['id'] == instance_id

        in_progress = await client.get('/api/surveys/instances/in-progress', headers=headers)
        assert in_progress.json() == []

        results = await client.get('/api/results/all', headers=auth_headers(master))
        assert [r['id'] for r in results.json()] == [instance_id]

    @pytest.mark.asyncio
    async def test_second_complete_conflicts(self, client: AsyncClient, surveyor, auth_headers):
        headers = auth_headers(surveyor)
        instance_id = await start_instance(client, headers)
        await client.post('/api/results', json={'instanceId': instance_id, **TALLY}, headers=headers)

        response = await client.post('/api/results', json={'instanceId': instance_id, **TALLY}, headers=headers)

        assert response.status_code == 409
        assert response.json() == {'message': 'This survey has already been completed or discarded.'}

    @pytest.mark.asyncio
    async def test_complete_unknown_instance(self, client: AsyncClient, surveyor, auth_headers):
        response = await client.post(
            '/api/results', json={'instanceId': 'missing', **TALLY}, headers=auth_headers(surveyor)
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_complete_without_instance_id(self, client: AsyncClient, surveyor, auth_headers):
        response = await client.post('/api/results', json=TALLY, headers=auth_headers(surveyor))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_complete_with_malformed_counts(self, client: AsyncClient, surveyor, auth_headers):
        headers = auth_headers(surveyor)
        instance_id = await start_instance(client, headers)

        response = await client.post(
            '/api/results', json={'instanceId': instance_id, 'counts': ['walk']}, headers=headers
        )
        assert response.status_code == 400
        assert 'message' in response.json()

    @pytest.mark.asyncio
    async def test_colleague_in_same_company_may_complete(self, client: AsyncClient, surveyor, master, auth_headers):
        instance_id = await start_instance(client, auth_headers(surveyor))

        response = await client.post(
            '/api/results', json={'instanceId': instance_id, **TALLY}, headers=auth_headers(master)
        )
        assert response.status_code == 200


class TestDiscard:

    @pytest.mark.asyncio
    async def test_start_then_discard(self, client: AsyncClient, surveyor, master, auth_headers):
        headers = auth_headers(surveyor)
        instance_id = await start_instance(client, headers)

        response = await client.post('/api/results/discard', json={'instanceId': instance_id}, headers=headers)

        assert response.status_code == 200
        assert (await client.get('/api/surveys/instances/in-progress', headers=headers)).json() == []
        assert (await client.get('/api/results/all', headers=auth_headers(master))).json() == []

    @pytest.mark.asyncio
    async def test_complete_after_discard_conflicts(self, client: AsyncClient, surveyor, auth_headers):
        headers = auth_headers(surveyor)
        instance_id = await start_instance(client, headers)
        await client.post('/api/results/discard', json={'instanceId': instance_id}, headers=headers)

        response = await client.post('/api/results', json={'instanceId': instance_id, **TALLY}, headers=headers)
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_discard_after_complete_conflicts(self, client: AsyncClient, surveyor, auth_headers):
        headers = auth_headers(surveyor)
        instance_id = await start_instance(client, headers)
        await client.post('/api/results', json={'instanceId': instance_id, **TALLY}, headers=headers)

        response = await client.post('/api/results/discard', json={'instanceId': instance_id}, headers=headers)
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_discard_twice_conflicts(self, client: AsyncClient, surveyor, auth_headers):
        headers = auth_headers(surveyor)
        instance_id = await start_instance(client, headers)
        await client.post('/api/results/discard', json={'instanceId': instance_id}, headers=headers)

        response = await client.post('/api/results/discard', json={'instanceId': instance_id}, headers=headers)
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_discard_unknown_instance(self, client: AsyncClient, surveyor, auth_headers):
        response = await client.post(
            '/api/results/discard', json={'instanceId': 'missing'}, headers=auth_headers(surveyor)
        )
        assert response.status_code == 404
