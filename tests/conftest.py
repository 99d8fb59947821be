#
# tests/conftest.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Shared doubles for the azblueprint tests.

FakeMgmtClient has the operation groups of BlueprintManagementClient.
Its list operations return real azure.core.paging.ItemPaged objects
that serve stored DTOs page_size at a time, with the offset of the
next page as the continuation token.
'''
import copy
import datetime
import json

from azure.core.paging import ItemPaged
import pytest

import azblueprint
from azblueprint.client import BlueprintClient
from azblueprint.models import (Blueprint,
                                BlueprintStatus,
                                ParameterDefinition,
                                PublishedBlueprint,
                                ResourceGroupDefinition,
                               )

SUBSCRIPTION_ID = '11111111-2222-3333-4444-555555555555'
SUBSCRIPTION_SCOPE = '/subscriptions/' + SUBSCRIPTION_ID
MANAGEMENT_GROUP_SCOPE = '/providers/Microsoft.Management/managementGroups/mg1'

def utc(year, month, day):
    '''
    Return an aware UTC datetime
    '''
    return datetime.datetime(year, month, day, tzinfo=datetime.timezone.utc)

class _FakeGroup():
    '''
    One operation group. Items are stored per key, where the key is
    the scope (and blueprint name for nested resources).
    '''
    def __init__(self, page_size):
        self.page_size = page_size
        self.items = dict() # key -> list of DTOs in list order
        self.fetches = list() # continuation token of each page fetch
        self.calls = list() # (method, args, kwargs)
        self.delete_result = None
        self.get_result = dict() # (key, name) -> DTO or None; overrides items

    def add(self, key, dto):
        self.items.setdefault(key, list()).append(dto)
        return dto

    def _find(self, key, name):
        if (key, name) in self.get_result:
            return self.get_result[(key, name)]
        for dto in self.items.get(key, list()):
            if dto.name == name:
                return dto
        return None

    def _pager(self, key):
        items = list(self.items.get(key, list()))
        page_size = self.page_size

        def get_next(token=None):
            self.fetches.append(token)
            return int(token) if token else 0

        def extract_data(offset):
            end = offset + page_size
            next_token = str(end) if end < len(items) else None
            return next_token, iter(items[offset:end])

        return ItemPaged(get_next, extract_data)

    def _put(self, key, name, dto):
        ret = copy.deepcopy(dto)
        ret.name = name
        stored = self.items.setdefault(key, list())
        stored[:] = [x for x in stored if x.name != name]
        stored.append(ret)
        return copy.deepcopy(ret)

class FakeBlueprints(_FakeGroup):
    def get(self, resource_scope, blueprint_name, expand=None):
        self.calls.append(('get', (resource_scope, blueprint_name), {'expand' : expand}))
        return self._find(resource_scope, blueprint_name)

    def list(self, resource_scope, expand=None):
        self.calls.append(('list', (resource_scope,), {'expand' : expand}))
        return self._pager(resource_scope)

    def create_or_update(self, resource_scope, blueprint_name, blueprint):
        self.calls.append(('create_or_update', (resource_scope, blueprint_name, blueprint), dict()))
        return self._put(resource_scope, blueprint_name, blueprint)

    def delete(self, resource_scope, blueprint_name):
        self.calls.append(('delete', (resource_scope, blueprint_name), dict()))
        return self.delete_result

class FakePublishedBlueprints(_FakeGroup):
    def get(self, resource_scope, blueprint_name, version_id):
        self.calls.append(('get', (resource_scope, blueprint_name, version_id), dict()))
        return self._find((resource_scope, blueprint_name), version_id)

    def list(self, resource_scope, blueprint_name):
        self.calls.append(('list', (resource_scope, blueprint_name), dict()))
        return self._pager((resource_scope, blueprint_name))

    def create(self, resource_scope, blueprint_name, version_id, published_blueprint=None):
        self.calls.append(('create', (resource_scope, blueprint_name, version_id, published_blueprint), dict()))
        ret = PublishedBlueprint(blueprint_name=blueprint_name,
                                 change_notes=published_blueprint.change_notes if published_blueprint is not None else None)
        return self._put((resource_scope, blueprint_name), version_id, ret)

    def delete(self, resource_scope, blueprint_name, version_id):
        self.calls.append(('delete', (resource_scope, blueprint_name, version_id), dict()))
        return self.delete_result

class FakeArtifacts(_FakeGroup):
    def get(self, resource_scope, blueprint_name, artifact_name):
        self.calls.append(('get', (resource_scope, blueprint_name, artifact_name), dict()))
        return self._find((resource_scope, blueprint_name), artifact_name)

    def list(self, resource_scope, blueprint_name):
        self.calls.append(('list', (resource_scope, blueprint_name), dict()))
        return self._pager((resource_scope, blueprint_name))

    def create_or_update(self, resource_scope, blueprint_name, artifact_name, artifact):
        self.calls.append(('create_or_update', (resource_scope, blueprint_name, artifact_name, artifact), dict()))
        return self._put((resource_scope, blueprint_name), artifact_name, artifact)

    def delete(self, resource_scope, blueprint_name, artifact_name):
        self.calls.append(('delete', (resource_scope, blueprint_name, artifact_name), dict()))
        return self.delete_result

class FakeAssignments(_FakeGroup):
    def __init__(self, page_size):
        super().__init__(page_size)
        self.who_is_blueprint_result = None

    def get(self, resource_scope, assignment_name):
        self.calls.append(('get', (resource_scope, assignment_name), dict()))
        return self._find(resource_scope, assignment_name)

    def list(self, resource_scope):
        self.calls.append(('list', (resource_scope,), dict()))
        return self._pager(resource_scope)

    def create_or_update(self, resource_scope, assignment_name, assignment):
        self.calls.append(('create_or_update', (resource_scope, assignment_name, assignment), dict()))
        return self._put(resource_scope, assignment_name, assignment)

    def delete(self, resource_scope, assignment_name):
        self.calls.append(('delete', (resource_scope, assignment_name), dict()))
        return self.delete_result

    def who_is_blueprint(self, resource_scope, assignment_name):
        self.calls.append(('who_is_blueprint', (resource_scope, assignment_name), dict()))
        return self.who_is_blueprint_result

class FakeMgmtClient():
    '''
    Stand-in for BlueprintManagementClient
    '''
    def __init__(self, page_size=2):
        self.blueprints = FakeBlueprints(page_size)
        self.published_blueprints = FakePublishedBlueprints(page_size)
        self.artifacts = FakeArtifacts(page_size)
        self.assignments = FakeAssignments(page_size)

    def __repr__(self):
        return "%s()" % type(self).__name__

def make_blueprint(name, display_name=None, time_created=None, description=None):
    '''
    Return a Blueprint DTO as it would be decoded from the service
    '''
    ret = Blueprint(display_name=display_name,
                    description=description,
                    target_scope='subscription',
                    parameters={'location' : ParameterDefinition(type='string',
                                                                 default_value='westus2',
                                                                 allowed_values=['westus2', 'eastus'],
                                                                 display_name='Location')},
                    resource_groups={'rg1' : ResourceGroupDefinition(name='rg-one', location='westus2')},
                   )
    ret.name = name
    ret.id = SUBSCRIPTION_SCOPE + '/providers/Microsoft.Blueprint/blueprints/' + name
    ret.type = 'Microsoft.Blueprint/blueprints'
    ret.status = BlueprintStatus()
    ret.status.time_created = time_created
    return ret

def make_published(version, blueprint_name='bp1', time_created=None, with_status=True):
    '''
    Return a PublishedBlueprint DTO
    '''
    ret = PublishedBlueprint(blueprint_name=blueprint_name, change_notes='notes for ' + version)
    ret.name = version
    if with_status:
        ret.status = BlueprintStatus()
        ret.status.time_created = time_created
    return ret

class FakeResponse():
    '''
    Minimal HTTP response for stubbing send_request
    '''
    def __init__(self, status_code, body=None, reason='OK'):
        self.status_code = status_code
        self.reason = reason
        self.headers = {'Content-Type' : 'application/json'}
        self.content = json.dumps(body).encode('utf-8') if body is not None else b''
        self.request = None

    def json(self):
        return json.loads(self.content)

    def text(self, encoding=None):
        return self.content.decode(encoding or 'utf-8')

class FakeCredential():
    '''
    Credential that is never asked for a token in these tests
    '''
    def get_token(self, *scopes, **kwargs):
        raise AssertionError("unexpected get_token %r" % (scopes,))

@pytest.fixture(autouse=True)
def _reset_state(monkeypatch):
    '''
    Each test starts with an empty configuration
    '''
    monkeypatch.delenv('AZBLUEPRINT_CONFIG', raising=False)
    monkeypatch.delenv('AZBLUEPRINT_DEBUG', raising=False)
    for hook in azblueprint.reset_hooks:
        hook()
    yield
    for hook in azblueprint.reset_hooks:
        hook()

@pytest.fixture
def mgmt_client():
    return FakeMgmtClient()

@pytest.fixture
def client(mgmt_client):
    return BlueprintClient(mgmt_client)
