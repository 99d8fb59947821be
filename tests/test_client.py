#
# tests/test_client.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Unit tests for azblueprint.client using the fake management client
'''
import json

from azure.core.exceptions import (HttpResponseError,
                                   ResourceNotFoundError,
                                  )
import pytest

from azblueprint.client import (BlueprintClient,
                                compare_dates,
                               )
from azblueprint.exceptions import (InvalidArgument,
                                    NotFound,
                                    RemoteError,
                                    UnsupportedVariant,
                                   )
from azblueprint.models import (Artifact,
                                Assignment,
                                ManagedServiceIdentity,
                                ParameterValue,
                                TemplateArtifact,
                                WhoIsBlueprintContract,
                               )
from azblueprint.views import (AssignmentView,
                               BlueprintView,
                               TemplateArtifactView,
                              )

from conftest import (FakeMgmtClient,
                      MANAGEMENT_GROUP_SCOPE,
                      SUBSCRIPTION_SCOPE,
                      make_blueprint,
                      make_published,
                      utc,
                     )

def test_compare_dates():
    assert compare_dates(None, None) == 0
    assert compare_dates(None, utc(2020, 1, 1)) < 0
    assert compare_dates(utc(2020, 1, 1), None) > 0
    assert compare_dates(utc(2020, 1, 1), utc(2021, 1, 1)) < 0
    assert compare_dates(utc(2021, 1, 1), utc(2020, 1, 1)) > 0
    assert compare_dates(utc(2021, 1, 1), utc(2021, 1, 1)) == 0

def test_get_blueprint(client, mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1', display_name='One'))
    view = client.get_blueprint(SUBSCRIPTION_SCOPE, 'bp1')
    assert isinstance(view, BlueprintView)
    assert view.name == 'bp1'
    assert view.display_name == 'One'
    assert view.scope == SUBSCRIPTION_SCOPE
    assert view.parameters['location'].default_value == 'westus2'
    assert view.resource_groups['rg1'].location == 'westus2'
    assert mgmt_client.blueprints.calls[-1] == ('get', (SUBSCRIPTION_SCOPE, 'bp1'), {'expand' : None})

def test_get_blueprint_api_expand(mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1'))
    client = BlueprintClient(mgmt_client, api_expand=True)
    client.get_blueprint(SUBSCRIPTION_SCOPE, 'bp1')
    assert mgmt_client.blueprints.calls[-1][2] == {'expand' : 'versions'}

def test_get_blueprint_empty_body_is_not_found(client):
    with pytest.raises(NotFound) as exc_info:
        client.get_blueprint(SUBSCRIPTION_SCOPE, 'missing')
    assert exc_info.value.name == 'missing'
    assert exc_info.value.scope == SUBSCRIPTION_SCOPE

def test_get_blueprint_remote_error(client, mgmt_client):
    def fail(*args, **kwargs):
        raise ResourceNotFoundError(message='blueprint not found')
    mgmt_client.blueprints.get = fail
    with pytest.raises(RemoteError) as exc_info:
        client.get_blueprint(SUBSCRIPTION_SCOPE, 'bp1')
    assert isinstance(exc_info.value.__cause__, ResourceNotFoundError)
    assert exc_info.value.operation == 'get_blueprint'

@pytest.mark.parametrize('scope', ['', 'subscriptions/x', '/subscriptions/not-a-uuid', '/providers/Microsoft.Management/managementGroups/'])
def test_invalid_scope_no_network(client, mgmt_client, scope):
    with pytest.raises(InvalidArgument):
        client.get_blueprint(scope, 'bp1')
    with pytest.raises(InvalidArgument):
        client.list_blueprints(scope)
    assert not mgmt_client.blueprints.calls

@pytest.mark.parametrize('page_size', [1, 2, 3, 10])
def test_list_blueprints_order(page_size):
    mgmt_client = FakeMgmtClient(page_size=page_size)
    names = ['bp%d' % x for x in range(5)]
    for name in names:
        mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint(name))
    client = BlueprintClient(mgmt_client)
    assert [v.name for v in client.list_blueprints(SUBSCRIPTION_SCOPE)] == names

def test_list_blueprints_lazy(client, mgmt_client):
    for name in ('a', 'b', 'c'):
        mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint(name))
    gen = client.list_blueprints(SUBSCRIPTION_SCOPE)
    assert mgmt_client.blueprints.fetches == list()
    assert next(gen).name == 'a'
    assert mgmt_client.blueprints.fetches == [None]
    assert [v.name for v in gen] == ['b', 'c']
    assert mgmt_client.blueprints.fetches == [None, '2']

def test_list_blueprints_across_scopes(client, mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('s1'))
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('s2'))
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('s3'))
    mgmt_client.blueprints.add(MANAGEMENT_GROUP_SCOPE, make_blueprint('m1'))
    views = list(client.list_blueprints_across_scopes([SUBSCRIPTION_SCOPE, MANAGEMENT_GROUP_SCOPE]))
    assert [(v.scope, v.name) for v in views] == [(SUBSCRIPTION_SCOPE, 's1'),
                                                  (SUBSCRIPTION_SCOPE, 's2'),
                                                  (SUBSCRIPTION_SCOPE, 's3'),
                                                  (MANAGEMENT_GROUP_SCOPE, 'm1'),
                                                 ]

def test_list_blueprints_across_scopes_validates_first(client, mgmt_client):
    with pytest.raises(InvalidArgument):
        client.list_blueprints_across_scopes([SUBSCRIPTION_SCOPE, 'bogus'])
    assert not mgmt_client.blueprints.calls

def test_list_blueprints_across_scopes_fails_fast(client, mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('s1'))
    real_list = mgmt_client.blueprints.list
    def list_or_fail(resource_scope, expand=None):
        if resource_scope == MANAGEMENT_GROUP_SCOPE:
            raise HttpResponseError(message='forbidden')
        return real_list(resource_scope, expand=expand)
    mgmt_client.blueprints.list = list_or_fail
    gen = client.list_blueprints_across_scopes([SUBSCRIPTION_SCOPE, MANAGEMENT_GROUP_SCOPE, SUBSCRIPTION_SCOPE])
    assert next(gen).name == 's1'
    with pytest.raises(RemoteError):
        next(gen)

def test_create_or_update_and_delete_blueprint(client, mgmt_client):
    view = client.create_or_update_blueprint(SUBSCRIPTION_SCOPE, 'new', make_blueprint('ignored', display_name='New'))
    assert view.name == 'new'
    assert view.display_name == 'New'
    assert client.delete_blueprint(SUBSCRIPTION_SCOPE, 'new') is None
    mgmt_client.blueprints.delete_result = make_blueprint('new')
    assert client.delete_blueprint(SUBSCRIPTION_SCOPE, 'new').name == 'new'

def test_delete_empty_body_returns_none(client, mgmt_client):
    assert mgmt_client.blueprints.delete_result is None
    assert client.delete_blueprint(SUBSCRIPTION_SCOPE, 'bp1') is None
    assert client.delete_artifact(SUBSCRIPTION_SCOPE, 'bp1', 'a1') is None
    assert client.delete_assignment(SUBSCRIPTION_SCOPE, 'asg1') is None

def _published_key():
    return (SUBSCRIPTION_SCOPE, 'bp1')

def test_latest_picks_greatest_time(client, mgmt_client):
    key = _published_key()
    mgmt_client.published_blueprints.add(key, make_published('v1', time_created=utc(2021, 1, 1)))
    mgmt_client.published_blueprints.add(key, make_published('v2', time_created=None))
    mgmt_client.published_blueprints.add(key, make_published('v3', time_created=utc(2022, 6, 1)))
    mgmt_client.published_blueprints.add(key, make_published('v4', with_status=False))
    latest = client.get_latest_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1')
    assert latest.name == 'v3'

def test_latest_all_none_returns_first(client, mgmt_client):
    key = _published_key()
    for version in ('v1', 'v2', 'v3'):
        mgmt_client.published_blueprints.add(key, make_published(version, time_created=None))
    assert client.get_latest_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1').name == 'v1'

def test_latest_tie_first_wins(client, mgmt_client):
    key = _published_key()
    mgmt_client.published_blueprints.add(key, make_published('v1', time_created=utc(2021, 1, 1)))
    mgmt_client.published_blueprints.add(key, make_published('v2', time_created=utc(2021, 1, 1)))
    assert client.get_latest_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1').name == 'v1'

def test_latest_empty_returns_none(client):
    assert client.get_latest_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1') is None

def test_published_get_list_create(client, mgmt_client):
    key = _published_key()
    mgmt_client.published_blueprints.add(key, make_published('v1', time_created=utc(2021, 1, 1)))
    view = client.get_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1', 'v1')
    assert view.blueprint_name == 'bp1'
    assert view.status.time_created == utc(2021, 1, 1)
    created = client.create_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1', 'v2', change_notes='second')
    assert created.name == 'v2'
    assert created.change_notes == 'second'
    assert [v.name for v in client.list_published_blueprints(SUBSCRIPTION_SCOPE, 'bp1')] == ['v1', 'v2']
    with pytest.raises(NotFound):
        client.get_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1', 'v9')

def test_published_delete(client, mgmt_client):
    assert client.delete_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1', 'v1') is None
    mgmt_client.published_blueprints.delete_result = make_published('v1')
    view = client.delete_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1', 'v1')
    assert view.name == 'v1'
    assert view.scope == SUBSCRIPTION_SCOPE
    assert mgmt_client.published_blueprints.calls[-1] == ('delete', (SUBSCRIPTION_SCOPE, 'bp1', 'v1'), dict())
    with pytest.raises(InvalidArgument):
        client.delete_published_blueprint(SUBSCRIPTION_SCOPE, 'bp1', 'bad/version')

def _template_artifact(name):
    ret = TemplateArtifact(display_name='T ' + name,
                           template={'resources' : []},
                           parameters={'p1' : ParameterValue(value=1)},
                           resource_group='rg1')
    ret.name = name
    return ret

def _unknown_artifact(name):
    ret = Artifact()
    ret.name = name
    ret.kind = 'somethingNew'
    return ret

def test_artifacts(client, mgmt_client):
    key = (SUBSCRIPTION_SCOPE, 'bp1')
    mgmt_client.artifacts.add(key, _template_artifact('a1'))
    view = client.get_artifact(SUBSCRIPTION_SCOPE, 'bp1', 'a1')
    assert isinstance(view, TemplateArtifactView)
    assert view.parameters == {'p1' : {'value' : 1}}
    assert view.template == {'resources' : ()}
    created = client.create_or_update_artifact(SUBSCRIPTION_SCOPE, 'bp1', 'a2', _template_artifact('x'))
    assert created.name == 'a2'
    assert [v.name for v in client.list_artifacts(SUBSCRIPTION_SCOPE, 'bp1')] == ['a1', 'a2']

def test_unknown_artifact_variant(client, mgmt_client):
    key = (SUBSCRIPTION_SCOPE, 'bp1')
    mgmt_client.artifacts.add(key, _template_artifact('a1'))
    mgmt_client.artifacts.add(key, _unknown_artifact('a2'))
    with pytest.raises(UnsupportedVariant) as exc_info:
        client.get_artifact(SUBSCRIPTION_SCOPE, 'bp1', 'a2')
    assert exc_info.value.kind == 'somethingNew'
    gen = client.list_artifacts(SUBSCRIPTION_SCOPE, 'bp1')
    assert next(gen).name == 'a1'
    with pytest.raises(UnsupportedVariant):
        next(gen)

def _assignment(name):
    ret = Assignment(location='westus2',
                     identity=ManagedServiceIdentity(type='SystemAssigned'),
                     parameters={'p' : ParameterValue(value='x')},
                     resource_groups=dict(),
                     blueprint_id=SUBSCRIPTION_SCOPE + '/providers/Microsoft.Blueprint/blueprints/bp1/versions/v1',
                     scope=SUBSCRIPTION_SCOPE)
    ret.name = name
    return ret

def test_assignments(client, mgmt_client):
    mgmt_client.assignments.add(SUBSCRIPTION_SCOPE, _assignment('asg1'))
    view = client.get_assignment(SUBSCRIPTION_SCOPE, 'asg1')
    assert isinstance(view, AssignmentView)
    assert view.identity['type'] == 'SystemAssigned'
    assert view.assigned_scope == SUBSCRIPTION_SCOPE
    client.create_or_update_assignment(SUBSCRIPTION_SCOPE, 'asg2', _assignment('x'))
    assert [v.name for v in client.list_assignments(SUBSCRIPTION_SCOPE)] == ['asg1', 'asg2']

def test_who_is_blueprint(client, mgmt_client):
    assert client.get_blueprint_spn_object_id(SUBSCRIPTION_SCOPE, 'asg1') is None
    mgmt_client.assignments.who_is_blueprint_result = WhoIsBlueprintContract(object_id='abc')
    assert client.get_blueprint_spn_object_id(SUBSCRIPTION_SCOPE, 'asg1').object_id == 'abc'

def test_export_import_round_trip(client, mgmt_client):
    original = make_blueprint('bp1', display_name='bp1', time_created=utc(2021, 3, 4), description='desc')
    original.versions = {'v1' : {'changeNotes' : 'first'}}
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, original)
    before = client.get_blueprint(SUBSCRIPTION_SCOPE, 'bp1')

    text = client.export_blueprint_definition(SUBSCRIPTION_SCOPE, 'bp1')
    imported = client.import_blueprint_definition(text, SUBSCRIPTION_SCOPE)

    assert imported.name == 'bp1 - Copy'
    d_before = before.to_dict()
    d_after = imported.to_dict()
    d_before.pop('name')
    d_after.pop('name')
    assert d_after == d_before

def test_export_is_sorted_json(client, mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1', display_name='One'))
    text = client.export_blueprint_definition(SUBSCRIPTION_SCOPE, 'bp1')
    data = json.loads(text)
    assert data['name'] == 'bp1'
    assert data['properties']['displayName'] == 'One'
    assert 'description' not in data['properties']
    assert text == json.dumps(data, sort_keys=True, indent=2)

def test_import_never_overwrites_source(client, mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1'))
    text = client.export_blueprint_definition(SUBSCRIPTION_SCOPE, 'bp1')
    imported = client.import_blueprint_definition(text, MANAGEMENT_GROUP_SCOPE)
    assert imported.name == 'bp1 - Copy'
    assert imported.scope == MANAGEMENT_GROUP_SCOPE

def test_import_name_uses_display_name(client, mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1', display_name='My Blueprint'))
    text = client.export_blueprint_definition(SUBSCRIPTION_SCOPE, 'bp1')
    imported = client.import_blueprint_definition(text, SUBSCRIPTION_SCOPE)
    assert imported.name == 'My Blueprint - Copy'
    assert imported.display_name == 'My Blueprint'
    assert client.get_blueprint(SUBSCRIPTION_SCOPE, 'bp1').display_name == 'My Blueprint'

def test_import_refuses_to_overwrite_earlier_import(client, mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1 - Copy', display_name='bp1', description='first'))
    text = client.export_blueprint_definition(SUBSCRIPTION_SCOPE, 'bp1 - Copy')
    data = json.loads(text)
    data['properties']['description'] = 'second'
    with pytest.raises(InvalidArgument) as exc_info:
        client.import_blueprint_definition(json.dumps(data), SUBSCRIPTION_SCOPE)
    assert 'overwrite' in str(exc_info.value)
    assert [c[0] for c in mgmt_client.blueprints.calls] == ['get']
    assert client.get_blueprint(SUBSCRIPTION_SCOPE, 'bp1 - Copy').description == 'first'

def test_import_display_name_too_long(client, mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1', display_name='D'*88))
    text = client.export_blueprint_definition(SUBSCRIPTION_SCOPE, 'bp1')
    with pytest.raises(InvalidArgument) as exc_info:
        client.import_blueprint_definition(text, SUBSCRIPTION_SCOPE)
    assert 'display name too long to derive import name' in str(exc_info.value)
    assert not [c for c in mgmt_client.blueprints.calls if c[0] == 'create_or_update']

def test_import_display_name_longest(client, mgmt_client):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1', display_name='D'*83))
    text = client.export_blueprint_definition(SUBSCRIPTION_SCOPE, 'bp1')
    imported = client.import_blueprint_definition(text, SUBSCRIPTION_SCOPE)
    assert imported.name == 'D'*83 + ' - Copy'
    assert len(imported.name) == 90

@pytest.mark.parametrize('text', ['', 'not json', '[]', '{}', '"x"'])
def test_import_rejects_bad_definition(client, mgmt_client, text):
    with pytest.raises(InvalidArgument):
        client.import_blueprint_definition(text, SUBSCRIPTION_SCOPE)
    assert not mgmt_client.blueprints.calls
