#
# tests/test_blueprint_tool.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Unit tests for azblueprint.blueprint_tool
'''
import json
import logging

import azure.identity
import pytest

from azblueprint import blueprint_tool
from azblueprint.blueprint_tool import (BlueprintTool,
                                        view_row,
                                       )
from azblueprint.client import BlueprintClient
from azblueprint.config import cfg
from azblueprint.exceptions import ApplicationExit
from azblueprint.models import WhoIsBlueprintContract
from azblueprint.views import BlueprintView

from conftest import (MANAGEMENT_GROUP_SCOPE,
                      SUBSCRIPTION_ID,
                      SUBSCRIPTION_SCOPE,
                      FakeCredential,
                      make_blueprint,
                      make_published,
                      utc,
                     )

LOGGER = logging.getLogger('azblueprint.test')

@pytest.fixture
def make_tool(client):
    def _make(action, **kwargs):
        return BlueprintTool(action=action, blueprint_client=client, logger=LOGGER, **kwargs)
    return _make

def run(tool):
    '''
    Run tool.main_execute() and return the exit code
    '''
    with pytest.raises(ApplicationExit) as exc_info:
        tool.main_execute()
    return exc_info.value.code

def test_view_row():
    view = BlueprintView.from_model(make_blueprint('bp1', display_name='One', time_created=utc(2020, 1, 2)), SUBSCRIPTION_SCOPE)
    row = view_row(view, blueprint_tool.BLUEPRINT_COLUMNS)
    assert row == {'name' : 'bp1',
                   'display_name' : 'One',
                   'target_scope' : 'subscription',
                   'time_created' : utc(2020, 1, 2),
                   'scope' : SUBSCRIPTION_SCOPE,
                  }

def test_command_registry():
    assert BlueprintTool.command is blueprint_tool.command
    assert 'blueprint_list' in BlueprintTool.command.actions
    assert BlueprintTool.command.can_handle('blueprint_get', 'printable')

def test_blueprint_list(mgmt_client, make_tool, capsys):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1'))
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp2'))
    mgmt_client.blueprints.add(MANAGEMENT_GROUP_SCOPE, make_blueprint('bp3'))
    tool = make_tool('blueprint_list', subscription_id=SUBSCRIPTION_ID, management_group='mg1')
    assert run(tool) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split()[0] == 'name'
    assert [x.split()[0] for x in lines[2:]] == ['bp1', 'bp2', 'bp3']
    assert lines[4].rstrip().endswith(MANAGEMENT_GROUP_SCOPE)

def test_blueprint_get(mgmt_client, make_tool, capsys):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1', display_name='One'))
    assert run(make_tool('blueprint_get', scope=[SUBSCRIPTION_SCOPE], name='bp1')) == 0
    out = capsys.readouterr().out
    assert "'display_name': 'One'" in out
    assert "'name': 'bp1'" in out

def test_blueprint_get_not_found(make_tool, caplog):
    assert run(make_tool('blueprint_get', scope=[SUBSCRIPTION_SCOPE], name='nope')) == 1
    assert "blueprint_get: blueprint 'nope' not found" in caplog.text

def test_invalid_scope(mgmt_client, make_tool, caplog):
    assert run(make_tool('blueprint_list', scope=['/subscriptions/bogus'])) == 1
    assert 'invalid scope' in caplog.text
    assert mgmt_client.blueprints.calls == list()

def test_required_arg(make_tool):
    assert run(make_tool('blueprint_get', scope=[SUBSCRIPTION_SCOPE])) == "'name' not specified"

def test_unknown_action(make_tool, caplog):
    assert run(make_tool('bogus', scope=[SUBSCRIPTION_SCOPE])) == 1
    assert "Unknown action 'bogus'" in caplog.text

def test_scopes_effective(make_tool):
    tool = make_tool('blueprint_list', scope=['/a', '/b'], subscription_id=SUBSCRIPTION_ID)
    assert tool.scopes_effective() == ['/a', '/b']
    tool = make_tool('blueprint_list', subscription_id=SUBSCRIPTION_ID.upper())
    assert tool.scopes_effective() == [SUBSCRIPTION_SCOPE]
    tool = make_tool('blueprint_list')
    with pytest.raises(ApplicationExit):
        tool.scopes_effective()
    cfg.test_values['management_group'] = 'mg1'
    assert tool.scopes_effective() == [MANAGEMENT_GROUP_SCOPE]
    cfg.test_values['subscription_id'] = SUBSCRIPTION_ID
    assert tool.scopes_effective() == [SUBSCRIPTION_SCOPE, MANAGEMENT_GROUP_SCOPE]
    # explicit args replace the configured defaults
    tool = make_tool('blueprint_list', management_group='mg2')
    assert tool.scopes_effective() == ['/providers/Microsoft.Management/managementGroups/mg2']

def test_scope_effective(make_tool):
    tool = make_tool('blueprint_get', subscription_id=SUBSCRIPTION_ID, management_group='mg1')
    with pytest.raises(ApplicationExit):
        tool.scope_effective()
    tool = make_tool('blueprint_get', management_group='mg1')
    assert tool.scope_effective() == MANAGEMENT_GROUP_SCOPE

def test_blueprint_latest(mgmt_client, make_tool, capsys, caplog):
    assert run(make_tool('blueprint_latest', scope=[SUBSCRIPTION_SCOPE], name='bp1')) == 0
    assert capsys.readouterr().out == ''
    assert 'has no published versions' in caplog.text
    mgmt_client.published_blueprints.add((SUBSCRIPTION_SCOPE, 'bp1'), make_published('v1', time_created=utc(2020, 1, 1)))
    mgmt_client.published_blueprints.add((SUBSCRIPTION_SCOPE, 'bp1'), make_published('v3', time_created=utc(2021, 1, 1)))
    mgmt_client.published_blueprints.add((SUBSCRIPTION_SCOPE, 'bp1'), make_published('v2', time_created=utc(2020, 6, 1)))
    assert run(make_tool('blueprint_latest', scope=[SUBSCRIPTION_SCOPE], name='bp1')) == 0
    assert "'name': 'v3'" in capsys.readouterr().out

def test_published_list(mgmt_client, make_tool, capsys):
    mgmt_client.published_blueprints.add((SUBSCRIPTION_SCOPE, 'bp1'), make_published('v1'))
    assert run(make_tool('published_list', scope=[SUBSCRIPTION_SCOPE], name='bp1')) == 0
    out = capsys.readouterr().out
    assert 'notes for v1' in out

def test_export_import(mgmt_client, make_tool, tmp_path, capsys):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1', display_name='One'))
    path = tmp_path / 'bp1.json'
    assert run(make_tool('blueprint_export', scope=[SUBSCRIPTION_SCOPE], name='bp1', output_file=str(path))) == 0
    assert capsys.readouterr().out == ''
    text = path.read_text()
    assert text.endswith('\n')
    assert json.loads(text)['properties']['displayName'] == 'One'

    assert run(make_tool('blueprint_import', management_group='mg1', input_file=str(path))) == 0
    assert "'name': 'One - Copy'" in capsys.readouterr().out
    assert [x.name for x in mgmt_client.blueprints.items[MANAGEMENT_GROUP_SCOPE]] == ['One - Copy']

def test_export_stdout(mgmt_client, make_tool, capsys):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1'))
    assert run(make_tool('blueprint_export', scope=[SUBSCRIPTION_SCOPE], name='bp1')) == 0
    assert json.loads(capsys.readouterr().out)['name'] == 'bp1'

def test_import_bad_file(make_tool, tmp_path, caplog):
    path = tmp_path / 'bad.json'
    path.write_text('[1, 2]')
    assert run(make_tool('blueprint_import', scope=[SUBSCRIPTION_SCOPE], input_file=str(path))) == 1
    assert 'must be a JSON object' in caplog.text

def test_assignment_delete(mgmt_client, make_tool, capsys):
    assert run(make_tool('assignment_delete', scope=[SUBSCRIPTION_SCOPE], name='a1')) == 0
    assert capsys.readouterr().out == ''
    assert mgmt_client.assignments.calls == [('delete', (SUBSCRIPTION_SCOPE, 'a1'), dict())]

def test_who_is_blueprint(mgmt_client, make_tool, capsys):
    mgmt_client.assignments.who_is_blueprint_result = WhoIsBlueprintContract(object_id='0000-spn')
    assert run(make_tool('who_is_blueprint', scope=[SUBSCRIPTION_SCOPE], name='a1')) == 0
    assert capsys.readouterr().out == '0000-spn\n'

def test_breaking_changes_logged(make_tool, tmp_path, caplog):
    path = tmp_path / 'cfg.yaml'
    path.write_text('breaking_changes:\n'
                    '  - target: blueprint_list\n'
                    '    deprecated_output_type: PSBlueprint\n')
    cfg.filename = str(path)
    assert run(make_tool('blueprint_list', scope=[SUBSCRIPTION_SCOPE])) == 0
    assert "Breaking changes in 'blueprint_list' :" in caplog.text
    caplog.clear()
    assert run(make_tool('assignment_list', scope=[SUBSCRIPTION_SCOPE])) == 0
    assert 'Breaking changes' not in caplog.text

def test_app_setup():
    app, debug, exit_verbose, logger = BlueprintTool.main_app_setup(['blueprint_list',
                                                                     '--scope', SUBSCRIPTION_SCOPE,
                                                                     '--scope', MANAGEMENT_GROUP_SCOPE,
                                                                     '--api_expand',
                                                                     '--debug', '2',
                                                                    ])
    assert isinstance(app, BlueprintTool)
    assert app.action == 'blueprint_list'
    assert app.scope == [SUBSCRIPTION_SCOPE, MANAGEMENT_GROUP_SCOPE]
    assert app.api_expand
    assert debug == 2
    assert not exit_verbose
    assert app.exc_value is ApplicationExit
    assert 'debug' in app.args_explicit
    assert logger.name == 'azblueprint.blueprint_tool'

def test_app_setup_bad_action(capsys):
    with pytest.raises(SystemExit):
        BlueprintTool.main_app_setup(['not_an_action'])
    assert 'invalid choice' in capsys.readouterr().err

def test_main_with_args(mgmt_client, monkeypatch, capsys):
    mgmt_client.blueprints.add(SUBSCRIPTION_SCOPE, make_blueprint('bp1'))
    built = list()

    def from_credential(credential, **kwargs):
        built.append((credential, kwargs))
        return BlueprintClient(mgmt_client, api_expand=kwargs['api_expand'], logger=kwargs['logger'])

    monkeypatch.setattr(azure.identity, 'DefaultAzureCredential', FakeCredential)
    monkeypatch.setattr(BlueprintClient, 'from_credential', from_credential)
    with pytest.raises(SystemExit) as exc_info:
        BlueprintTool.main_with_args(['blueprint_list', '--subscription_id', SUBSCRIPTION_ID])
    assert exc_info.value.code == 0
    assert 'bp1' in capsys.readouterr().out
    assert isinstance(built[0][0], FakeCredential)
    assert built[0][1]['base_url'] == 'https://management.azure.com'

    with pytest.raises(SystemExit) as exc_info:
        BlueprintTool.main_with_args(['blueprint_get', '--subscription_id', SUBSCRIPTION_ID, '--name', 'missing'])
    assert exc_info.value.code == 1
