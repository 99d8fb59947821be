#
# azblueprint/blueprint_tool.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Command-line access to BlueprintClient operations.

Example:
  blueprint_tool.py blueprint_list --subscription_id 11111111-1111-1111-1111-111111111111
  blueprint_tool.py blueprint_export --management_group mg1 --name bp1 --output_file bp1.json
'''
import azure.identity

from azblueprint.base_defaults import (BASE_URL_DEFAULT,
                                       BLUEPRINT_API_VERSION,
                                      )
from azblueprint.client import BlueprintClient
from azblueprint.command import Command
from azblueprint.common import Application
from azblueprint.config import cfg
from azblueprint.exceptions import (ApplicationExit,
                                    InvalidArgument,
                                    InvalidResult,
                                    NotFound,
                                    RemoteError,
                                    UnsupportedVariant,
                                   )
from azblueprint.scope import (management_group_scope,
                               subscription_scope,
                              )
from azblueprint.util import getframe

# Failures that are reported as a one-line error rather than a stack
TOOL_ERRORS = (InvalidArgument,
               InvalidResult,
               NotFound,
               RemoteError,
               UnsupportedVariant,
              )

# Columns for list output; each is a key of the view's to_dict()
BLUEPRINT_COLUMNS = ('name', 'display_name', 'target_scope', 'time_created', 'scope')
PUBLISHED_COLUMNS = ('name', 'blueprint_name', 'change_notes', 'time_created')
ARTIFACT_COLUMNS = ('name', 'kind', 'display_name', 'resource_group')
ASSIGNMENT_COLUMNS = ('name', 'location', 'blueprint_id', 'provisioning_state')

command = Command()

def view_row(view, columns):
    '''
    Return a dict of the given columns of view for table output.
    time_created is taken from the status of the view.
    '''
    d = view.to_dict()
    d['scope'] = view.scope
    status = d.get('status', None) or dict()
    d['time_created'] = status.get('time_created', None)
    return {column : d.get(column, None) for column in columns}

class BlueprintTool(Application):
    '''
    Application wrapper for BlueprintClient
    '''
    def __init__(self,
                 action='',
                 api_expand=False,
                 artifact_name='',
                 blueprint_client=None,
                 input_file='',
                 management_group='',
                 name='',
                 output_file='',
                 scope=None,
                 subscription_id='',
                 version='',
                 **kwargs):
        super().__init__(**kwargs)
        self.action = action
        self.api_expand = api_expand
        self.artifact_name = artifact_name
        self.input_file = input_file
        self.management_group = management_group
        self.name = name
        self.output_file = output_file
        self.scope = list(scope or list())
        self.subscription_id = subscription_id
        self.version = version
        self._blueprint_client = blueprint_client

    LOGGER_NAME = 'blueprint_tool'

    @property
    def blueprint_client(self):
        '''
        Getter. Constructs the client on first use.
        '''
        if self._blueprint_client is None:
            self._blueprint_client = BlueprintClient.from_credential(azure.identity.DefaultAzureCredential(),
                                                                     base_url=cfg.get('base_url', BASE_URL_DEFAULT),
                                                                     api_version=cfg.get('api_version', BLUEPRINT_API_VERSION),
                                                                     api_expand=self.api_expand,
                                                                     logger=self.logger)
        return self._blueprint_client

    def scopes_effective(self):
        '''
        Return the list of scopes to operate on.
        --scope wins. Otherwise the scope comes from --subscription_id and/or
        --management_group, and if neither is given, from the config defaults.
        '''
        if self.scope:
            return list(self.scope)
        subscription_id = self.subscription_id
        management_group = self.management_group
        if not (subscription_id or management_group):
            subscription_id = cfg.get('subscription_id', '')
            management_group = cfg.get('management_group', '')
        ret = list()
        if subscription_id:
            ret.append(subscription_scope(subscription_id))
        if management_group:
            ret.append(management_group_scope(management_group))
        if not ret:
            raise ApplicationExit("no scope; specify --scope, --subscription_id, or --management_group")
        return ret

    def scope_effective(self):
        '''
        Return the single scope for an action that operates on one scope
        '''
        scopes = self.scopes_effective()
        if len(scopes) != 1:
            raise ApplicationExit("action %r requires exactly one scope, not %d" % (self.action, len(scopes)))
        return scopes[0]

    def _required_arg(self, attr):
        value = getattr(self, attr)
        if not value:
            raise ApplicationExit("'%s' not specified" % attr)
        return value

    # Blueprint definitions

    @command.printable
    def blueprint_get(self):
        '''
        Print one blueprint definition
        '''
        return self.blueprint_client.get_blueprint(self.scope_effective(), self._required_arg('name')).to_dict()

    @command.printable
    def blueprint_list(self):
        '''
        Print a table of the blueprint definitions in every effective scope
        '''
        views = self.blueprint_client.list_blueprints_across_scopes(self.scopes_effective())
        return [view_row(view, BLUEPRINT_COLUMNS) for view in views]

    @command.printable
    def blueprint_latest(self):
        '''
        Print the most recently created published version of a definition
        '''
        latest = self.blueprint_client.get_latest_published_blueprint(self.scope_effective(), self._required_arg('name'))
        if latest is None:
            self.logger.warning("blueprint %r has no published versions", self.name)
            return None
        return latest.to_dict()

    @command.printable
    def blueprint_export(self):
        '''
        Export a definition as JSON. Writes output_file if given; otherwise prints.
        '''
        text = self.blueprint_client.export_blueprint_definition(self.scope_effective(), self._required_arg('name'))
        if self.output_file:
            with open(self.output_file, 'w') as f:
                f.write(text)
                f.write('\n')
            self.logger.info("%s wrote %s", getframe(0), self.output_file)
            return None
        return text

    @command.printable
    def blueprint_import(self):
        '''
        Import a definition from input_file (as written by blueprint_export)
        '''
        input_file = self._required_arg('input_file')
        with open(input_file, 'r') as f:
            text = f.read()
        return self.blueprint_client.import_blueprint_definition(text, self.scope_effective()).to_dict()

    # Published versions

    @command.printable
    def published_get(self):
        '''
        Print one published version
        '''
        return self.blueprint_client.get_published_blueprint(self.scope_effective(), self._required_arg('name'), self._required_arg('version')).to_dict()

    @command.printable
    def published_list(self):
        '''
        Print a table of the published versions of a definition
        '''
        views = self.blueprint_client.list_published_blueprints(self.scope_effective(), self._required_arg('name'))
        return [view_row(view, PUBLISHED_COLUMNS) for view in views]

    # Artifacts

    @command.printable
    def artifact_get(self):
        '''
        Print one artifact
        '''
        return self.blueprint_client.get_artifact(self.scope_effective(), self._required_arg('name'), self._required_arg('artifact_name')).to_dict()

    @command.printable
    def artifact_list(self):
        '''
        Print a table of the artifacts of a definition
        '''
        views = self.blueprint_client.list_artifacts(self.scope_effective(), self._required_arg('name'))
        return [view_row(view, ARTIFACT_COLUMNS) for view in views]

    # Assignments

    @command.printable
    def assignment_get(self):
        '''
        Print one assignment
        '''
        return self.blueprint_client.get_assignment(self.scope_effective(), self._required_arg('name')).to_dict()

    @command.printable
    def assignment_list(self):
        '''
        Print a table of the assignments in scope
        '''
        views = self.blueprint_client.list_assignments(self.scope_effective())
        return [view_row(view, ASSIGNMENT_COLUMNS) for view in views]

    @command.printable
    def assignment_delete(self):
        '''
        Delete an assignment
        '''
        view = self.blueprint_client.delete_assignment(self.scope_effective(), self._required_arg('name'))
        if view is None:
            self.logger.info("%s deleted assignment %r", getframe(0), self.name)
            return None
        return view.to_dict()

    @command.printable
    def who_is_blueprint(self):
        '''
        Print the object id of the Azure Blueprints service principal
        '''
        view = self.blueprint_client.get_blueprint_spn_object_id(self.scope_effective(), self._required_arg('name'))
        if view is None:
            return None
        return view.object_id

    @classmethod
    def main_add_parser_args(cls, ap_parser):
        '''
        See Application.main_add_parser_args()
        '''
        super().main_add_parser_args(ap_parser)

        bt_group = ap_parser.get_argument_group('blueprint_tool')

        ap_parser.add_argument('action', type=str, choices=command.actions,
                               help='what to do')

        bt_group.add_argument('--api_expand', action='store_true',
                              help='include published versions when getting or listing definitions')
        bt_group.add_argument('--artifact_name', type=str, default='',
                              help='artifact name')
        bt_group.add_argument('--input_file', type=str, default='',
                              help='file to read (blueprint_import)')
        bt_group.add_argument('--management_group', type=str, default='',
                              help='management group name (scope)')
        bt_group.add_argument('--name', type=str, default='',
                              help='blueprint or assignment name')
        bt_group.add_argument('--output_file', type=str, default='',
                              help='file to write (blueprint_export)')
        bt_group.add_argument('--scope', type=str, action='append', default=None,
                              help='scope; may be repeated for blueprint_list')
        bt_group.add_argument('--subscription_id', type=str, default='',
                              help='subscription ID (scope)')
        bt_group.add_argument('--version', type=str, default='',
                              help='published version name')

    def breaking_changes_log(self):
        '''
        Log any configured breaking-change notices for this action
        '''
        for notice in cfg.breaking_changes(target=self.action):
            self.logger.warning("%s", notice.message())

    def main_execute(self):
        '''
        See Application.main_execute()
        '''
        self.breaking_changes_log()
        try:
            if not self.command.handle(self.action, 'printable', self):
                self.logger.error("Unknown action '%s'", self.action)
                raise ApplicationExit(1)
        except TOOL_ERRORS as exc:
            self.logger.error("%s: %s", self.action, exc)
            raise ApplicationExit(1) from exc
        raise ApplicationExit(0)

BlueprintTool.command = command

def main():
    '''
    Console script entrypoint
    '''
    BlueprintTool.main()

if __name__ == '__main__':
    main()
