#
# azblueprint/client.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Facade over the Blueprint management client.

Every operation validates its arguments, makes its management client
call(s) through mgmtcall(), and returns views rather than wire DTOs.
List operations are generators built on paging.walk_pages(): lazy,
finite, and not restartable. Nothing raised here is caught and
suppressed; SDK failures arrive as RemoteError.
'''
import itertools
import json
import logging

import msrest.exceptions

from azblueprint.base_defaults import (BASE_URL_DEFAULT,
                                       BLUEPRINT_API_VERSION,
                                       BLUEPRINT_IMPORT_NAME_SUFFIX,
                                       LOGGER_NAME_DEFAULT,
                                      )
from azblueprint.btypes import ReadOnlyDict
from azblueprint.exceptions import (InvalidArgument,
                                    NotFound,
                                   )
from azblueprint.mgmt_client import BlueprintManagementClient
from azblueprint.mgmtcall import mgmtcall
from azblueprint.models import (PublishedBlueprint,
                                model_deserialize,
                                model_serialize,
                               )
from azblueprint.paging import (pager_page_fetcher,
                                walk_pages,
                               )
from azblueprint.scope import (RESOURCE_NAME_LEN_MAX,
                               artifact_name_validate,
                               assignment_name_validate,
                               blueprint_name_validate,
                               scope_validate,
                               version_name_validate,
                              )
from azblueprint.util import getframename
from azblueprint.views import (AssignmentView,
                               BlueprintView,
                               PublishedBlueprintView,
                               WhoIsBlueprintView,
                               artifact_view_from_model,
                              )

# Settings shared by export and import. None-valued attributes are
# dropped by the msrest serializer before json sees them.
JSON_SETTINGS = ReadOnlyDict({'sort_keys' : True,
                              'indent' : 2,
                             })

EXPAND_VERSIONS = 'versions'

def compare_dates(first, second):
    '''
    Compare two optional datetimes.
    Return <0 if first is earlier than second, >0 if later, 0 if the same.
    None is earlier than any datetime, and two Nones are the same.
    '''
    if (first is None) and (second is None):
        return 0
    if first is None:
        return -1
    if second is None:
        return 1
    if first < second:
        return -1
    if first > second:
        return 1
    return 0

def _time_created(view):
    status = getattr(view, 'status', None)
    return status.time_created if status is not None else None

class BlueprintClient():
    '''
    Blueprint operations on top of a management client.
    mgmt_client is BlueprintManagementClient or anything with the same
    operation groups (blueprints, published_blueprints, artifacts, assignments).
    With api_expand, blueprint get/list ask the service to include published versions.
    '''
    def __init__(self, mgmt_client, api_expand=False, logger=None):
        self._mgmt_client = mgmt_client
        self.api_expand = bool(api_expand)
        self.logger = logger or logging.getLogger(LOGGER_NAME_DEFAULT)

    def __repr__(self):
        return "%s(%r, api_expand=%r)" % (type(self).__name__, self._mgmt_client, self.api_expand)

    @classmethod
    def from_credential(cls, credential, base_url=BASE_URL_DEFAULT, api_version=BLUEPRINT_API_VERSION, api_expand=False, logger=None, **kwargs):
        '''
        Construct with a new BlueprintManagementClient for credential
        '''
        mgmt_client = BlueprintManagementClient(credential, base_url=base_url, api_version=api_version, **kwargs)
        return cls(mgmt_client, api_expand=api_expand, logger=logger)

    @property
    def mgmt_client(self):
        '''
        Getter for the management client handle
        '''
        return self._mgmt_client

    def _call(self, op, *args, **kwargs):
        '''
        Make one management client call
        '''
        return mgmtcall(self.logger, op, *args, mgmtcall_operation=getframename(1), **kwargs)

    def _walk(self, make_pager, operation, project):
        '''
        Return a generator of project(item) for the items of the ItemPaged
        returned by make_pager(). Nothing is fetched until the generator
        is advanced. Each page fetch is a separate mgmtcall.
        '''
        fetch = pager_page_fetcher(make_pager)
        def fetch_page(token):
            return mgmtcall(self.logger, fetch, token, mgmtcall_operation=operation)
        return (project(model) for model in walk_pages(fetch_page, logger=self.logger))

    @staticmethod
    def _required(model, what, scope, name):
        if model is None:
            raise NotFound(what, scope, name)
        return model

    def _expand_kwargs(self):
        return {'expand' : EXPAND_VERSIONS} if self.api_expand else dict()

    # Blueprint definitions

    def get_blueprint(self, scope, name):
        '''
        Return BlueprintView for the named definition.
        Raises NotFound if the service returns no body.
        '''
        scope_validate(scope)
        blueprint_name_validate(name)
        model = self._call(self._mgmt_client.blueprints.get, scope, name, **self._expand_kwargs())
        return BlueprintView.from_model(self._required(model, 'blueprint', scope, name), scope)

    def list_blueprints(self, scope):
        '''
        Return a generator of BlueprintView for each definition in scope
        '''
        scope_validate(scope)
        kwargs = self._expand_kwargs()
        return self._walk(lambda: self._mgmt_client.blueprints.list(scope, **kwargs),
                          'list_blueprints',
                          lambda model: BlueprintView.from_model(model, scope))

    def list_blueprints_across_scopes(self, scopes):
        '''
        Return a generator of BlueprintView for each definition in each of scopes, in the order given.
        Every scope is checked before anything is fetched.
        Fail fast: an error on any scope ends the whole sequence,
        and later scopes are not listed.
        '''
        scopes = list(scopes)
        for scope in scopes:
            scope_validate(scope)
        return itertools.chain.from_iterable(self.list_blueprints(scope) for scope in scopes)

    def create_or_update_blueprint(self, scope, name, blueprint):
        '''
        Create or update the named definition from a Blueprint DTO
        '''
        scope_validate(scope)
        blueprint_name_validate(name)
        model = self._call(self._mgmt_client.blueprints.create_or_update, scope, name, blueprint)
        return BlueprintView.from_model(self._required(model, 'blueprint', scope, name), scope)

    def delete_blueprint(self, scope, name):
        '''
        Delete the named definition.
        Return the deleted definition, or None if the service confirms with an empty body.
        '''
        scope_validate(scope)
        blueprint_name_validate(name)
        model = self._call(self._mgmt_client.blueprints.delete, scope, name)
        if model is None:
            return None
        return BlueprintView.from_model(model, scope)

    # Published versions

    def get_published_blueprint(self, scope, name, version):
        '''
        Return PublishedBlueprintView for one published version
        '''
        scope_validate(scope)
        blueprint_name_validate(name)
        version_name_validate(version)
        model = self._call(self._mgmt_client.published_blueprints.get, scope, name, version)
        return PublishedBlueprintView.from_model(self._required(model, 'published blueprint', scope, "%s/%s" % (name, version)), scope)

    def list_published_blueprints(self, scope, name):
        '''
        Return a generator of PublishedBlueprintView for each published version of a definition
        '''
        scope_validate(scope)
        blueprint_name_validate(name)
        return self._walk(lambda: self._mgmt_client.published_blueprints.list(scope, name),
                          'list_published_blueprints',
                          lambda model: PublishedBlueprintView.from_model(model, scope))

    def get_latest_published_blueprint(self, scope, name):
        '''
        Return the published version with the greatest creation time, or None if there are none.
        A version with no creation time is older than any version with one.
        On a tie the version listed first wins.
        '''
        latest = None
        for published in list(self.list_published_blueprints(scope, name)):
            if (latest is None) or (compare_dates(_time_created(published), _time_created(latest)) > 0):
                latest = published
        return latest

    def create_published_blueprint(self, scope, name, version, change_notes=None):
        '''
        Publish the current state of a definition as version
        '''
        scope_validate(scope)
        blueprint_name_validate(name)
        version_name_validate(version)
        body = PublishedBlueprint(change_notes=change_notes) if change_notes else None
        model = self._call(self._mgmt_client.published_blueprints.create, scope, name, version, body)
        return PublishedBlueprintView.from_model(self._required(model, 'published blueprint', scope, "%s/%s" % (name, version)), scope)

    def delete_published_blueprint(self, scope, name, version):
        '''
        Delete one published version. Return its view, or None for an empty response body.
        '''
        scope_validate(scope)
        blueprint_name_validate(name)
        version_name_validate(version)
        model = self._call(self._mgmt_client.published_blueprints.delete, scope, name, version)
        if model is None:
            return None
        return PublishedBlueprintView.from_model(model, scope)

    # Artifacts

    def get_artifact(self, scope, blueprint_name, artifact_name):
        '''
        Return the view for one artifact, chosen by its variant.
        Raises UnsupportedVariant if the variant is unknown.
        '''
        scope_validate(scope)
        blueprint_name_validate(blueprint_name)
        artifact_name_validate(artifact_name)
        model = self._call(self._mgmt_client.artifacts.get, scope, blueprint_name, artifact_name)
        return artifact_view_from_model(self._required(model, 'artifact', scope, "%s/%s" % (blueprint_name, artifact_name)), scope)

    def list_artifacts(self, scope, blueprint_name):
        '''
        Return a generator of artifact views for a definition
        '''
        scope_validate(scope)
        blueprint_name_validate(blueprint_name)
        return self._walk(lambda: self._mgmt_client.artifacts.list(scope, blueprint_name),
                          'list_artifacts',
                          lambda model: artifact_view_from_model(model, scope))

    def create_or_update_artifact(self, scope, blueprint_name, artifact_name, artifact):
        '''
        Create or update an artifact from an Artifact subclass DTO
        '''
        scope_validate(scope)
        blueprint_name_validate(blueprint_name)
        artifact_name_validate(artifact_name)
        model = self._call(self._mgmt_client.artifacts.create_or_update, scope, blueprint_name, artifact_name, artifact)
        return artifact_view_from_model(self._required(model, 'artifact', scope, "%s/%s" % (blueprint_name, artifact_name)), scope)

    def delete_artifact(self, scope, blueprint_name, artifact_name):
        '''
        Delete an artifact. Return its view, or None for an empty response body.
        '''
        scope_validate(scope)
        blueprint_name_validate(blueprint_name)
        artifact_name_validate(artifact_name)
        model = self._call(self._mgmt_client.artifacts.delete, scope, blueprint_name, artifact_name)
        if model is None:
            return None
        return artifact_view_from_model(model, scope)

    # Assignments

    def get_assignment(self, scope, name):
        '''
        Return AssignmentView for the named assignment
        '''
        scope_validate(scope)
        assignment_name_validate(name)
        model = self._call(self._mgmt_client.assignments.get, scope, name)
        return AssignmentView.from_model(self._required(model, 'assignment', scope, name), scope)

    def list_assignments(self, scope):
        '''
        Return a generator of AssignmentView for each assignment in scope
        '''
        scope_validate(scope)
        return self._walk(lambda: self._mgmt_client.assignments.list(scope),
                          'list_assignments',
                          lambda model: AssignmentView.from_model(model, scope))

    def create_or_update_assignment(self, scope, name, assignment):
        '''
        Create or update an assignment from an Assignment DTO
        '''
        scope_validate(scope)
        assignment_name_validate(name)
        model = self._call(self._mgmt_client.assignments.create_or_update, scope, name, assignment)
        return AssignmentView.from_model(self._required(model, 'assignment', scope, name), scope)

    def delete_assignment(self, scope, name):
        '''
        Delete an assignment.
        Return the deleted assignment, or None if the service confirms with an empty body.
        '''
        scope_validate(scope)
        assignment_name_validate(name)
        model = self._call(self._mgmt_client.assignments.delete, scope, name)
        if model is None:
            return None
        return AssignmentView.from_model(model, scope)

    def get_blueprint_spn_object_id(self, scope, assignment_name):
        '''
        Return WhoIsBlueprintView naming the Azure Blueprints service principal,
        or None if the service returns no body.
        '''
        scope_validate(scope)
        assignment_name_validate(assignment_name)
        model = self._call(self._mgmt_client.assignments.who_is_blueprint, scope, assignment_name)
        if model is None:
            return None
        return WhoIsBlueprintView.from_model(model, scope)

    # Export and import

    def export_blueprint_definition(self, scope, name):
        '''
        Fetch the named definition and return it as JSON text
        '''
        scope_validate(scope)
        blueprint_name_validate(name)
        model = self._call(self._mgmt_client.blueprints.get, scope, name)
        model = self._required(model, 'blueprint', scope, name)
        return json.dumps(model_serialize(model, keep_readonly=True), **JSON_SETTINGS)

    @staticmethod
    def blueprint_from_definition(text):
        '''
        Parse JSON text produced by export_blueprint_definition() into a Blueprint DTO
        '''
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise InvalidArgument("blueprint definition is not valid JSON: %s" % exc) from exc
        if not isinstance(data, dict):
            raise InvalidArgument("blueprint definition must be a JSON object, not %s" % type(data).__name__)
        try:
            model = model_deserialize('Blueprint', data)
        except msrest.exceptions.DeserializationError as exc:
            raise InvalidArgument("cannot decode blueprint definition: %s" % exc) from exc
        if model is None:
            raise InvalidArgument("blueprint definition is empty")
        return model

    @staticmethod
    def import_name(model):
        '''
        Return the name under which an imported definition is created:
        the display name of model (or its name when the display name is
        empty) with BLUEPRINT_IMPORT_NAME_SUFFIX appended. The result is
        model.name + BLUEPRINT_IMPORT_NAME_SUFFIX only when the display
        name is empty or equal to model.name.
        Raises InvalidArgument when the result would be model.name itself,
        as for re-importing an earlier import, or when it is longer than
        a resource name may be.
        '''
        base = model.display_name or model.name
        if not base:
            raise InvalidArgument("blueprint definition has neither displayName nor name")
        ret = base + BLUEPRINT_IMPORT_NAME_SUFFIX
        if ret == model.name:
            raise InvalidArgument("import of blueprint definition %r would overwrite it; rename it or change its displayName" % model.name)
        if len(ret) > RESOURCE_NAME_LEN_MAX:
            raise InvalidArgument("display name too long to derive import name: %r has %d characters, at most %d are allowed"
                                  % (base, len(base), RESOURCE_NAME_LEN_MAX - len(BLUEPRINT_IMPORT_NAME_SUFFIX)))
        return ret

    def import_blueprint_definition(self, text, scope):
        '''
        Create a new definition in scope from JSON text produced by
        export_blueprint_definition(). See import_name() for the new name.
        '''
        scope_validate(scope)
        model = self.blueprint_from_definition(text)
        name = self.import_name(model)
        self.logger.debug("%s importing %r as %r in %s", getframename(0), model.name, name, scope)
        return self.create_or_update_blueprint(scope, name, model)
