#
# azblueprint/mgmt_client.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Management client for the Microsoft.Blueprint resource provider.

This has the shape of an AutoRest track2 client: an azure-core
pipeline built by ARMPipelineClient, and one operation group per
resource type. Operations return msrest DTOs from azblueprint.models,
None for an empty body, or azure.core.paging.ItemPaged for lists.
Failures surface as azure.core.exceptions.HttpResponseError subclasses.
'''
import urllib.parse

from azure.core.exceptions import (ClientAuthenticationError,
                                   HttpResponseError,
                                   ResourceExistsError,
                                   ResourceNotFoundError,
                                   map_error,
                                  )
from azure.core.paging import ItemPaged
from azure.core.pipeline import policies
from azure.core.rest import HttpRequest
from azure.mgmt.core import ARMPipelineClient
from azure.mgmt.core.exceptions import ARMErrorFormat
from azure.mgmt.core.policies import (ARMChallengeAuthenticationPolicy,
                                      ARMHttpLoggingPolicy,
                                     )

from azblueprint.base_defaults import (BASE_URL_DEFAULT,
                                       BLUEPRINT_API_VERSION,
                                       CREDENTIAL_SCOPES_DEFAULT,
                                       USER_AGENT_DEFAULT,
                                      )
from azblueprint.models import (model_deserialize,
                                model_serialize,
                               )

ERROR_MAP_DEFAULT = {401: ClientAuthenticationError,
                     404: ResourceNotFoundError,
                     409: ResourceExistsError,
                    }

PROVIDER_PATH = 'providers/Microsoft.Blueprint'

class BlueprintManagementClientConfiguration():
    '''
    Configuration for BlueprintManagementClient.
    Any policy may be replaced by passing it as a keyword argument.
    '''
    def __init__(self, credential, api_version=BLUEPRINT_API_VERSION, **kwargs):
        if credential is None:
            raise ValueError("Parameter 'credential' must not be None.")
        self.credential = credential
        self.api_version = api_version
        self.credential_scopes = kwargs.pop('credential_scopes', list(CREDENTIAL_SCOPES_DEFAULT))
        self.polling_interval = kwargs.get('polling_interval', 30)
        kwargs.setdefault('sdk_moniker', USER_AGENT_DEFAULT)
        self._configure(**kwargs)

    def _configure(self, **kwargs):
        self.request_id_policy = kwargs.get('request_id_policy') or policies.RequestIdPolicy(**kwargs)
        self.user_agent_policy = kwargs.get('user_agent_policy') or policies.UserAgentPolicy(**kwargs)
        self.headers_policy = kwargs.get('headers_policy') or policies.HeadersPolicy(**kwargs)
        self.proxy_policy = kwargs.get('proxy_policy') or policies.ProxyPolicy(**kwargs)
        self.logging_policy = kwargs.get('logging_policy') or policies.NetworkTraceLoggingPolicy(**kwargs)
        self.http_logging_policy = kwargs.get('http_logging_policy') or ARMHttpLoggingPolicy(**kwargs)
        self.retry_policy = kwargs.get('retry_policy') or policies.RetryPolicy(**kwargs)
        self.custom_hook_policy = kwargs.get('custom_hook_policy') or policies.CustomHookPolicy(**kwargs)
        self.redirect_policy = kwargs.get('redirect_policy') or policies.RedirectPolicy(**kwargs)
        self.authentication_policy = kwargs.get('authentication_policy')
        if self.credential and not self.authentication_policy:
            self.authentication_policy = ARMChallengeAuthenticationPolicy(self.credential, *self.credential_scopes, **kwargs)

def _quote(value):
    return urllib.parse.quote(str(value), safe='')

def _scope_path(scope):
    '''
    Scopes arrive in their leading-slash form and are
    inserted into the URL path without escaping.
    '''
    return scope.lstrip('/')

class _OperationsBase():
    '''
    Request plumbing shared by the operation groups
    '''
    def __init__(self, client, config):
        self._client = client
        self._config = config

    def _request(self, method, path, params=None, body=None):
        '''
        Build HttpRequest for path (relative to the client base URL).
        '''
        query = {'api-version': self._config.api_version}
        query.update(params or dict())
        headers = {'Accept': 'application/json'}
        kwargs = dict()
        if body is not None:
            headers['Content-Type'] = 'application/json'
            kwargs['json'] = body
        request = HttpRequest(method, path, params=query, headers=headers, **kwargs)
        request.url = self._client.format_url(request.url)
        return request

    def _send(self, request, ok_codes, **kwargs):
        '''
        Send request. Return the response when its status is in ok_codes.
        Otherwise raise the mapped HttpResponseError.
        '''
        error_map = dict(ERROR_MAP_DEFAULT)
        error_map.update(kwargs.pop('error_map', dict()))
        response = self._client.send_request(request, stream=False, **kwargs)
        if response.status_code not in ok_codes:
            map_error(status_code=response.status_code, response=response, error_map=error_map)
            raise HttpResponseError(response=response, error_format=ARMErrorFormat)
        return response

    @staticmethod
    def _decode(response, type_name):
        '''
        Decode the response body as type_name. Empty bodies decode to None.
        '''
        if (response.status_code == 204) or (not response.content):
            return None
        return model_deserialize(type_name, response.json())

    def _call(self, method, path, type_name, ok_codes, params=None, body=None, **kwargs):
        request = self._request(method, path, params=params, body=body)
        response = self._send(request, ok_codes, **kwargs)
        return self._decode(response, type_name)

    def _pager(self, path, type_name, params=None, **kwargs):
        '''
        Return ItemPaged over a list operation.
        The continuation token is the service nextLink, which already
        carries api-version and any other query parameters.
        '''
        def get_next(next_link=None):
            if next_link:
                request = HttpRequest('GET', next_link, headers={'Accept': 'application/json'})
            else:
                request = self._request('GET', path, params=params)
            return self._send(request, (200,), **kwargs)

        def extract_data(response):
            deserialized = response.json() if response.content else dict()
            items = [model_deserialize(type_name, x) for x in (deserialized.get('value') or list())]
            return deserialized.get('nextLink') or None, iter(items)

        return ItemPaged(get_next, extract_data)

class BlueprintsOperations(_OperationsBase):
    '''
    Blueprint definitions
    '''
    @staticmethod
    def _path(scope, blueprint_name=None):
        ret = "/%s/%s/blueprints" % (_scope_path(scope), PROVIDER_PATH)
        if blueprint_name is not None:
            ret += '/' + _quote(blueprint_name)
        return ret

    @staticmethod
    def _expand_params(expand):
        return {'$expand': expand} if expand else None

    def get(self, resource_scope, blueprint_name, expand=None, **kwargs):
        '''
        Get a blueprint definition. expand='versions' includes published versions.
        '''
        return self._call('GET', self._path(resource_scope, blueprint_name), 'Blueprint', (200,), params=self._expand_params(expand), **kwargs)

    def list(self, resource_scope, expand=None, **kwargs):
        '''
        List blueprint definitions in a scope
        '''
        return self._pager(self._path(resource_scope), 'Blueprint', params=self._expand_params(expand), **kwargs)

    def create_or_update(self, resource_scope, blueprint_name, blueprint, **kwargs):
        '''
        Create or update a blueprint definition
        '''
        body = model_serialize(blueprint, 'Blueprint')
        return self._call('PUT', self._path(resource_scope, blueprint_name), 'Blueprint', (200, 201), body=body, **kwargs)

    def delete(self, resource_scope, blueprint_name, **kwargs):
        '''
        Delete a blueprint definition. Returns None if the service sends no body.
        '''
        return self._call('DELETE', self._path(resource_scope, blueprint_name), 'Blueprint', (200, 204), **kwargs)

class PublishedBlueprintsOperations(_OperationsBase):
    '''
    Published versions of blueprint definitions
    '''
    @staticmethod
    def _path(scope, blueprint_name, version_id=None):
        ret = "/%s/%s/blueprints/%s/versions" % (_scope_path(scope), PROVIDER_PATH, _quote(blueprint_name))
        if version_id is not None:
            ret += '/' + _quote(version_id)
        return ret

    def get(self, resource_scope, blueprint_name, version_id, **kwargs):
        '''
        Get one published version
        '''
        return self._call('GET', self._path(resource_scope, blueprint_name, version_id), 'PublishedBlueprint', (200,), **kwargs)

    def list(self, resource_scope, blueprint_name, **kwargs):
        '''
        List published versions of a blueprint definition
        '''
        return self._pager(self._path(resource_scope, blueprint_name), 'PublishedBlueprint', **kwargs)

    def create(self, resource_scope, blueprint_name, version_id, published_blueprint=None, **kwargs):
        '''
        Publish the current definition as version_id
        '''
        body = model_serialize(published_blueprint, 'PublishedBlueprint') if published_blueprint is not None else None
        return self._call('PUT', self._path(resource_scope, blueprint_name, version_id), 'PublishedBlueprint', (201,), body=body, **kwargs)

    def delete(self, resource_scope, blueprint_name, version_id, **kwargs):
        '''
        Delete a published version
        '''
        return self._call('DELETE', self._path(resource_scope, blueprint_name, version_id), 'PublishedBlueprint', (200, 204), **kwargs)

class ArtifactsOperations(_OperationsBase):
    '''
    Artifacts of a blueprint definition
    '''
    @staticmethod
    def _path(scope, blueprint_name, artifact_name=None):
        ret = "/%s/%s/blueprints/%s/artifacts" % (_scope_path(scope), PROVIDER_PATH, _quote(blueprint_name))
        if artifact_name is not None:
            ret += '/' + _quote(artifact_name)
        return ret

    def get(self, resource_scope, blueprint_name, artifact_name, **kwargs):
        '''
        Get an artifact. The result is an Artifact subclass selected by kind.
        '''
        return self._call('GET', self._path(resource_scope, blueprint_name, artifact_name), 'Artifact', (200,), **kwargs)

    def list(self, resource_scope, blueprint_name, **kwargs):
        '''
        List artifacts of a blueprint definition
        '''
        return self._pager(self._path(resource_scope, blueprint_name), 'Artifact', **kwargs)

    def create_or_update(self, resource_scope, blueprint_name, artifact_name, artifact, **kwargs):
        '''
        Create or update an artifact
        '''
        body = model_serialize(artifact, 'Artifact')
        return self._call('PUT', self._path(resource_scope, blueprint_name, artifact_name), 'Artifact', (200, 201), body=body, **kwargs)

    def delete(self, resource_scope, blueprint_name, artifact_name, **kwargs):
        '''
        Delete an artifact
        '''
        return self._call('DELETE', self._path(resource_scope, blueprint_name, artifact_name), 'Artifact', (200, 204), **kwargs)

class AssignmentsOperations(_OperationsBase):
    '''
    Blueprint assignments
    '''
    @staticmethod
    def _path(scope, assignment_name=None):
        ret = "/%s/%s/blueprintAssignments" % (_scope_path(scope), PROVIDER_PATH)
        if assignment_name is not None:
            ret += '/' + _quote(assignment_name)
        return ret

    def get(self, resource_scope, assignment_name, **kwargs):
        '''
        Get an assignment
        '''
        return self._call('GET', self._path(resource_scope, assignment_name), 'Assignment', (200,), **kwargs)

    def list(self, resource_scope, **kwargs):
        '''
        List assignments in a scope
        '''
        return self._pager(self._path(resource_scope), 'Assignment', **kwargs)

    def create_or_update(self, resource_scope, assignment_name, assignment, **kwargs):
        '''
        Create or update an assignment
        '''
        body = model_serialize(assignment, 'Assignment')
        return self._call('PUT', self._path(resource_scope, assignment_name), 'Assignment', (200, 201), body=body, **kwargs)

    def delete(self, resource_scope, assignment_name, **kwargs):
        '''
        Delete an assignment. Returns None if the service sends no body.
        '''
        return self._call('DELETE', self._path(resource_scope, assignment_name), 'Assignment', (200, 204), **kwargs)

    def who_is_blueprint(self, resource_scope, assignment_name, **kwargs):
        '''
        Get the object id of the Azure Blueprints service principal
        '''
        path = self._path(resource_scope, assignment_name) + '/WhoIsBlueprint'
        return self._call('POST', path, 'WhoIsBlueprintContract', (200,), **kwargs)

class BlueprintManagementClient():
    '''
    Client for the Microsoft.Blueprint resource provider.
    '''
    def __init__(self, credential, base_url=BASE_URL_DEFAULT, api_version=BLUEPRINT_API_VERSION, **kwargs):
        self._config = BlueprintManagementClientConfiguration(credential, api_version=api_version, **kwargs)
        self._client = ARMPipelineClient(base_url=base_url, config=self._config, **kwargs)
        self.blueprints = BlueprintsOperations(self._client, self._config)
        self.published_blueprints = PublishedBlueprintsOperations(self._client, self._config)
        self.artifacts = ArtifactsOperations(self._client, self._config)
        self.assignments = AssignmentsOperations(self._client, self._config)

    def __repr__(self):
        return "%s(base_url=%r, api_version=%r)" % (type(self).__name__, self._client._base_url, self._config.api_version) # pylint: disable=protected-access

    def close(self):
        '''
        Release the underlying transport
        '''
        self._client.close()

    def __enter__(self):
        self._client.__enter__()
        return self

    def __exit__(self, *exc_details):
        self._client.__exit__(*exc_details)
