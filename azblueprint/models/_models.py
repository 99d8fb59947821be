#
# azblueprint/models/_models.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Wire DTOs for the Microsoft.Blueprint resource provider.

These follow the shape of AutoRest-generated msrest models so that
msrest.Serializer and msrest.Deserializer handle flattening of
properties.* keys and artifact subtype selection.
'''
import enum

import msrest.serialization

from azblueprint.btypes import EnumMixin

class ArtifactVariant(EnumMixin, enum.Enum):
    '''
    Closed set of artifact variants. Assigned when an artifact is decoded.
    UNKNOWN marks an artifact whose kind is outside the known set.
    '''
    TEMPLATE = 'template'
    POLICY_ASSIGNMENT = 'policyAssignment'
    ROLE_ASSIGNMENT = 'roleAssignment'
    UNKNOWN = 'unknown'

class TargetScope(EnumMixin, enum.Enum):
    '''
    Where a blueprint definition may be assigned
    '''
    SUBSCRIPTION = 'subscription'
    MANAGEMENT_GROUP = 'managementGroup'

class AssignmentLockMode(EnumMixin, enum.Enum):
    '''
    Lock mode applied to resources deployed by an assignment
    '''
    NONE = 'None'
    ALL_RESOURCES_READ_ONLY = 'AllResourcesReadOnly'
    ALL_RESOURCES_DO_NOT_DELETE = 'AllResourcesDoNotDelete'

class BlueprintStatus(msrest.serialization.Model):
    '''
    Status of a blueprint definition. Set by the service.
    '''
    _validation = {
        'time_created': {'readonly': True},
        'last_modified': {'readonly': True},
    }

    _attribute_map = {
        'time_created': {'key': 'timeCreated', 'type': 'iso-8601'},
        'last_modified': {'key': 'lastModified', 'type': 'iso-8601'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.time_created = None
        self.last_modified = None

class ParameterDefinition(msrest.serialization.Model):
    '''
    Declaration of a blueprint parameter
    '''
    _validation = {
        'type': {'required': True},
    }

    _attribute_map = {
        'type': {'key': 'type', 'type': 'str'},
        'default_value': {'key': 'defaultValue', 'type': 'object'},
        'allowed_values': {'key': 'allowedValues', 'type': '[object]'},
        'display_name': {'key': 'metadata.displayName', 'type': 'str'},
        'description': {'key': 'metadata.description', 'type': 'str'},
        'strong_type': {'key': 'metadata.strongType', 'type': 'str'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.type = kwargs.get('type', None)
        self.default_value = kwargs.get('default_value', None)
        self.allowed_values = kwargs.get('allowed_values', None)
        self.display_name = kwargs.get('display_name', None)
        self.description = kwargs.get('description', None)
        self.strong_type = kwargs.get('strong_type', None)

class ParameterValue(msrest.serialization.Model):
    '''
    Value supplied for a parameter. reference is a key vault secret reference.
    '''
    _attribute_map = {
        'value': {'key': 'value', 'type': 'object'},
        'reference': {'key': 'reference', 'type': 'object'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.value = kwargs.get('value', None)
        self.reference = kwargs.get('reference', None)

class ResourceGroupDefinition(msrest.serialization.Model):
    '''
    Placeholder for a resource group created at assignment time
    '''
    _attribute_map = {
        'name': {'key': 'name', 'type': 'str'},
        'location': {'key': 'location', 'type': 'str'},
        'display_name': {'key': 'metadata.displayName', 'type': 'str'},
        'description': {'key': 'metadata.description', 'type': 'str'},
        'strong_type': {'key': 'metadata.strongType', 'type': 'str'},
        'depends_on': {'key': 'dependsOn', 'type': '[str]'},
        'tags': {'key': 'tags', 'type': '{str}'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.name = kwargs.get('name', None)
        self.location = kwargs.get('location', None)
        self.display_name = kwargs.get('display_name', None)
        self.description = kwargs.get('description', None)
        self.strong_type = kwargs.get('strong_type', None)
        self.depends_on = kwargs.get('depends_on', None)
        self.tags = kwargs.get('tags', None)

class ResourceGroupValue(msrest.serialization.Model):
    '''
    Name and location chosen for a resource group placeholder
    '''
    _attribute_map = {
        'name': {'key': 'name', 'type': 'str'},
        'location': {'key': 'location', 'type': 'str'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.name = kwargs.get('name', None)
        self.location = kwargs.get('location', None)

class Blueprint(msrest.serialization.Model):
    '''
    Blueprint definition
    '''
    _validation = {
        'id': {'readonly': True},
        'type': {'readonly': True},
        'name': {'readonly': True},
        'status': {'readonly': True},
    }

    _attribute_map = {
        'id': {'key': 'id', 'type': 'str'},
        'type': {'key': 'type', 'type': 'str'},
        'name': {'key': 'name', 'type': 'str'},
        'display_name': {'key': 'properties.displayName', 'type': 'str'},
        'description': {'key': 'properties.description', 'type': 'str'},
        'status': {'key': 'properties.status', 'type': 'BlueprintStatus'},
        'target_scope': {'key': 'properties.targetScope', 'type': 'str'},
        'parameters': {'key': 'properties.parameters', 'type': '{ParameterDefinition}'},
        'resource_groups': {'key': 'properties.resourceGroups', 'type': '{ResourceGroupDefinition}'},
        'versions': {'key': 'properties.versions', 'type': 'object'},
        'layout': {'key': 'properties.layout', 'type': 'object'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = None
        self.type = None
        self.name = None
        self.display_name = kwargs.get('display_name', None)
        self.description = kwargs.get('description', None)
        self.status = None
        self.target_scope = kwargs.get('target_scope', None)
        self.parameters = kwargs.get('parameters', None)
        self.resource_groups = kwargs.get('resource_groups', None)
        self.versions = kwargs.get('versions', None)
        self.layout = kwargs.get('layout', None)

class PublishedBlueprint(msrest.serialization.Model):
    '''
    Immutable published version of a blueprint definition
    '''
    _validation = {
        'id': {'readonly': True},
        'type': {'readonly': True},
        'name': {'readonly': True},
        'status': {'readonly': True},
    }

    _attribute_map = {
        'id': {'key': 'id', 'type': 'str'},
        'type': {'key': 'type', 'type': 'str'},
        'name': {'key': 'name', 'type': 'str'},
        'display_name': {'key': 'properties.displayName', 'type': 'str'},
        'description': {'key': 'properties.description', 'type': 'str'},
        'status': {'key': 'properties.status', 'type': 'BlueprintStatus'},
        'target_scope': {'key': 'properties.targetScope', 'type': 'str'},
        'parameters': {'key': 'properties.parameters', 'type': '{ParameterDefinition}'},
        'resource_groups': {'key': 'properties.resourceGroups', 'type': '{ResourceGroupDefinition}'},
        'blueprint_name': {'key': 'properties.blueprintName', 'type': 'str'},
        'change_notes': {'key': 'properties.changeNotes', 'type': 'str'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = None
        self.type = None
        self.name = None
        self.display_name = kwargs.get('display_name', None)
        self.description = kwargs.get('description', None)
        self.status = None
        self.target_scope = kwargs.get('target_scope', None)
        self.parameters = kwargs.get('parameters', None)
        self.resource_groups = kwargs.get('resource_groups', None)
        self.blueprint_name = kwargs.get('blueprint_name', None)
        self.change_notes = kwargs.get('change_notes', None)

class Artifact(msrest.serialization.Model):
    '''
    Base of the artifact tagged union. Subclasses are selected on kind.
    An instance of this class itself carries a kind outside the known set.
    '''
    variant = ArtifactVariant.UNKNOWN

    _validation = {
        'id': {'readonly': True},
        'type': {'readonly': True},
        'name': {'readonly': True},
        'kind': {'required': True},
    }

    _attribute_map = {
        'id': {'key': 'id', 'type': 'str'},
        'type': {'key': 'type', 'type': 'str'},
        'name': {'key': 'name', 'type': 'str'},
        'kind': {'key': 'kind', 'type': 'str'},
    }

    _subtype_map = {
        'kind': {'template': 'TemplateArtifact',
                 'policyAssignment': 'PolicyAssignmentArtifact',
                 'roleAssignment': 'RoleAssignmentArtifact',
                }
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = None
        self.type = None
        self.name = None
        self.kind = None

class TemplateArtifact(Artifact):
    '''
    Artifact that deploys an ARM template
    '''
    variant = ArtifactVariant.TEMPLATE

    _validation = {
        'id': {'readonly': True},
        'type': {'readonly': True},
        'name': {'readonly': True},
        'kind': {'required': True},
        'template': {'required': True},
        'parameters': {'required': True},
    }

    _attribute_map = {
        'id': {'key': 'id', 'type': 'str'},
        'type': {'key': 'type', 'type': 'str'},
        'name': {'key': 'name', 'type': 'str'},
        'kind': {'key': 'kind', 'type': 'str'},
        'display_name': {'key': 'properties.displayName', 'type': 'str'},
        'description': {'key': 'properties.description', 'type': 'str'},
        'depends_on': {'key': 'properties.dependsOn', 'type': '[str]'},
        'template': {'key': 'properties.template', 'type': 'object'},
        'resource_group': {'key': 'properties.resourceGroup', 'type': 'str'},
        'parameters': {'key': 'properties.parameters', 'type': '{ParameterValue}'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.kind = 'template'
        self.display_name = kwargs.get('display_name', None)
        self.description = kwargs.get('description', None)
        self.depends_on = kwargs.get('depends_on', None)
        self.template = kwargs.get('template', None)
        self.resource_group = kwargs.get('resource_group', None)
        self.parameters = kwargs.get('parameters', None)

class PolicyAssignmentArtifact(Artifact):
    '''
    Artifact that assigns an Azure Policy definition
    '''
    variant = ArtifactVariant.POLICY_ASSIGNMENT

    _validation = {
        'id': {'readonly': True},
        'type': {'readonly': True},
        'name': {'readonly': True},
        'kind': {'required': True},
        'policy_definition_id': {'required': True},
        'parameters': {'required': True},
    }

    _attribute_map = {
        'id': {'key': 'id', 'type': 'str'},
        'type': {'key': 'type', 'type': 'str'},
        'name': {'key': 'name', 'type': 'str'},
        'kind': {'key': 'kind', 'type': 'str'},
        'display_name': {'key': 'properties.displayName', 'type': 'str'},
        'description': {'key': 'properties.description', 'type': 'str'},
        'depends_on': {'key': 'properties.dependsOn', 'type': '[str]'},
        'policy_definition_id': {'key': 'properties.policyDefinitionId', 'type': 'str'},
        'parameters': {'key': 'properties.parameters', 'type': '{ParameterValue}'},
        'resource_group': {'key': 'properties.resourceGroup', 'type': 'str'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.kind = 'policyAssignment'
        self.display_name = kwargs.get('display_name', None)
        self.description = kwargs.get('description', None)
        self.depends_on = kwargs.get('depends_on', None)
        self.policy_definition_id = kwargs.get('policy_definition_id', None)
        self.parameters = kwargs.get('parameters', None)
        self.resource_group = kwargs.get('resource_group', None)

class RoleAssignmentArtifact(Artifact):
    '''
    Artifact that assigns an RBAC role.
    principal_ids is a list of object ids or an expression that evaluates to one.
    '''
    variant = ArtifactVariant.ROLE_ASSIGNMENT

    _validation = {
        'id': {'readonly': True},
        'type': {'readonly': True},
        'name': {'readonly': True},
        'kind': {'required': True},
        'role_definition_id': {'required': True},
        'principal_ids': {'required': True},
    }

    _attribute_map = {
        'id': {'key': 'id', 'type': 'str'},
        'type': {'key': 'type', 'type': 'str'},
        'name': {'key': 'name', 'type': 'str'},
        'kind': {'key': 'kind', 'type': 'str'},
        'display_name': {'key': 'properties.displayName', 'type': 'str'},
        'description': {'key': 'properties.description', 'type': 'str'},
        'depends_on': {'key': 'properties.dependsOn', 'type': '[str]'},
        'role_definition_id': {'key': 'properties.roleDefinitionId', 'type': 'str'},
        'principal_ids': {'key': 'properties.principalIds', 'type': 'object'},
        'resource_group': {'key': 'properties.resourceGroup', 'type': 'str'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.kind = 'roleAssignment'
        self.display_name = kwargs.get('display_name', None)
        self.description = kwargs.get('description', None)
        self.depends_on = kwargs.get('depends_on', None)
        self.role_definition_id = kwargs.get('role_definition_id', None)
        self.principal_ids = kwargs.get('principal_ids', None)
        self.resource_group = kwargs.get('resource_group', None)

class UserAssignedIdentity(msrest.serialization.Model):
    '''
    User-assigned managed identity attached to an assignment
    '''
    _attribute_map = {
        'principal_id': {'key': 'principalId', 'type': 'str'},
        'client_id': {'key': 'clientId', 'type': 'str'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.principal_id = kwargs.get('principal_id', None)
        self.client_id = kwargs.get('client_id', None)

class ManagedServiceIdentity(msrest.serialization.Model):
    '''
    Managed identity used by the blueprint service for an assignment
    '''
    _validation = {
        'type': {'required': True},
    }

    _attribute_map = {
        'type': {'key': 'type', 'type': 'str'},
        'principal_id': {'key': 'principalId', 'type': 'str'},
        'tenant_id': {'key': 'tenantId', 'type': 'str'},
        'user_assigned_identities': {'key': 'userAssignedIdentities', 'type': '{UserAssignedIdentity}'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.type = kwargs.get('type', None)
        self.principal_id = kwargs.get('principal_id', None)
        self.tenant_id = kwargs.get('tenant_id', None)
        self.user_assigned_identities = kwargs.get('user_assigned_identities', None)

class AssignmentStatus(msrest.serialization.Model):
    '''
    Status of an assignment. Set by the service.
    '''
    _validation = {
        'time_created': {'readonly': True},
        'last_modified': {'readonly': True},
        'managed_resources': {'readonly': True},
    }

    _attribute_map = {
        'time_created': {'key': 'timeCreated', 'type': 'iso-8601'},
        'last_modified': {'key': 'lastModified', 'type': 'iso-8601'},
        'managed_resources': {'key': 'managedResources', 'type': '[str]'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.time_created = None
        self.last_modified = None
        self.managed_resources = None

class AssignmentLockSettings(msrest.serialization.Model):
    '''
    Resource lock applied by an assignment
    '''
    _attribute_map = {
        'mode': {'key': 'mode', 'type': 'str'},
        'excluded_principals': {'key': 'excludedPrincipals', 'type': '[str]'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.mode = kwargs.get('mode', None)
        self.excluded_principals = kwargs.get('excluded_principals', None)

class Assignment(msrest.serialization.Model):
    '''
    Assignment of a published blueprint to a subscription or management group
    '''
    _validation = {
        'id': {'readonly': True},
        'type': {'readonly': True},
        'name': {'readonly': True},
        'location': {'required': True},
        'identity': {'required': True},
        'parameters': {'required': True},
        'resource_groups': {'required': True},
        'status': {'readonly': True},
        'provisioning_state': {'readonly': True},
    }

    _attribute_map = {
        'id': {'key': 'id', 'type': 'str'},
        'type': {'key': 'type', 'type': 'str'},
        'name': {'key': 'name', 'type': 'str'},
        'location': {'key': 'location', 'type': 'str'},
        'identity': {'key': 'identity', 'type': 'ManagedServiceIdentity'},
        'display_name': {'key': 'properties.displayName', 'type': 'str'},
        'description': {'key': 'properties.description', 'type': 'str'},
        'blueprint_id': {'key': 'properties.blueprintId', 'type': 'str'},
        'scope': {'key': 'properties.scope', 'type': 'str'},
        'parameters': {'key': 'properties.parameters', 'type': '{ParameterValue}'},
        'resource_groups': {'key': 'properties.resourceGroups', 'type': '{ResourceGroupValue}'},
        'status': {'key': 'properties.status', 'type': 'AssignmentStatus'},
        'locks': {'key': 'properties.locks', 'type': 'AssignmentLockSettings'},
        'provisioning_state': {'key': 'properties.provisioningState', 'type': 'str'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = None
        self.type = None
        self.name = None
        self.location = kwargs.get('location', None)
        self.identity = kwargs.get('identity', None)
        self.display_name = kwargs.get('display_name', None)
        self.description = kwargs.get('description', None)
        self.blueprint_id = kwargs.get('blueprint_id', None)
        self.scope = kwargs.get('scope', None)
        self.parameters = kwargs.get('parameters', None)
        self.resource_groups = kwargs.get('resource_groups', None)
        self.status = None
        self.locks = kwargs.get('locks', None)
        self.provisioning_state = None

class WhoIsBlueprintContract(msrest.serialization.Model):
    '''
    Object id of the Azure Blueprints service principal in the tenant
    '''
    _attribute_map = {
        'object_id': {'key': 'objectId', 'type': 'str'},
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.object_id = kwargs.get('object_id', None)

