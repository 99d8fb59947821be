#
# azblueprint/views.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Display models projected from wire DTOs.

A view is built once from a DTO plus the scope the DTO was fetched
under, and is read-only from then on. Projection never touches the
network and never modifies the DTO.
'''
import enum

from azblueprint.btypes import ReadOnlyDict
from azblueprint.exceptions import UnsupportedVariant
from azblueprint.models import ArtifactVariant

def _freeze(value):
    '''
    Return a read-only copy of value
    '''
    if isinstance(value, View):
        return value
    if isinstance(value, dict):
        return ReadOnlyDict({k : _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(x) for x in value)
    return value

def _thaw(value):
    '''
    Inverse of _freeze() for to_dict() output
    '''
    if isinstance(value, View):
        return value.to_dict()
    if isinstance(value, dict):
        return {k : _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(x) for x in value]
    if isinstance(value, enum.Enum):
        return value.value
    return value

def _view_map(view_class, models, scope):
    '''
    Project a name -> DTO mapping to name -> view
    '''
    if models is None:
        return None
    return {k : (view_class.from_model(v, scope) if v is not None else None) for k, v in models.items()}

def _parameter_values(parameters):
    '''
    Project name -> ParameterValue to name -> {'value': ...} or {'reference': ...}
    '''
    if parameters is None:
        return None
    ret = dict()
    for k, v in parameters.items():
        if v is None:
            ret[k] = None
            continue
        ret[k] = {a : getattr(v, a) for a in ('value', 'reference') if getattr(v, a) is not None}
    return ret

class View():
    '''
    Base class for display models.
    Subclasses list their attributes in FIELDS.
    '''
    FIELDS = tuple()

    def __init__(self, scope, **kwargs):
        unknown = set(kwargs) - set(self.FIELDS)
        if unknown:
            raise TypeError("%s got unexpected fields %s" % (type(self).__name__, sorted(unknown)))
        object.__setattr__(self, 'scope', scope)
        for field in self.FIELDS:
            object.__setattr__(self, field, _freeze(kwargs.get(field, None)))

    def __setattr__(self, name, value):
        raise TypeError("%s is read-only (cannot set %r)" % (type(self).__name__, name))

    def __delattr__(self, name):
        raise TypeError("%s is read-only (cannot delete %r)" % (type(self).__name__, name))

    def __repr__(self):
        args = ', '.join("%s=%r" % (field, getattr(self, field)) for field in ('scope',) + self.FIELDS)
        return "%s(%s)" % (type(self).__name__, args)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def to_dict(self):
        '''
        Return a plain dict of this view, suitable for printing
        '''
        ret = {'scope' : self.scope}
        for field in self.FIELDS:
            ret[field] = _thaw(getattr(self, field))
        return ret

class BlueprintStatusView(View):
    '''
    Creation and modification times of a definition
    '''
    FIELDS = ('time_created',
              'last_modified',
             )

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project BlueprintStatus
        '''
        return cls(scope, time_created=model.time_created, last_modified=model.last_modified)

class ParameterDefinitionView(View):
    '''
    Parameter declared by a definition
    '''
    FIELDS = ('type',
              'display_name',
              'description',
              'strong_type',
              'default_value',
              'allowed_values',
             )

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project ParameterDefinition
        '''
        return cls(scope, **{field : getattr(model, field) for field in cls.FIELDS})

class ResourceGroupDefinitionView(View):
    '''
    Resource group placeholder declared by a definition
    '''
    FIELDS = ('name',
              'location',
              'display_name',
              'description',
              'strong_type',
              'depends_on',
              'tags',
             )

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project ResourceGroupDefinition
        '''
        return cls(scope, **{field : getattr(model, field) for field in cls.FIELDS})

def _sub_view(view_class, model, scope):
    return view_class.from_model(model, scope) if model is not None else None

def _versions(versions):
    '''
    versions arrives as a mapping of version name to
    published blueprint; only the names are kept.
    '''
    if versions is None:
        return None
    if isinstance(versions, dict):
        return list(versions.keys())
    return list(versions)

class BlueprintView(View):
    '''
    Blueprint definition
    '''
    FIELDS = ('name',
              'id',
              'display_name',
              'description',
              'status',
              'target_scope',
              'parameters',
              'resource_groups',
              'versions',
             )

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project Blueprint
        '''
        return cls(scope,
                   name=model.name,
                   id=model.id,
                   display_name=model.display_name,
                   description=model.description,
                   status=_sub_view(BlueprintStatusView, model.status, scope),
                   target_scope=model.target_scope,
                   parameters=_view_map(ParameterDefinitionView, model.parameters, scope),
                   resource_groups=_view_map(ResourceGroupDefinitionView, model.resource_groups, scope),
                   versions=_versions(model.versions),
                  )

class PublishedBlueprintView(View):
    '''
    Published version of a blueprint definition
    '''
    FIELDS = ('name',
              'id',
              'blueprint_name',
              'change_notes',
              'display_name',
              'description',
              'status',
              'target_scope',
              'parameters',
              'resource_groups',
             )

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project PublishedBlueprint
        '''
        return cls(scope,
                   name=model.name,
                   id=model.id,
                   blueprint_name=model.blueprint_name,
                   change_notes=model.change_notes,
                   display_name=model.display_name,
                   description=model.description,
                   status=_sub_view(BlueprintStatusView, model.status, scope),
                   target_scope=model.target_scope,
                   parameters=_view_map(ParameterDefinitionView, model.parameters, scope),
                   resource_groups=_view_map(ResourceGroupDefinitionView, model.resource_groups, scope),
                  )

class ArtifactView(View):
    '''
    Fields common to every artifact variant.
    Not instantiated directly; see artifact_view_from_model().
    '''
    FIELDS = ('name',
              'id',
              'kind',
              'display_name',
              'description',
              'depends_on',
              'resource_group',
             )
    variant = None

    @classmethod
    def _common(cls, model):
        return {field : getattr(model, field, None) for field in ArtifactView.FIELDS}

class TemplateArtifactView(ArtifactView):
    '''
    ARM template artifact
    '''
    FIELDS = ArtifactView.FIELDS + ('template',
                                    'parameters',
                                   )
    variant = ArtifactVariant.TEMPLATE

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project TemplateArtifact
        '''
        return cls(scope,
                   template=model.template,
                   parameters=_parameter_values(model.parameters),
                   **cls._common(model))

class PolicyAssignmentArtifactView(ArtifactView):
    '''
    Policy assignment artifact
    '''
    FIELDS = ArtifactView.FIELDS + ('policy_definition_id',
                                    'parameters',
                                   )
    variant = ArtifactVariant.POLICY_ASSIGNMENT

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project PolicyAssignmentArtifact
        '''
        return cls(scope,
                   policy_definition_id=model.policy_definition_id,
                   parameters=_parameter_values(model.parameters),
                   **cls._common(model))

class RoleAssignmentArtifactView(ArtifactView):
    '''
    Role assignment artifact
    '''
    FIELDS = ArtifactView.FIELDS + ('role_definition_id',
                                    'principal_ids',
                                   )
    variant = ArtifactVariant.ROLE_ASSIGNMENT

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project RoleAssignmentArtifact
        '''
        return cls(scope,
                   role_definition_id=model.role_definition_id,
                   principal_ids=model.principal_ids,
                   **cls._common(model))

ARTIFACT_VIEW_CLASSES = ReadOnlyDict({ArtifactVariant.TEMPLATE : TemplateArtifactView,
                                      ArtifactVariant.POLICY_ASSIGNMENT : PolicyAssignmentArtifactView,
                                      ArtifactVariant.ROLE_ASSIGNMENT : RoleAssignmentArtifactView,
                                     })

def artifact_view_from_model(model, scope):
    '''
    Project an artifact DTO to the view for its variant.
    The variant is the tag assigned when the artifact was decoded.
    Raises UnsupportedVariant for UNKNOWN or an untagged object.
    '''
    variant = getattr(model, 'variant', None)
    try:
        view_class = ARTIFACT_VIEW_CLASSES[variant]
    except (KeyError, TypeError) as exc:
        raise UnsupportedVariant(type(model).__name__, kind=getattr(model, 'kind', None)) from exc
    return view_class.from_model(model, scope)

class AssignmentStatusView(View):
    '''
    Status of an assignment
    '''
    FIELDS = ('time_created',
              'last_modified',
              'managed_resources',
             )

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project AssignmentStatus
        '''
        return cls(scope, **{field : getattr(model, field) for field in cls.FIELDS})

class AssignmentLockSettingsView(View):
    '''
    Lock settings of an assignment
    '''
    FIELDS = ('mode',
              'excluded_principals',
             )

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project AssignmentLockSettings
        '''
        return cls(scope, mode=model.mode, excluded_principals=model.excluded_principals)

def _identity(identity):
    if identity is None:
        return None
    ret = {'type' : identity.type,
           'principal_id' : identity.principal_id,
           'tenant_id' : identity.tenant_id,
          }
    if identity.user_assigned_identities:
        ret['user_assigned_identities'] = {k : {'principal_id' : v.principal_id, 'client_id' : v.client_id}
                                           for k, v in identity.user_assigned_identities.items()}
    return ret

def _resource_group_values(resource_groups):
    if resource_groups is None:
        return None
    return {k : {'name' : v.name, 'location' : v.location} for k, v in resource_groups.items()}

class AssignmentView(View):
    '''
    Blueprint assignment.
    assigned_scope is the scope named in the assignment properties;
    scope is the scope it was fetched under.
    '''
    FIELDS = ('name',
              'id',
              'location',
              'identity',
              'display_name',
              'description',
              'blueprint_id',
              'assigned_scope',
              'parameters',
              'resource_groups',
              'status',
              'locks',
              'provisioning_state',
             )

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project Assignment
        '''
        return cls(scope,
                   name=model.name,
                   id=model.id,
                   location=model.location,
                   identity=_identity(model.identity),
                   display_name=model.display_name,
                   description=model.description,
                   blueprint_id=model.blueprint_id,
                   assigned_scope=model.scope,
                   parameters=_parameter_values(model.parameters),
                   resource_groups=_resource_group_values(model.resource_groups),
                   status=_sub_view(AssignmentStatusView, model.status, scope),
                   locks=_sub_view(AssignmentLockSettingsView, model.locks, scope),
                   provisioning_state=model.provisioning_state,
                  )

class WhoIsBlueprintView(View):
    '''
    Object id of the Azure Blueprints service principal
    '''
    FIELDS = ('object_id',)

    @classmethod
    def from_model(cls, model, scope):
        '''
        Project WhoIsBlueprintContract
        '''
        return cls(scope, object_id=model.object_id)
