#
# azblueprint/models/__init__.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Wire DTOs and their msrest serialization helpers
'''
from ._models import (Artifact,
                      ArtifactVariant,
                      Assignment,
                      AssignmentLockMode,
                      AssignmentLockSettings,
                      AssignmentStatus,
                      Blueprint,
                      BlueprintStatus,
                      ManagedServiceIdentity,
                      ParameterDefinition,
                      ParameterValue,
                      PolicyAssignmentArtifact,
                      PublishedBlueprint,
                      ResourceGroupDefinition,
                      ResourceGroupValue,
                      RoleAssignmentArtifact,
                      TargetScope,
                      TemplateArtifact,
                      UserAssignedIdentity,
                      WhoIsBlueprintContract,
                     )
from ._serialization import (CLIENT_MODELS,
                             model_deserialize,
                             model_serialize,
                            )

__all__ = [
    'Artifact',
    'ArtifactVariant',
    'Assignment',
    'AssignmentLockMode',
    'AssignmentLockSettings',
    'AssignmentStatus',
    'Blueprint',
    'BlueprintStatus',
    'CLIENT_MODELS',
    'ManagedServiceIdentity',
    'ParameterDefinition',
    'ParameterValue',
    'PolicyAssignmentArtifact',
    'PublishedBlueprint',
    'ResourceGroupDefinition',
    'ResourceGroupValue',
    'RoleAssignmentArtifact',
    'TargetScope',
    'TemplateArtifact',
    'UserAssignedIdentity',
    'WhoIsBlueprintContract',
    'model_deserialize',
    'model_serialize',
]
