#
# azblueprint/base_defaults.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Default settings that are not loaded from any configuration.
To keep dependencies simple, use only Python built-in types here.
'''
# REST API version spoken by the Blueprint resource provider.
BLUEPRINT_API_VERSION = '2018-11-01-preview'

# ARM endpoint for the public cloud.
BASE_URL_DEFAULT = 'https://management.azure.com'

# Token scope requested for ARM calls.
CREDENTIAL_SCOPES_DEFAULT = ('https://management.azure.com/.default',)

# Suffix appended to the display name of an imported blueprint definition.
# Import refuses a derived name equal to the name of the source definition.
BLUEPRINT_IMPORT_NAME_SUFFIX = ' - Copy'

EXC_VALUE_DEFAULT = ValueError

LOGGER_NAME_DEFAULT = 'azblueprint'

# Prefix for item expansion
PF = '  '

USER_AGENT_DEFAULT = 'azblueprint/1.0.0'
