#
# azblueprint/scope.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Format checks for blueprint scopes, resource names, resource IDs and URIs.

A scope is opaque everywhere else in azblueprint. It is only ever
inspected here, and only to reject malformed input before a request
is built.

naming rules: https://docs.microsoft.com/en-us/azure/azure-resource-manager/management/resource-name-rules
'''
import re
import urllib.parse

from azblueprint.exceptions import InvalidArgument
from azblueprint.util import (RE_UUID_TXT,
                              re_abs,
                              uuid_normalize,
                             )

# regexp conventions:
# X_TXT: The regexp in text form, to be found anywhere within the string.
# X_RE: compiled(X_TXT)
# X_ABS: compiled(re_abs(X_TXT))

# 1 subscription_id
RE_SUBSCRIPTION_SCOPE_TXT = r'/subscriptions/' + RE_UUID_TXT
RE_SUBSCRIPTION_SCOPE_ABS = re.compile(re_abs(RE_SUBSCRIPTION_SCOPE_TXT), flags=re.IGNORECASE)

# 1 management group name
MANAGEMENT_GROUP_NAME_LEN_MAX = 90
RE_MANAGEMENT_GROUP_NAME_TXT = r'([-\w\.\(\)]{1,' + str(MANAGEMENT_GROUP_NAME_LEN_MAX) + r'})'
RE_MANAGEMENT_GROUP_NAME_ABS = re.compile(re_abs(RE_MANAGEMENT_GROUP_NAME_TXT))
RE_MANAGEMENT_GROUP_SCOPE_TXT = r'/providers/Microsoft\.Management/managementGroups/' + RE_MANAGEMENT_GROUP_NAME_TXT
RE_MANAGEMENT_GROUP_SCOPE_ABS = re.compile(re_abs(RE_MANAGEMENT_GROUP_SCOPE_TXT), flags=re.IGNORECASE)

# blueprint, artifact, assignment and version names
# These are path segments; the characters ARM rejects in resource names are excluded.
RESOURCE_NAME_LEN_MAX = 90
RE_RESOURCE_NAME_TXT = r'([^<>%&:\\\?/#\*\x00-\x1f]{1,' + str(RESOURCE_NAME_LEN_MAX) + r'})'
RE_RESOURCE_NAME_ABS = re.compile(re_abs(RE_RESOURCE_NAME_TXT))

# 1 subscription_id
# 2 resource_group_name
# 3 vault name
RE_RESOURCE_GROUP_TXT = r'([a-zA-Z0-9][a-zA-Z0-9\-\._\(\)]{0,88}[a-zA-Z0-9_\-\(\)]{0,1})'
RE_VAULT_NAME_TXT = r'([a-zA-Z][a-zA-Z0-9\-]{1,22}[a-zA-Z0-9])'
RE_VAULT_ID_TXT = r'/subscriptions/' + RE_UUID_TXT + r'/resourceGroups/' + RE_RESOURCE_GROUP_TXT + r'/providers/Microsoft\.KeyVault/vaults/' + RE_VAULT_NAME_TXT
RE_VAULT_ID_ABS = re.compile(re_abs(RE_VAULT_ID_TXT), flags=re.IGNORECASE)

URI_SCHEMES_ALLOWED = ('http', 'https')

def subscription_scope(subscription_id):
    '''
    Return the blueprint scope string for subscription_id
    '''
    return '/subscriptions/' + uuid_normalize(subscription_id, key='subscription_id', exc_value=InvalidArgument)

def management_group_scope(management_group):
    '''
    Return the blueprint scope string for a management group name
    '''
    if not (isinstance(management_group, str) and RE_MANAGEMENT_GROUP_NAME_ABS.search(management_group)):
        raise InvalidArgument("invalid management_group %r" % (management_group,))
    return '/providers/Microsoft.Management/managementGroups/' + management_group

def scope_is_subscription(scope):
    '''
    Return whether scope is of the subscription form
    '''
    return bool(isinstance(scope, str) and RE_SUBSCRIPTION_SCOPE_ABS.search(scope))

def scope_is_management_group(scope):
    '''
    Return whether scope is of the management group form
    '''
    return bool(isinstance(scope, str) and RE_MANAGEMENT_GROUP_SCOPE_ABS.search(scope))

def scope_validate(scope):
    '''
    Return scope unchanged if it is a subscription or
    management group scope. Raise InvalidArgument otherwise.
    '''
    if scope_is_subscription(scope) or scope_is_management_group(scope):
        return scope
    raise InvalidArgument("invalid scope %r (expected /subscriptions/<id> or /providers/Microsoft.Management/managementGroups/<name>)" % (scope,))

def _name_validate(name, regex, desc):
    if not (isinstance(name, str) and regex.search(name) and (name.strip() == name)):
        raise InvalidArgument("invalid %s %r" % (desc, name))
    return name

def blueprint_name_validate(name):
    '''
    Return name unchanged if it is a valid blueprint name
    '''
    return _name_validate(name, RE_RESOURCE_NAME_ABS, 'blueprint name')

def artifact_name_validate(name):
    '''
    Return name unchanged if it is a valid artifact name
    '''
    return _name_validate(name, RE_RESOURCE_NAME_ABS, 'artifact name')

def assignment_name_validate(name):
    '''
    Return name unchanged if it is a valid assignment name
    '''
    return _name_validate(name, RE_RESOURCE_NAME_ABS, 'assignment name')

def version_name_validate(name):
    '''
    Return name unchanged if it is a valid published version name
    '''
    return _name_validate(name, RE_RESOURCE_NAME_ABS, 'version')

def uri_is_well_formed_absolute(text):
    '''
    Return whether text is a well-formed absolute http or https URI
    '''
    if not isinstance(text, str) or (text != text.strip()) or (not text):
        return False
    try:
        parsed = urllib.parse.urlsplit(text)
    except ValueError:
        return False
    return (parsed.scheme.lower() in URI_SCHEMES_ALLOWED) and bool(parsed.netloc)

def uri_validate(text, desc='URI'):
    '''
    Return text unchanged if it is a well-formed absolute URI
    '''
    if not uri_is_well_formed_absolute(text):
        raise InvalidArgument("%s %r is not a well-formed absolute URI" % (desc, text))
    return text

def vault_id_validate(text, desc='key vault resource id'):
    '''
    Return text unchanged if it is a Microsoft.KeyVault/vaults resource id
    '''
    if not (isinstance(text, str) and RE_VAULT_ID_ABS.search(text)):
        raise InvalidArgument("%s %r is not a valid key vault resource id" % (desc, text))
    return text
