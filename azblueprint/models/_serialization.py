#
# azblueprint/models/_serialization.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
msrest Serializer/Deserializer bound to the azblueprint wire DTOs.
'''
import copy

import msrest.serialization

from . import _models

CLIENT_MODELS = {k: v for k, v in vars(_models).items() if isinstance(v, type) and issubclass(v, msrest.serialization.Model)}

_SERIALIZER = msrest.serialization.Serializer(CLIENT_MODELS)
_DESERIALIZER = msrest.serialization.Deserializer(CLIENT_MODELS)

def model_deserialize(type_name, data):
    '''
    Decode data (a dict parsed from JSON) as the DTO named type_name.
    Return None for empty data.

    msrest selects an artifact subclass from kind and pops kind from
    the dict while doing so. A kind outside the known set decodes as the
    Artifact base class, which then carries the raw kind so that the
    projection layer can report it.
    '''
    if not data:
        return None
    data = copy.deepcopy(data)
    raw_kind = data.get('kind') if isinstance(data, dict) else None
    ret = _DESERIALIZER(type_name, data)
    if isinstance(ret, _models.Artifact) and (ret.kind is None):
        ret.kind = raw_kind
    return ret

def model_serialize(model, type_name=None, keep_readonly=False):
    '''
    Encode model as a JSON-compatible dict. Attributes whose value is None are omitted.
    With keep_readonly, service-populated attributes (id, status, ...) are included.
    '''
    type_name = type_name or type(model).__name__
    if keep_readonly:
        return _SERIALIZER._serialize(model, type_name, keep_readonly=True) # pylint: disable=protected-access
    return _SERIALIZER.body(model, type_name)
