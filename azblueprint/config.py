#
# azblueprint/config.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Optional YAML configuration file.

The file is named by AZBLUEPRINT_CONFIG. It is a mapping with
these optional top-level keys:
  defaults:
    subscription_id: UUID used when --subscription_id is not given
    management_group: name used when --management_group is not given
    base_url: ARM endpoint
    api_version: Microsoft.Blueprint API version
  breaking_changes:
    - target: action name
      deprecated_output_type: ...
      (remaining keys as accepted by OutputBreakingChange)

A missing file (or no AZBLUEPRINT_CONFIG) is the same as an empty one.
'''
import os
import threading

import yaml

from azblueprint.base_defaults import EXC_VALUE_DEFAULT
from azblueprint.breaking_change import OutputBreakingChange
from azblueprint.btypes import ReadOnlyDict
from azblueprint.exceptions import (InvalidArgument,
                                    SchemaError,
                                   )
from azblueprint.scope import (RE_MANAGEMENT_GROUP_NAME_ABS,
                               uri_is_well_formed_absolute,
                              )
from azblueprint.util import uuid_normalize

ENV_CONFIG = 'AZBLUEPRINT_CONFIG'
ENV_DEBUG = 'AZBLUEPRINT_DEBUG'

class _Cfg():
    '''
    Manage configuration values. Loaded on first use and cached.
    '''
    def __init__(self):
        self._vlock = threading.RLock()
        self._vfilename = None
        self._vdata = None
        self._vbreaking = None

        # Hook for unit testing. Do not use this in production.
        self.test_values = dict()

        # Set to load a specific file rather than the one named by ENV_CONFIG.
        self.filename = None

    def reset(self):
        '''
        Discard cached data. Useful for unit testing.
        '''
        with self._vlock:
            self._vfilename = None
            self._vdata = None
            self._vbreaking = None
            self.test_values = dict()
            self.filename = None

    def _filename_get(self):
        return self.filename or os.environ.get(ENV_CONFIG, '') or None

    @staticmethod
    def _file_load(filename, exc_value=EXC_VALUE_DEFAULT):
        '''
        Read and parse filename. Return a dict.
        '''
        try:
            with open(filename, 'r') as f:
                contents = f.read()
        except FileNotFoundError:
            return dict()
        try:
            data = yaml.safe_load(contents)
        except yaml.error.MarkedYAMLError as exc:
            raise exc_value(f"cannot parse {filename!r}: error line {exc.problem_mark.line} column {exc.problem_mark.column}") from exc
        except yaml.error.YAMLError as exc:
            raise exc_value(f"cannot parse {filename!r}: error {exc}") from exc
        if data is None:
            # empty file - interpret it as an empty dict
            data = dict()
        if not isinstance(data, dict):
            raise exc_value(f"content of config file {filename!r} is not a dict")
        return data

    def _load_iff_necessary(self, exc_value=SchemaError):
        '''
        Load data iff not already loaded
        '''
        with self._vlock:
            if self._vdata is None:
                filename = self._filename_get()
                data = self._file_load(filename, exc_value=exc_value) if filename else dict()
                defaults = data.get('defaults', dict())
                if not isinstance(defaults, dict):
                    raise exc_value(f"defaults in {filename} has type {type(defaults)}; expected dict")
                breaking = data.get('breaking_changes', list())
                if not isinstance(breaking, list):
                    raise exc_value(f"breaking_changes in {filename} has type {type(breaking)}; expected list")
                self._vdata = self._data_validate(defaults, exc_value=exc_value)
                self._vbreaking = self._breaking_validate(breaking, filename, exc_value)
                self._vfilename = filename

    def _data_validate(self, data, hnamestack='_dh', unamestack='defaults', exc_value=EXC_VALUE_DEFAULT):
        '''
        data is a dict as loaded from the config
        validate the contents and return them.
        Each key may have a handler named _dh__<key>; values without one
        are accepted as-is if they are builtin scalars, and recursed into
        if they are dicts or lists.
        '''
        handler = getattr(self, hnamestack, None)
        if handler:
            return handler(data, unamestack, exc_value)
        if isinstance(data, (bool, int, str)):
            return data
        if isinstance(data, dict):
            return ReadOnlyDict({kk : self._data_validate(vv, unamestack=f'{unamestack}[{kk}]', hnamestack=f'{hnamestack}__{kk}', exc_value=exc_value) for kk, vv in data.items()})
        if isinstance(data, list):
            return tuple(self._data_validate(vv, unamestack=f'{unamestack}[{idx}]', hnamestack=f'{hnamestack}__contents', exc_value=exc_value) for idx, vv in enumerate(data))
        raise exc_value("%s has unexpected type %s" % (unamestack, type(data)))

    @staticmethod
    def _dh__subscription_id(value, unamestack, exc_value):
        '''
        Validate subscription_id as a UUID
        '''
        return uuid_normalize(value, key=unamestack, exc_value=exc_value)

    @staticmethod
    def _dh__management_group(value, unamestack, exc_value):
        '''
        Validate management_group as a management group name
        '''
        if not (isinstance(value, str) and RE_MANAGEMENT_GROUP_NAME_ABS.search(value)):
            raise exc_value(f"{unamestack} {value!r} is not a valid management group name")
        return value

    @staticmethod
    def _dh__base_url(value, unamestack, exc_value):
        '''
        Validate base_url as an absolute URI
        '''
        if not uri_is_well_formed_absolute(value):
            raise exc_value(f"{unamestack} {value!r} is not a well-formed absolute URI")
        return value.rstrip('/')

    @staticmethod
    def _dh__api_version(value, unamestack, exc_value):
        '''
        Validate api_version as a non-empty string
        '''
        if not (isinstance(value, str) and value.strip()):
            raise exc_value(f"{unamestack} {value!r} is not a valid API version")
        return value.strip()

    @staticmethod
    def _breaking_validate(entries, filename, exc_value):
        '''
        Return a tuple of OutputBreakingChange for the breaking_changes entries
        '''
        ret = list()
        for idx, entry in enumerate(entries):
            try:
                ret.append(OutputBreakingChange.from_dict(entry))
            except InvalidArgument as exc:
                raise exc_value(f"breaking_changes[{idx}] in {filename}: {exc}") from exc
        return tuple(ret)

    _MISSING = object()

    def _lookup(self, name):
        '''
        Return the value for name from test_values or the file,
        or _MISSING. Private and empty names are never set.
        '''
        if not (isinstance(name, str) and name and (not name.startswith('_'))):
            return self._MISSING
        with self._vlock:
            if name in self.test_values:
                return self.test_values[name]
            self._load_iff_necessary()
            return self._vdata.get(name, self._MISSING)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        ret = self._lookup(name)
        if ret is self._MISSING:
            raise AttributeError(f"{name!r} is not set; check configuration file {self._vfilename}")
        return ret

    def to_dict(self) -> dict:
        '''
        Return the effective defaults, test_values included
        '''
        with self._vlock:
            self._load_iff_necessary()
            ret = dict(self._vdata)
            ret.update(self.test_values)
            return ret

    def get(self, name, defaultvalue):
        '''
        Return the configured value for name, or defaultvalue if it is not set
        '''
        ret = self._lookup(name)
        return defaultvalue if ret is self._MISSING else ret

    def tget(self, key, dtype, exc_value=EXC_VALUE_DEFAULT):
        '''
        Return the configured value for key, or dtype() if it is not set.
        A value that is not an instance of dtype raises exc_value.
        '''
        ret = self._lookup(key)
        if ret is self._MISSING:
            return dtype()
        if not isinstance(ret, dtype):
            raise exc_value(f"{self._vfilename!r}[{key!r}] has type {type(ret).__name__}, expected {dtype.__name__}")
        return ret

    def breaking_changes(self, target=None):
        '''
        Return configured breaking changes, optionally only those for target
        '''
        with self._vlock:
            self._load_iff_necessary()
            if target is None:
                return list(self._vbreaking)
            return [x for x in self._vbreaking if x.target == target]

cfg = _Cfg()
