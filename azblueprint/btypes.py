#
# azblueprint/btypes.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Basic types. No dependencies within the repo but outside this file other than azblueprint.base_defaults.
'''
import enum

from azblueprint.base_defaults import EXC_VALUE_DEFAULT

class EnumMixin():
    '''
    Mixin for enums that extends them with additional operations.
    Use this rather than subclassing the enum classes to avoid
    confusing pylint.
    '''
    @classmethod
    def values(cls, sort=True):
        '''
        Return a list of valid values for this enum.
        Default sort to true for UI elements.
        '''
        ret = [x.value for x in cls]
        if sort:
            ret.sort()
        return ret

    @classmethod
    def coerce(cls, value, exc_value=EXC_VALUE_DEFAULT, prefix=''):
        '''
        Return value coerced to this type.
        Raises exc_value with a human-friendly error on failure.
        '''
        try:
            return cls(value)
        except ValueError as exc:
            if prefix:
                raise exc_value(f"{prefix}: {exc}") from exc
            raise exc_value(str(exc)) from exc

class ReadOnlyDict(dict):
    '''
    dict that does not allow updates
    Set attribute default_value on an instance to give it a default a la DefaultDict
    '''
    ro_error_class = TypeError
    ro_error_str = 'attempt to modify read-only dict'

    def _error_readonly(self, *args, **kwargs):
        '''
        This is used to replace methods of this object
        that would otherwise modify it.
        '''
        raise self.ro_error_class(self.ro_error_str)

    __delitem__ = _error_readonly
    __setitem__ = _error_readonly
    clear = _error_readonly
    pop = _error_readonly
    popitem = _error_readonly
    setdefault = _error_readonly
    update = _error_readonly
    __ior__ = _error_readonly

    def __missing__(self, key):
        try:
            return self.default_value
        except AttributeError as exc:
            raise KeyError(key) from exc

    def __contains__(self, item):
        if super().__contains__(item):
            return True
        return hasattr(self, 'default_value')

class LogTo(EnumMixin, enum.Enum):
    '''
    Logging destinations for Application
    '''
    STDERR = 'stderr'
    STDOUT = 'stdout'

class KeyEncryptionAlgorithm(EnumMixin, enum.Enum):
    '''
    Algorithms accepted for wrapping the volume encryption key
    '''
    RSA_OAEP = 'RSA-OAEP'
    RSA1_5 = 'RSA1_5'

class VolumeType(EnumMixin, enum.Enum):
    '''
    Volumes targeted by a disk encryption operation
    '''
    OS = 'OS'
    DATA = 'Data'
    ALL = 'All'
