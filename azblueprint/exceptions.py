#
# azblueprint/exceptions.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Exception classes shared across azblueprint modules
'''

class ApplicationException(Exception):
    '''
    Base class for application exceptions
    '''

class ApplicationExit(ApplicationException):
    '''
    This is interpreted as SystemExit, but it inherits from ApplicationException
    and not SystemExit. That makes it part of the Exception hierarchy
    and not BaseException.
    '''
    def __init__(self, code):
        self.code = code
        super().__init__(str(self.code))

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.code)

    def __str__(self):
        return str(self.code)

class RemoteError(ApplicationException):
    '''
    The backing service returned a non-success response, or the
    request never got one. status_code is None in the latter case.
    The original SDK exception is chained as __cause__.
    '''
    def __init__(self, message, status_code=None, error_code=None, operation=''):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.operation = operation

    def __repr__(self):
        return "%s(%r, status_code=%r, error_code=%r, operation=%r)" % (type(self).__name__, self.message, self.status_code, self.error_code, self.operation)

    def __str__(self):
        ret = self.message
        if self.status_code is not None:
            ret = "(%s) %s" % (self.status_code, ret)
        if self.error_code:
            ret = "%s [%s]" % (ret, self.error_code)
        if self.operation:
            ret = "%s: %s" % (self.operation, ret)
        return ret

class NotFound(ApplicationException):
    '''
    A fetch returned an empty body where one was expected.
    This is distinct from RemoteError; the service did not fail.
    '''
    def __init__(self, what, scope, name):
        self.what = what
        self.scope = scope
        self.name = name
        super().__init__("%s %r not found in scope %r" % (what, name, scope))

class UnsupportedVariant(ApplicationException):
    '''
    Projection encountered a DTO variant outside the known set.
    type_name is the name of the DTO type; kind is the raw
    discriminator value from the wire, if any.
    '''
    def __init__(self, type_name, kind=None):
        self.type_name = type_name
        self.kind = kind
        if kind:
            txt = "unsupported variant %s (kind=%r)" % (type_name, kind)
        else:
            txt = "unsupported variant %s" % type_name
        super().__init__(txt)

class InvalidArgument(ApplicationException, ValueError):
    '''
    A caller-supplied identifier (URI, scope, name) failed a format
    check. Raised before any network call.
    '''
    # No specialization

class InvalidResult(ApplicationException):
    '''
    The service returned something that cannot be used to continue
    the operation (missing fields, mismatched extension type, ...).
    '''
    # No specialization

class SchemaError(ApplicationException):
    '''
    The datastructure provided does not match the schema definition.
    Raised when validating configuration data.
    '''
    # no specialization here
