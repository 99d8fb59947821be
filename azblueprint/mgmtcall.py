#
# azblueprint/mgmtcall.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Provide the single point where Azure SDK exceptions become RemoteError.

Retries are not done here. The azure-core pipeline of every management
client carries a RetryPolicy; by the time an exception reaches this
module the pipeline has given up on it.
'''
import http.client
import logging

import azure.core.exceptions

from azblueprint.base_defaults import LOGGER_NAME_DEFAULT
from azblueprint.exceptions import RemoteError
from azblueprint.util import getframe

AZURE_SDK_EXCEPTIONS = (azure.core.exceptions.AzureError,
                       )

class Caught():
    '''
    Summary of an azure-core exception: HTTP status, ARM error code,
    and the message to report.
    '''
    def __init__(self, exc):
        self.exc = exc
        self.status_code = getattr(self.exc, 'status_code', None)
        try:
            self.status_code_int = int(self.status_code)
        except (TypeError, ValueError):
            self.status_code_int = -1
        self.error_code = None
        self.error_target = None
        self.message = getattr(self.exc, 'message', None) or str(self.exc)

        err = getattr(exc, 'error', None)
        if getattr(exc, 'error_code', None):
            self.error_code = str(exc.error_code)
        elif err is not None and getattr(err, 'code', None):
            self.error_code = str(err.code)

        if err is not None:
            self.error_target = getattr(err, 'target', None)
            if getattr(err, 'message', None):
                self.message = str(err.message)

    def __repr__(self):
        return "%s(%s, status_code=%r, error_code=%r)" % (type(self).__name__, type(self.exc).__name__, self.status_code, self.error_code)

    def is_conflict(self):
        '''
        409, or the SDK mapped the response to ResourceExistsError
        '''
        return (self.status_code_int == http.client.CONFLICT) \
          or isinstance(self.exc, azure.core.exceptions.ResourceExistsError)

    def is_missing(self):
        '''
        404, or the SDK mapped the response to ResourceNotFoundError
        '''
        if self.status_code_int == http.client.NOT_FOUND:
            return True
        if isinstance(self.exc, azure.core.exceptions.ResourceNotFoundError):
            return True
        return False

    def any_code_matches(self, *codes):
        '''
        Return whether the ARM error code is one of codes (case-insensitive)
        '''
        if not self.error_code:
            return False
        return self.error_code.lower() in {code.lower() for code in codes}

    def is_server_rejected_auth(self):
        '''
        The credential or its permissions were refused
        '''
        return isinstance(self.exc, azure.core.exceptions.ClientAuthenticationError) \
          or self.any_code_matches('AuthenticationFailed', 'ExpiredAuthenticationToken', 'AuthorizationFailed')

    def is_throttle(self):
        '''
        429 Too Many Requests
        '''
        return self.status_code_int == http.client.TOO_MANY_REQUESTS

    def reason(self):
        '''
        Return the name of the first matching is_* check, or None.
        Used only to label the warning logged by mgmtcall().
        '''
        for checker in ('is_server_rejected_auth',
                        'is_missing',
                        'is_throttle',
                        'is_conflict',
                       ):
            proc = getattr(self, checker)
            if proc():
                return checker
        return None

    def remote_error(self, operation=''):
        '''
        Return RemoteError describing this exception.
        The caller raises it from the original exception.
        '''
        return RemoteError(self.message,
                           status_code=self.status_code,
                           error_code=self.error_code,
                           operation=operation)

def mgmtcall(logger, op, *args, mgmtcall_operation='', **kwargs):
    '''
    Return op(*args, **kwargs).
    Azure SDK failures are raised as RemoteError chained from the SDK exception.
    Anything else propagates untouched.
    '''
    logger = logger or logging.getLogger(LOGGER_NAME_DEFAULT)
    try:
        return op(*args, **kwargs)
    except AZURE_SDK_EXCEPTIONS as exc:
        caught = Caught(exc)
        operation = mgmtcall_operation or getattr(op, '__qualname__', '') or repr(op)
        reason_str = caught.reason() or 'other'
        logger.warning("%s op=%s status=%s code=%s [%s] %r", getframe(0), operation, caught.status_code, caught.error_code, reason_str, exc)
        raise caught.remote_error(operation=operation) from exc
