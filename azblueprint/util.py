#
# azblueprint/util.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Small helpers shared across azblueprint modules.
'''
import argparse
import datetime
import enum
import inspect
import logging
import pprint
import re
import sys
import uuid

from azblueprint.base_defaults import (EXC_VALUE_DEFAULT,
                                       PF,
                                      )

def re_abs(txt):
    '''
    Return regexp text anchored at both ends
    '''
    return '^' + txt + '$'

# 1 UUID
RE_UUID_TXT = r'([0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})'
RE_UUID_ABS = re.compile(re_abs(RE_UUID_TXT))

class ArgExplicit(argparse.Action):
    '''
    argparse action that also records the destination in
    namespace.args_explicit so callers can tell a flag that was
    given from one left at its default.
    '''
    def __call__(self, parser, namespace, value, option_string=None):
        setattr(namespace, self.dest, value)
        explicit = getattr(namespace, 'args_explicit', None)
        if explicit is None:
            setattr(namespace, 'args_explicit', {self.dest})
        else:
            explicit.add(self.dest)

class ArgumentParser(argparse.ArgumentParser):
    '''
    ArgumentParser that hands out argument groups by title
    '''
    def get_argument_group(self, group_name, *args, **kwargs):
        '''
        Return the group titled group_name, adding it on first use
        '''
        for group in self._action_groups:
            if group.title == group_name:
                return group
        return self.add_argument_group(group_name, *args, **kwargs)

def getframename(idx):
    '''
    Return the function name idx frames above the caller (0 = caller)
    '''
    f = sys._getframe(idx+1) # pylint: disable=protected-access
    return f.f_code.co_name

def getframe(idx):
    '''
    Return "function:line" for idx frames above the caller (0 = caller).
    Used as the leading token of log messages.
    '''
    f = sys._getframe(idx+1) # pylint: disable=protected-access
    return "%s:%s" % (f.f_code.co_name, f.f_lineno)

# Scalars passed through plain_item() unchanged
_PLAIN_SCALARS = (bool, bytes, datetime.date, datetime.datetime, float, int, str)

def plain_item(item, _seen=None):
    '''
    Return item reduced to dicts, lists and scalars for printing.
    Views and DTOs go through their to_dict()/as_dict().
    Other objects are expanded through vars(); anything that cannot
    be expanded (or was already seen higher up) becomes its repr().
    '''
    if (item is None) or isinstance(item, _PLAIN_SCALARS):
        return item
    if isinstance(item, enum.Enum):
        return item.value
    if isinstance(item, logging.Logger) or inspect.isclass(item) or inspect.isroutine(item) or inspect.ismodule(item):
        return repr(item)
    seen = set(_seen or ())
    if id(item) in seen:
        return "SEEN %r" % item
    seen.add(id(item))
    if isinstance(item, dict):
        return {plain_item(k, seen) : plain_item(v, seen) for k, v in item.items()}
    if isinstance(item, (frozenset, list, set, tuple)):
        return [plain_item(x, seen) for x in item]
    for attr in ('to_dict', 'as_dict'):
        proc = getattr(item, attr, None)
        if callable(proc):
            return plain_item(proc(), seen)
    try:
        d = vars(item)
    except TypeError:
        return repr(item)
    ret = {'__type__' : type(item).__name__}
    ret.update({k : plain_item(v, seen) for k, v in d.items() if not k.startswith('_')})
    return ret

def item_pformat(item, prefix=PF):
    '''
    pprint.pformat(plain_item(item)) with prefix on every line
    '''
    txt = item if isinstance(item, str) else pprint.pformat(plain_item(item))
    return '\n'.join(prefix + line for line in txt.splitlines())

_LOG_LEVELS = {'debug' : logging.DEBUG,
               'info' : logging.INFO,
               'warning' : logging.WARNING,
               'error' : logging.ERROR,
               'critical' : logging.CRITICAL,
              }

def log_level_normalize(log_level):
    '''
    Given a log level as an int or a name ('info', 'WARNING', ...),
    return the int form.
    '''
    if isinstance(log_level, bool):
        raise TypeError("invalid log_level type %s" % type(log_level).__name__)
    if isinstance(log_level, int):
        return log_level
    if isinstance(log_level, str):
        try:
            return _LOG_LEVELS[log_level.lower()]
        except KeyError as exc:
            raise ValueError("invalid log_level %r" % log_level) from exc
    raise TypeError("invalid log_level type %s" % type(log_level).__name__)

def uuid_normalize(val, key='uuid', exc_value=EXC_VALUE_DEFAULT) -> str:
    '''
    Return val as a lower-case UUID string. Raise exc_value
    with a message naming key if val is not a UUID.
    '''
    if isinstance(val, uuid.UUID):
        return str(val)
    if not isinstance(val, str):
        raise exc_value("%s has invalid type %s" % (key, type(val).__name__))
    if not RE_UUID_ABS.search(val):
        raise exc_value("%s %r is not a valid UUID" % (key, val))
    return val.lower()
