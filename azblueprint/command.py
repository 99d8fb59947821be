#
# azblueprint/command.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Registry of command-line actions, filled in by decorators.

    command = Command()

    class Tool(Application):
        @command.printable
        def blueprint_list(self):
            return [...]

    Tool.command = command

Any attribute of a Command that is not one of its own operations is a
decorator; the attribute name is recorded as the decorator of the
function. Handlers whose decorator starts with 'printable' have a
non-None return value printed.
'''
import functools

import tabulate

from azblueprint.util import item_pformat

TABLE_FORMAT = 'simple'

class Command():
    '''
    Map action name to decorated handler
    '''
    def __init__(self):
        self._items = dict() # action name -> _Item

    RESERVED_NAMES = ('actions',
                      'can_handle',
                      'commands',
                      'format',
                      'handle',
                      'print',
                     )

    @property
    def actions(self):
        '''
        Sorted list of registered action names
        '''
        return sorted(self._items)

    @classmethod
    def _name_valid(cls, name):
        '''
        Return whether name may be used as a decorator or an action.
        Leading underscores and the names in RESERVED_NAMES are rejected
        so a decoration cannot shadow this class.
        '''
        return isinstance(name, str) and bool(name) and (not name.startswith('_')) and (name not in cls.RESERVED_NAMES)

    def __getattr__(self, name):
        if not self._name_valid(name):
            raise AttributeError("'%s' object has no attribute '%s'" % (type(self).__name__, name))
        return functools.partial(self._decorate, name)

    def _decorate(self, decorator, func):
        item = _Item(decorator, func)
        if not self._name_valid(item.name):
            raise ValueError("may not decorate using reserved name %r" % item.name)
        if item.name in self._items:
            raise ValueError("duplicate command %r" % item.name)
        self._items[item.name] = item
        return func

    def _lookup(self, name, decorators, args):
        '''
        Return the _Item that handles name for one of decorators
        (a string or an iterable of strings), or None.
        When args are given, args[0] must be an instance of exactly
        the class that defines the handler.
        '''
        item = self._items.get(name, None)
        if item is None:
            return None
        if isinstance(decorators, str):
            decorators = (decorators,)
        if item.decorator not in decorators:
            return None
        if args:
            kls = item.getclass()
            if (kls is not None) and (type(args[0]) is not kls): # pylint: disable=unidiomatic-typecheck
                return None
        return item

    @staticmethod
    def format(item):
        '''
        Return item as text. A non-empty list of dicts becomes a table
        with one column per key; other lists are one entry per line.
        '''
        if isinstance(item, str):
            return item
        if isinstance(item, (list, tuple)):
            if item and all(isinstance(x, dict) for x in item):
                return tabulate.tabulate(item, headers='keys', tablefmt=TABLE_FORMAT)
            return '\n'.join(x if isinstance(x, str) else item_pformat(x, prefix='') for x in item)
        return item_pformat(item, prefix='')

    @classmethod
    def print(cls, item):
        '''
        print() the given item
        '''
        print(cls.format(item))

    def handle(self, name, decorators, *args, **kwargs):
        '''
        Run the handler for name with args and kwargs.
        Return whether a handler was found.
        '''
        item = self._lookup(name, decorators, args)
        if item is None:
            return False
        ret = item.func(*args, **kwargs)
        if item.printable and (ret is not None):
            self.print(ret)
        return True

    def can_handle(self, name, decorators, *args):
        '''
        Return whether handle() would find a handler
        '''
        return self._lookup(name, decorators, args) is not None

    def commands(self, decorators=None):
        '''
        Return {name : func} for every handler, or only for those
        whose decorator is decorators (a string) or in decorators.
        '''
        if isinstance(decorators, str):
            decorators = (decorators,)
        return {name : item.func for name, item in self._items.items() if (decorators is None) or (item.decorator in decorators)}

class _Item():
    '''
    One decorated handler
    '''
    def __init__(self, decorator, func):
        self.decorator = decorator
        self.func = func
        self.name = func.__name__
        self.printable = decorator.startswith('printable')

    def __repr__(self):
        return "%s(%r, %r)" % (type(self).__name__, self.decorator, self.func)

    def getclass(self):
        '''
        Return the class that defines the handler, or None for a
        module-level function. The class must be reachable from the
        module globals of the function.
        '''
        qns = self.func.__qualname__.split('.')
        if len(qns) <= 1:
            return None
        kls = self.func.__globals__.get(qns[0], None)
        for qn in qns[1:-1]:
            kls = getattr(kls, qn, None)
        if not isinstance(kls, type):
            raise RuntimeError("cannot find the class of handler %s in its module" % self.func.__qualname__)
        return kls
