#
# azblueprint/semantic_version.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Semantic versioning for module and extension handler versions
'''
import functools
import re

from azblueprint.base_defaults import EXC_VALUE_DEFAULT

@functools.total_ordering
class SemanticVersion():
    '''
    Wrap a version string.
    form: MAJOR, MAJOR.MINOR or MAJOR.MINOR.PATCH (all int)
    A missing component sorts before any present one, so 1.1 < 1.1.0.
    '''
    def __init__(self, major=None, minor=None, patch=None):
        if major is None:
            raise ValueError("must specify valid major version")
        if (minor is None) and (patch is not None):
            raise ValueError("cannot have patch without minor")
        self.major = int(major)
        self.minor = None if minor is None else int(minor)
        self.patch = None if patch is None else int(patch)

    def _parts(self):
        return tuple(x for x in (self.major, self.minor, self.patch) if x is not None)

    def __hash__(self):
        return hash(self._parts())

    def __repr__(self):
        ret = "%s(major=%r" % (type(self).__name__, self.major)
        if self.minor is not None:
            ret += ", minor=%r" % self.minor
        if self.patch is not None:
            ret += ", patch=%r" % self.patch
        return ret + ")"

    def __str__(self):
        return '.'.join(str(x) for x in self._parts())

    def __len__(self):
        return len(self._parts())

    def __lt__(self, other):
        if not isinstance(other, SemanticVersion):
            raise TypeError("'<' not supported between instances of '%s' and '%s'" % (type(self).__name__, type(other).__name__))
        return self._parts() < other._parts()

    def __eq__(self, other):
        if not isinstance(other, SemanticVersion):
            return False
        return self._parts() == other._parts()

    RE_TXT = r'(?P<major>[0-9]+)(\.(?P<minor>[0-9]+)(\.(?P<patch>[0-9]+))?)?'
    RE_TXT_ABS = '^' + RE_TXT + '$'
    RE_RE = re.compile(RE_TXT)
    RE_RE_ABS = re.compile(RE_TXT_ABS)

    @classmethod
    def from_text(cls, txt, exc_value=EXC_VALUE_DEFAULT):
        '''
        Generate from a string
        '''
        if isinstance(txt, cls):
            return txt
        if not isinstance(txt, str):
            raise exc_value("%s %r is not str" % (type(txt), txt))
        match = cls.RE_RE_ABS.search(txt.strip())
        if not match:
            raise exc_value("%r is not a semantic version" % txt)
        d = match.groupdict()
        return cls(major=d['major'], minor=d['minor'], patch=d['patch'])
