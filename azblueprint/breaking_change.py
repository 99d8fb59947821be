#
# azblueprint/breaking_change.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Breaking-change notices for command output types.

A notice is plain data (usually loaded from configuration) plus a
formatter. Message text lives in MESSAGES; an instance may override
any entry by passing messages={...}.
'''
import datetime

import dateutil.parser

from azblueprint.btypes import ReadOnlyDict
from azblueprint.exceptions import InvalidArgument
from azblueprint.semantic_version import SemanticVersion

MESSAGES = ReadOnlyDict({
    'header' : "Breaking changes in '{target}' :",
    'item' : "\n- {message}",
    'change_description' : "\n    Change description : {description}",
    'in_effect_by_version' : "\n    The change is expected to take effect from the version : '{version}'",
    'in_effect_by_date' : "\n    The change is expected to take effect from : '{date}'",
    'output_type_deprecated' : "The output type '{deprecated}' is being deprecated without a replacement.",
    'output_type_change_replacement' : "The output type is changing from the existing type :'{deprecated}' to the new type :'{replacement}'",
    'output_type_change' : "The output type '{deprecated}' is changing",
    'output_properties_removed' : "\n    The following properties in the output type are being deprecated : ",
    'output_properties_added' : "\n    The following properties are being added to the output type : ",
})

def type_full_name(value):
    '''
    Return the dotted name of a class, or str(value) for anything else
    '''
    if isinstance(value, type):
        return "%s.%s" % (value.__module__, value.__qualname__)
    return str(value)

def date_normalize(value):
    '''
    Return value as datetime.date. Accepts date, datetime, or text that dateutil can parse.
    '''
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return dateutil.parser.parse(value).date()
        except (OverflowError, ValueError) as exc:
            raise InvalidArgument("invalid change_in_effect_by_date %r: %s" % (value, exc)) from exc
    raise InvalidArgument("invalid change_in_effect_by_date type %s" % type(value).__name__)

class BreakingChange():
    '''
    Base breaking-change notice.
    Subclasses provide attribute_message().
    '''
    def __init__(self, target='', deprecate_by_version=None, change_in_effect_by_date=None, change_description=None, messages=None):
        self.target = target
        self.deprecate_by_version = SemanticVersion.from_text(deprecate_by_version, exc_value=InvalidArgument) if deprecate_by_version else None
        self.change_in_effect_by_date = date_normalize(change_in_effect_by_date)
        self.change_description = change_description
        self.messages = dict(MESSAGES)
        self.messages.update(messages or dict())

    def __repr__(self):
        return "%s(target=%r, deprecate_by_version=%r, change_in_effect_by_date=%r)" % (type(self).__name__, self.target, self.deprecate_by_version, self.change_in_effect_by_date)

    def attribute_message(self):
        '''
        Return the part of the message specific to this kind of change
        '''
        raise NotImplementedError("%s did not implement this method" % type(self).__name__)

    def in_effect(self, when=None):
        '''
        Return whether the change has taken effect on date when (default today).
        A change without a date is always in effect.
        '''
        if self.change_in_effect_by_date is None:
            return True
        when = date_normalize(when) if when is not None else datetime.date.today()
        return when >= self.change_in_effect_by_date

    def message(self, target=None):
        '''
        Return the complete notice text
        '''
        target = target if target is not None else self.target
        ret = self.messages['header'].format(target=target)
        ret += self.messages['item'].format(message=self.attribute_message())
        if self.change_description and self.change_description.strip():
            ret += self.messages['change_description'].format(description=self.change_description)
        if self.deprecate_by_version is not None:
            ret += self.messages['in_effect_by_version'].format(version=self.deprecate_by_version)
        if self.change_in_effect_by_date is not None:
            ret += self.messages['in_effect_by_date'].format(date=self.change_in_effect_by_date.isoformat())
        return ret

class OutputBreakingChange(BreakingChange):
    '''
    Notice that the output type of a command is changing or going away.
    deprecated_output_type is a class or its dotted name.
    '''
    def __init__(self, deprecated_output_type, replacement_output_type=None, deprecated_output_properties=None, new_output_properties=None, **kwargs):
        super().__init__(**kwargs)
        if not deprecated_output_type:
            raise InvalidArgument("deprecated_output_type is required")
        self.deprecated_output_type = deprecated_output_type
        self.replacement_output_type = replacement_output_type
        self.deprecated_output_properties = list(deprecated_output_properties or list())
        self.new_output_properties = list(new_output_properties or list())

    @classmethod
    def from_dict(cls, d):
        '''
        Construct from a configuration mapping. Keys match the constructor arguments.
        '''
        if not isinstance(d, dict):
            raise InvalidArgument("breaking change entry must be a mapping, not %s" % type(d).__name__)
        kwargs = dict(d)
        try:
            deprecated_output_type = kwargs.pop('deprecated_output_type')
        except KeyError as exc:
            raise InvalidArgument("breaking change entry is missing deprecated_output_type") from exc
        try:
            return cls(deprecated_output_type, **kwargs)
        except TypeError as exc:
            raise InvalidArgument("invalid breaking change entry: %s" % exc) from exc

    def is_pure_deprecation(self):
        '''
        Return whether the type is going away with nothing to replace it
        '''
        return not any((self.replacement_output_type and str(self.replacement_output_type).strip(),
                        self.new_output_properties,
                        self.deprecated_output_properties,
                        self.change_description and self.change_description.strip(),
                       ))

    @staticmethod
    def _property_list(props):
        return ''.join("'%s' " % prop for prop in props)

    def attribute_message(self):
        deprecated = type_full_name(self.deprecated_output_type)
        if self.is_pure_deprecation():
            return self.messages['output_type_deprecated'].format(deprecated=deprecated)
        if self.replacement_output_type and str(self.replacement_output_type).strip():
            ret = self.messages['output_type_change_replacement'].format(deprecated=deprecated, replacement=type_full_name(self.replacement_output_type))
        else:
            ret = self.messages['output_type_change'].format(deprecated=deprecated)
        if self.deprecated_output_properties:
            ret += self.messages['output_properties_removed'] + "\t" + self._property_list(self.deprecated_output_properties)
        if self.new_output_properties:
            ret += self.messages['output_properties_added'] + "\t" + self._property_list(self.new_output_properties)
        return ret
