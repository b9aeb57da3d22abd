#!/usr/bin/env python
# Copyright (C) 2015 OpenStack, LLC.
# Copyright (C) 2020 EGit Committers and others.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

# Interpolation of build parameters into pipeline definitions.

import logging
import re
from string import Formatter

from egit_pipeline.errors import PipelineConfigException
from egit_pipeline.errors import PipelineException

logger = logging.getLogger(__name__)

# {KEY} or {KEY|default}, ignoring {{escaped}} braces
PLACEHOLDER = re.compile(r"""
    (?<!{){({{)*                # non-pair opening {
    (?P<key>\w+)                # build parameter name
    (?:\|(?P<default>[^}]*))?   # default when the parameter is unset
    }(}})*(?!})                 # non-pair closing }
""", re.VERBOSE)

TRUE_VALUES = ('true', 'yes', 'on', '1')
FALSE_VALUES = ('false', 'no', 'off', '0', '')


class ParameterFormatter(Formatter):
    """Formats pipeline definition values with the build parameters.

    A value consisting of a single placeholder is replaced by the parameter
    itself, keeping its type. ``{KEY|default}`` yields ``default`` when the
    build has no parameter ``KEY``.
    """

    def __init__(self, params, allow_empty=False):
        super(ParameterFormatter, self).__init__()
        self.params = params
        self.allow_empty = allow_empty

    def expand(self, template):
        whole = re.match('^%s$' % PLACEHOLDER.pattern, template, re.VERBOSE)
        if whole is not None and whole.group('key') in self.params:
            return self.params[whole.group('key')]

        def with_default(match):
            key = match.group('key')
            default = match.group('default')
            if default is None:
                return match.group(0)
            if key not in self.params:
                return default.replace('{', '{{').replace('}', '}}')
            return '{%s}' % key

        try:
            return self.vformat(PLACEHOLDER.sub(with_default, template),
                                (), self.params)
        except KeyError as exc:
            raise PipelineException(
                "%s parameter missing to format %r\nKnown parameters: %s" % (
                    exc.args[0], template, ', '.join(sorted(self.params))))
        except (IndexError, ValueError) as exc:
            raise PipelineException(
                "Cannot format %r: %s" % (template, exc))

    def get_value(self, key, args, kwargs):
        try:
            return Formatter.get_value(self, key, args, kwargs)
        except KeyError:
            if self.allow_empty:
                logger.debug("Build parameter %s unset, using ''", key)
                return ''
            raise

    def expand_all(self, obj):
        if isinstance(obj, str):
            return self.expand(obj)
        if isinstance(obj, list):
            return [self.expand_all(item) for item in obj]
        if isinstance(obj, dict):
            return dict((self.expand(key) if isinstance(key, str) else key,
                         self.expand_all(value))
                        for key, value in obj.items())
        return obj


def deep_format(obj, paramdict, allow_empty=False):
    """Apply the build parameters to all strings found within obj, which
    may be a string or nested lists and dicts.
    """
    return ParameterFormatter(paramdict, allow_empty).expand_all(obj)


def to_int(value, name):
    if isinstance(value, bool):
        raise PipelineConfigException(
            "'{0}' must be an integer, got {1!r}".format(name, value))
    try:
        return int(value)
    except (TypeError, ValueError):
        raise PipelineConfigException(
            "'{0}' must be an integer, got {1!r}".format(name, value))


def to_bool(value, name):
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        if value.strip().lower() in TRUE_VALUES:
            return True
        if value.strip().lower() in FALSE_VALUES:
            return False
    raise PipelineConfigException(
        "'{0}' must be a boolean, got {1!r}".format(name, value))


CONVERTERS = {
    int: to_int,
    bool: to_bool,
}


def convert_types(config, types):
    """Convert the values of config named in types, in place.

    Values produced from build parameters are strings; types maps a key to
    ``int`` or ``bool``. Unset keys and ``None`` are left alone.
    """
    for key, kind in types.items():
        if config.get(key) is not None:
            config[key] = CONVERTERS[kind](config[key], key)
    return config
