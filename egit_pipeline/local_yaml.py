#!/usr/bin/env python
# Copyright (C) 2013 Hewlett-Packard.
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

# Provides local yaml parsing classes and extend yaml module

"""Custom application specific yamls tags are supported to provide
enhancements when reading yaml configuration.

These allow inclusion of arbitrary files as a method of having blocks of data
managed separately to the yaml pipeline configurations. A specific usage of
this is sharing a common set of defaults between several definition files.

The tag ``!include:`` will treat the following string as file which should be
parsed as yaml configuration data.

Example:

    .. code-block:: yaml

        - defaults: !include: common-defaults.yaml.inc

The tag ``!include-raw:`` will treat the given string or list of strings as
filenames to be opened as one or more data blob, which should be read into
the calling yaml construct without any further parsing. Any data in a file
included through this tag will be treated as string data.

The tag ``!join:`` joins the members of the given list with the first item as
delimiter, which is handy for long Maven profile lists:

    .. code-block:: yaml

        profiles: !join:
          - ','
          -
            - static-checks
            - other-os

Examples of the search path: the directory of the yaml file being read and the
current working directory are always searched, followed by the
``include-path`` option of the ``[pipeline]`` configuration section.
"""

import functools
import io
import logging
import os

import yaml
from yaml import YAMLObject


logger = logging.getLogger(__name__)


class LocalLoader(yaml.SafeLoader):
    """Subclass for yaml.SafeLoader which handles storing the search_path
    for use by the custom YAML objects to find files.

    Loading::

        # use the load function provided in this module
        import local_yaml
        data = local_yaml.load(io.open(fn, 'r', encoding='utf-8'))

        # Loading with a search path
        from local_yaml import LocalLoader
        import functools
        data = yaml.load(io.open(fn, 'r', encoding='utf-8'),
                         functools.partial(LocalLoader, search_path=['path']))

    """

    def __init__(self, *args, **kwargs):
        # make sure to pop off any local settings before passing to
        # the parent constructor as any unknown args may cause errors.
        self.search_path = list()
        if 'search_path' in kwargs:
            for p in kwargs.pop('search_path'):
                logger.debug("Adding '{0}' to search path for include tags"
                             .format(p))
                self.search_path.append(os.path.normpath(p))

        super(LocalLoader, self).__init__(*args, **kwargs)

        if hasattr(self.stream, 'name'):
            self.search_path.append(os.path.normpath(
                os.path.dirname(self.stream.name)))
        self.search_path.append(os.path.normpath(os.path.curdir))


class BaseYAMLObject(YAMLObject):
    yaml_loader = LocalLoader


class YamlListJoin(BaseYAMLObject):
    yaml_tag = u'!join:'

    @classmethod
    def from_yaml(cls, loader, node):
        if isinstance(node, yaml.SequenceNode):
            delimiter = node.value[0].value
            if not isinstance(node.value[1], yaml.SequenceNode):
                raise yaml.constructor.ConstructorError(
                    None, None, "expected sequence node for join data, but "
                                "found %s" % node.value[1].id, node.start_mark)

            return delimiter.join((v.value for v in node.value[1].value))
        else:
            raise yaml.constructor.ConstructorError(
                None, None, "expected sequence node, but found %s" % node.id,
                node.start_mark)


class YamlInclude(BaseYAMLObject):
    yaml_tag = u'!include:'

    @classmethod
    def _find_file(cls, filename, search_path):
        for dirname in search_path:
            candidate = os.path.expanduser(os.path.join(dirname, filename))
            if os.path.isfile(candidate):
                logger.debug("Including file '{0}' from path '{1}'"
                             .format(filename, dirname))
                return candidate
        return filename

    @classmethod
    def _open_file(cls, loader, node):
        node_str = loader.construct_yaml_str(node)
        filename = cls._find_file(node_str, loader.search_path)
        try:
            with io.open(filename, 'r', encoding='utf-8') as f:
                return f.read()
        except Exception:
            logger.error("Failed to include file using search path: '{0}'"
                         .format(':'.join(loader.search_path)))
            raise

    @classmethod
    def _from_file(cls, loader, node):
        contents = cls._open_file(loader, node)
        data = yaml.load(contents,
                         functools.partial(cls.yaml_loader,
                                           search_path=loader.search_path))
        return data

    @classmethod
    def from_yaml(cls, loader, node):
        if isinstance(node, yaml.ScalarNode):
            return cls._from_file(loader, node)
        elif isinstance(node, yaml.SequenceNode):
            return [cls._from_file(loader, scalar_node)
                    for scalar_node in node.value]
        else:
            raise yaml.constructor.ConstructorError(
                None, None, "expected either a sequence or scalar node, but "
                "found %s" % node.id, node.start_mark)


class YamlIncludeRaw(YamlInclude):
    yaml_tag = u'!include-raw:'

    @classmethod
    def _from_file(cls, loader, node):
        return cls._open_file(loader, node)

    @classmethod
    def from_yaml(cls, loader, node):
        contents = super(YamlIncludeRaw, cls).from_yaml(loader, node)
        if isinstance(contents, list):
            return u"\n".join(contents)
        return contents


def load(stream, **kwargs):
    return yaml.load(stream, functools.partial(LocalLoader, **kwargs))


def dump(data, stream=None, **kwargs):
    return yaml.safe_dump(data, stream, default_flow_style=False, **kwargs)
