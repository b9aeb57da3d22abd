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

# Manage pipeline definition yaml files

import copy
import fnmatch
import io
import logging
import os

from egit_pipeline.errors import PipelineException
from egit_pipeline.errors import YAMLFormatError
from egit_pipeline.formatter import deep_format
import egit_pipeline.local_yaml as local_yaml

__all__ = [
    "PipelineParser"
]

logger = logging.getLogger(__name__)


def matches(what, glob_patterns):
    """
    Checks if the given string, ``what``, matches any of the glob patterns in
    the iterable, ``glob_patterns``

    :arg str what: String that we want to test if it matches a pattern
    :arg iterable glob_patterns: glob patterns to match (list, tuple, set,
    etc.)
    """
    return any(fnmatch.fnmatch(what, glob_pattern)
               for glob_pattern in glob_patterns)


class PipelineParser(object):
    def __init__(self, pipeline_config=None):
        self.data = {}
        self.pipelines = []

        self.pipeline_config = pipeline_config
        self.path = pipeline_config.yamlparser['include_path']

    def load_files(self, fn):
        files_to_process = []
        for path in fn:
            if not hasattr(path, 'read') and os.path.isdir(path):
                files_to_process.extend([os.path.join(path, f)
                                         for f in sorted(os.listdir(path))
                                         if (f.endswith('.yml') or
                                             f.endswith('.yaml'))])
            else:
                files_to_process.append(path)

        # symlinks can make the same file show up twice
        unique_files = []
        for f in files_to_process:
            if hasattr(f, 'read'):
                unique_files.append(f)
                continue
            rpf = os.path.realpath(f)
            if rpf not in unique_files:
                unique_files.append(rpf)
            else:
                logger.warning("File '%s' already added as '%s', ignoring "
                               "reference to avoid duplicating yaml "
                               "definitions." % (f, rpf))

        for in_file in unique_files:
            fname = getattr(in_file, 'name', in_file)
            logger.debug("Parsing YAML file {0}".format(fname))
            if hasattr(in_file, 'read'):
                self._parse_fp(in_file)
            else:
                self.parse(in_file)

    def _parse_fp(self, fp):
        data = local_yaml.load(fp, search_path=self.path)
        fname = getattr(fp, 'name', fp)
        if data:
            if not isinstance(data, list):
                raise YAMLFormatError(
                    "The topmost collection in file '{fname}' must be a list,"
                    " not a {cls}".format(fname=fname, cls=type(data)))
            for item in data:
                if not isinstance(item, dict):
                    raise YAMLFormatError(
                        "Unexpected entry '{0}' in file '{1}'".format(
                            item, fname))
                cls, dfn = next(iter(item.items()))
                group = self.data.get(cls, {})
                if len(item.items()) > 1:
                    n = item.get('name')
                    # Syntax error
                    raise YAMLFormatError("Syntax error, for item "
                                          "named '{0}'. Missing indent?"
                                          .format(n))
                if cls not in ('defaults', 'pipeline'):
                    raise YAMLFormatError(
                        "Unknown definition type '{0}' in file '{1}', "
                        "expected 'defaults' or 'pipeline'".format(cls, fname))
                if not isinstance(dfn, dict) or 'name' not in dfn:
                    raise YAMLFormatError(
                        "Every {0} in file '{1}' needs a name".format(
                            cls, fname))
                _id = dfn['name']
                if _id in group:
                    self._handle_dups(
                        "Duplicate entry found in '{0}': '{1}' already "
                        "defined".format(fname, _id))
                group[_id] = dfn
                self.data[cls] = group

    def parse(self, fn):
        with io.open(fn, 'r', encoding='utf-8') as fp:
            self._parse_fp(fp)

    def _handle_dups(self, message):

        if not self.pipeline_config.yamlparser['allow_duplicates']:
            logger.error(message)
            raise PipelineException(message)
        else:
            logger.warning(message)

    def _applyDefaults(self, data):
        whichdefaults = data.get('defaults', 'global')
        defaults = copy.deepcopy(self.data.get('defaults',
                                 {}).get(whichdefaults, {}))
        if defaults == {} and whichdefaults != 'global':
            raise PipelineException("Unknown defaults set: '{0}'"
                                    .format(whichdefaults))

        newdata = {}
        newdata.update(defaults)
        newdata.update(data)
        newdata.pop('defaults', None)
        return newdata

    def expandYaml(self, pipelines_glob=None, params=None):
        """Apply defaults and build parameters to every pipeline definition
        whose name matches one of pipelines_glob (all if empty).
        """
        if params is None:
            params = {}
        allow_empty = self.pipeline_config.yamlparser['allow_empty_variables']

        for pipeline in self.data.get('pipeline', {}).values():
            if pipelines_glob and not matches(pipeline['name'],
                                              pipelines_glob):
                logger.debug("Ignoring pipeline {0}".format(pipeline['name']))
                continue
            logger.debug("Expanding pipeline '{0}'".format(pipeline['name']))
            expanded = self._applyDefaults(pipeline)
            if 'recipe' not in expanded:
                raise YAMLFormatError(
                    "Pipeline '{0}' does not name a recipe".format(
                        pipeline['name']))
            self.pipelines.append(deep_format(expanded, params, allow_empty))

        return self.pipelines
