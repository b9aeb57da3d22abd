#!/usr/bin/env python
# Copyright (C) 2015 Wayne Warren
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

import logging
import os
import platform
import sys

from stevedore import extension

from egit_pipeline.cli.parser import create_parser
from egit_pipeline.cli.parser import SUBCOMMAND_NAMESPACE
from egit_pipeline.config import PipelineConfig
from egit_pipeline import utils

logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
                    datefmt='%H:%M:%S')
logger = logging.getLogger()


class EgitPipeline(object):
    """ This is the entry point class for the `egit-pipeline` command line
    tool. Besides the command line, python scripts may pass `egit-pipeline`
    arguments directly to this class instead of executing the tool in a
    subprocess; tests use it the same way.
    """

    def __init__(self, args=None, **kwargs):
        if args is None:
            args = []
        self.parser = create_parser()
        self.options = self.parser.parse_args(args)

        self.pipeline_config = PipelineConfig(self.options.conf, **kwargs)

        if not self.options.command:
            self.parser.error("Must specify a 'command' to be performed")

        if (self.options.log_level is not None):
            self.options.log_level = getattr(logging,
                                             self.options.log_level.upper(),
                                             logger.getEffectiveLevel())
            logger.setLevel(self.options.log_level)

        self._parse_additional()
        self.pipeline_config.validate()

    def _set_config(self, target, option, key=None):
        """
        Sets the option in target only if the given option was explicitly set
        """
        opt_val = getattr(self.options, option, None)
        if opt_val is not None:
            target[key or option] = opt_val

    def _parse_additional(self):

        self._set_config(self.pipeline_config.yamlparser,
                         'allow_empty_variables')
        self._set_config(self.pipeline_config.pipeline, 'build_number')
        if self.options.workspace is not None:
            self.pipeline_config.pipeline['workspace'] = os.path.abspath(
                self.options.workspace)

        params = {}
        for param in self.options.params:
            key, sep, value = param.partition('=')
            if not sep or not key:
                self.parser.error(
                    "Parameters must look like KEY=VALUE, not '{0}'".format(
                        param))
            params[key] = value
        self.pipeline_config.params = params

        if getattr(self.options, 'path', None):
            if hasattr(self.options.path, 'read'):
                logger.debug("Input file is stdin")
                if self.options.path.isatty():
                    if platform.system() == 'Windows':
                        key = 'CTRL+Z'
                    else:
                        key = 'CTRL+D'
                    logger.warning("Reading pipelines from STDIN. "
                                   "Press %s to end input.", key)
                self.options.path = [self.options.path]
            else:
                # take list of paths
                self.options.path = self.options.path.split(os.pathsep)

                excludes = [e for elist in getattr(self.options, 'exclude',
                                                   [])
                            for e in elist.split(os.pathsep)]
                paths = []
                for path in self.options.path:
                    if (getattr(self.options, 'recursive', False) and
                            os.path.isdir(path)):
                        paths.extend(utils.recurse_path(path, excludes))
                    else:
                        paths.append(path)
                self.options.path = paths

    def execute(self):

        extension_manager = extension.ExtensionManager(
            namespace=SUBCOMMAND_NAMESPACE,
            invoke_on_load=True,)

        ext = extension_manager[self.options.command]
        return ext.obj.execute(self.options, self.pipeline_config)


def main():
    argv = sys.argv[1:]
    pipeline = EgitPipeline(argv)
    pipeline.execute()


if __name__ == "__main__":
    main()
