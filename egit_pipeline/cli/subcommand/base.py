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

import abc
import os

from egit_pipeline.context import BuildContext
from egit_pipeline.lib import Lib
from egit_pipeline.parser import PipelineParser
from egit_pipeline.registry import RecipeRegistry
from egit_pipeline.shell import Runner
from egit_pipeline.tools import Tools


class BaseSubCommand(metaclass=abc.ABCMeta):
    """Base class for egit-pipeline subcommands, intended to allow
    subcommands to be loaded as stevedore extensions by third party users.
    """
    def __init__(self):
        pass

    @abc.abstractmethod
    def parse_args(self, subparsers):
        """Define subcommand arguments.

        :param subparsers
          A sub parser object. Implementations of this method should
          create a new subcommand parser by calling
            parser = subparsers.add_parser('command-name', ...)
          This will return a new ArgumentParser object; all other arguments to
          this method will be passed to the argparse.ArgumentParser constructor
          for the returned object.
        """

    @abc.abstractmethod
    def execute(self, options, pipeline_config):
        """Execute subcommand behavior.

        :param options
          Parsed command line options.
        :param pipeline_config
          PipelineConfig object containing final configuration from config
          files, command line arguments, and environment variables.
        """

    @staticmethod
    def parse_option_recursive_exclude(parser):
        """Add '--recursive'  and '--exclude' arguments to given parser.
        """
        parser.add_argument(
            '-r', '--recursive',
            action='store_true',
            dest='recursive',
            default=False,
            help="look for yaml files recursively")

        parser.add_argument(
            '-x', '--exclude',
            dest='exclude',
            action='append',
            default=[],
            help="paths to exclude when using recursive search, "
            "uses standard globbing.")

    @staticmethod
    def build_params(pipeline_config):
        """The environment of the build: this process' environment plus the
        build parameters given on the command line.
        """
        params = dict(os.environ)
        params.update(pipeline_config.params)
        return params

    def load_pipelines(self, pipeline_config, paths, names=None):
        parser = PipelineParser(pipeline_config)
        parser.load_files(paths)
        return parser.expandYaml(names,
                                 params=self.build_params(pipeline_config))

    def create_context(self, pipeline_config, name=None, dry_run=False,
                       output=None):
        runner = Runner(env=self.build_params(pipeline_config),
                        cwd=pipeline_config.pipeline['workspace'],
                        dry_run=dry_run, output=output)
        context = BuildContext(pipeline_config, runner, name=name)
        return context, Lib(context), Tools(context)

    def create_recipe(self, pipeline_config, pipeline, lib, tools):
        registry = RecipeRegistry(pipeline_config)
        return registry.create(pipeline['recipe'], lib, tools)
