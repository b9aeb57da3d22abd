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
import sys

from egit_pipeline.context import ABORTED, FAILURE
from egit_pipeline.errors import PipelineException
import egit_pipeline.cli.subcommand.base as base


logger = logging.getLogger(__name__)


class BuildSubCommand(base.BaseSubCommand):

    def parse_arg_path(self, parser):
        parser.add_argument(
            'path',
            nargs='?',
            default=sys.stdin,
            help="colon-separated list of paths to YAML files "
            "or directories")

    def parse_arg_names(self, parser):
        parser.add_argument(
            'names',
            help='name(s) of pipeline(s)', nargs='*')

    def parse_args(self, subparser):
        build = subparser.add_parser('build', help="Run pipelines")

        self.parse_option_recursive_exclude(build)

        self.parse_arg_path(build)
        self.parse_arg_names(build)

    def execute(self, options, pipeline_config):
        pipelines = self.load_pipelines(pipeline_config, options.path,
                                        options.names)
        if not pipelines:
            logger.warning("No pipeline matches %s",
                           ', '.join(options.names) or 'the definitions')
            return {}

        results = {}
        for pipeline in pipelines:
            results[pipeline['name']] = self.run_pipeline(pipeline_config,
                                                          pipeline)

        failed = sorted(name for name, result in results.items()
                        if result in (FAILURE, ABORTED))
        if failed:
            logger.error("Failed pipelines: %s", ', '.join(failed))
            sys.exit(1)
        return results

    def run_pipeline(self, pipeline_config, pipeline):
        name = pipeline['name']
        context, lib, tools = self.create_context(pipeline_config, name=name)
        recipe = self.create_recipe(pipeline_config, pipeline, lib, tools)
        logger.info("Running pipeline %s (%s), build #%s", name,
                    pipeline['recipe'], context.build_number)
        try:
            result = recipe.build(context, pipeline)
        except PipelineException as e:
            logger.error("Pipeline %s: %s", name, e)
            result = context.result or FAILURE
        logger.info("Finished %s: %s", name, result)
        return result
