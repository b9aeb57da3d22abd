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

import io
import logging
import sys

import egit_pipeline.cli.subcommand.build as build


logger = logging.getLogger(__name__)


class TestSubCommand(build.BuildSubCommand):
    """Dry run: write the commands a build would execute instead of running
    them. Read-only queries, like resolving upstream versions, still run.
    """

    def parse_args(self, subparser):
        test = subparser.add_parser('test', help="Show the commands "
                                    "pipelines would run")

        self.parse_option_recursive_exclude(test)

        self.parse_arg_path(test)
        self.parse_arg_names(test)

        test.add_argument(
            '--own-version',
            dest='own_version',
            default=None,
            help='version of the project being built, instead of reading '
            'it from the pom.xml of a checkout')
        test.add_argument(
            '-o',
            dest='output',
            default=sys.stdout,
            help='path to output file')

    def execute(self, options, pipeline_config):
        pipelines = self.load_pipelines(pipeline_config, options.path,
                                        options.names)
        if hasattr(options.output, 'write'):
            self._write_plan(options, pipeline_config, pipelines,
                             options.output)
        else:
            with io.open(options.output, 'w', encoding='utf-8') as output:
                self._write_plan(options, pipeline_config, pipelines, output)
        return pipelines

    def _write_plan(self, options, pipeline_config, pipelines, output):
        for pipeline in pipelines:
            if options.own_version:
                pipeline['own-version'] = options.own_version
            context, lib, tools = self.create_context(
                pipeline_config, name=pipeline['name'], dry_run=True,
                output=output)
            recipe = self.create_recipe(pipeline_config, pipeline, lib, tools)
            output.write(u'# {0}\n'.format(pipeline['name']))
            recipe.build(context, pipeline)
