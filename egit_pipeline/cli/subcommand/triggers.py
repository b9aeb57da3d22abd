#!/usr/bin/env python
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

import egit_pipeline.cli.subcommand.build as build
from egit_pipeline import local_yaml


logger = logging.getLogger(__name__)


class TriggersSubCommand(build.BuildSubCommand):
    """Print the Gerrit trigger projects of pipelines, as used by the
    ``projects`` option of a Jenkins Job Builder gerrit trigger.
    """

    def parse_args(self, subparser):
        triggers = subparser.add_parser(
            'triggers', help="Show Gerrit trigger projects of pipelines")

        self.parse_option_recursive_exclude(triggers)

        self.parse_arg_path(triggers)
        self.parse_arg_names(triggers)

    def execute(self, options, pipeline_config):
        pipelines = self.load_pipelines(pipeline_config, options.path,
                                        options.names)
        context, lib, tools = self.create_context(pipeline_config)
        params = self.build_params(pipeline_config)

        triggers = {}
        for pipeline in pipelines:
            recipe = self.create_recipe(pipeline_config, pipeline, lib, tools)
            config = recipe.configure(pipeline, params)
            if 'repo-path' not in config:
                logger.warning("Pipeline %s has no repo-path, skipping",
                               pipeline['name'])
                continue
            triggers[pipeline['name']] = tools.projects_to_build(
                config.get('trigger-match', 'PLAIN'),
                config['repo-path'],
                config.get('trigger-branches',
                           config.get('default-branch')))
        local_yaml.dump(triggers, sys.stdout)
        return triggers
