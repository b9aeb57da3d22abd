#!/usr/bin/env python
# Copyright (C) 2018 Sorin Sbarnea
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

import egit_pipeline.cli.subcommand.base as base


def list_duplicates(seq):
    seen = set()
    return set(x for x in seq if x in seen or seen.add(x))


class ListSubCommand(base.BaseSubCommand):

    def parse_args(self, subparser):
        list = subparser.add_parser('list', help="List pipelines")

        self.parse_option_recursive_exclude(list)

        list.add_argument('names',
                          help='name(s) of pipeline(s)',
                          nargs='*',
                          default=None)
        list.add_argument('-p', '--path', default='.',
                          help='path to YAML file or directory')

    def execute(self, options, pipeline_config):
        pipelines = self.get_pipelines(pipeline_config, options.names,
                                       options.path)

        logging.info("Matching pipelines: %d", len(pipelines))

        for pipeline in pipelines:
            sys.stdout.write(pipeline + '\n')
        return pipelines

    def get_pipelines(self, pipeline_config, pipelines_glob=None, fn=None):
        pipelines = sorted(p['name'] for p in self.load_pipelines(
            pipeline_config, fn, pipelines_glob))
        for duplicate in list_duplicates(pipelines):
            logging.warning("Found duplicate pipeline name '%s', likely bug.",
                            duplicate)

        logging.debug("ListSubCommand.get_pipelines: returning %r",
                      pipelines)

        return pipelines
