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

import egit_pipeline.cli.subcommand.base as base


logger = logging.getLogger(__name__)


class PublishSubCommand(base.BaseSubCommand):
    """Replace a directory on the publish host with the content of a local
    directory.
    """

    def parse_args(self, subparser):
        publish = subparser.add_parser(
            'publish', help="Publish a directory as update site")

        publish.add_argument(
            'source',
            help="local directory whose content is published, relative to "
            "the workspace")
        publish.add_argument(
            'destination',
            help="directory on the publish host to replace")
        publish.add_argument(
            '--extra-source',
            dest='extra_source',
            default=None,
            help="additional file (or glob) to copy into the destination")
        publish.add_argument(
            '--user',
            default=None,
            help="user on the publish host, overrides [publish] user")
        publish.add_argument(
            '--credentials',
            default=None,
            help="credential id of the ssh key, overrides [publish] "
            "credentials")
        publish.add_argument(
            '--dry-run',
            action='store_true',
            dest='dry_run',
            default=False,
            help="only show the commands")

    def execute(self, options, pipeline_config):
        context, lib, tools = self.create_context(
            pipeline_config, dry_run=options.dry_run, output=sys.stdout)
        tools.publish_update_site(
            options.user or pipeline_config.get('publish', 'user'),
            options.credentials or pipeline_config.get('publish',
                                                       'credentials'),
            options.source,
            options.destination,
            options.extra_source)
