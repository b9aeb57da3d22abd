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
from egit_pipeline import local_yaml


logger = logging.getLogger(__name__)


class ResolveSubCommand(base.BaseSubCommand):
    """Print the versions and paths a build of the project in the current
    workspace would use.
    """

    def parse_args(self, subparser):
        resolve = subparser.add_parser(
            'resolve', help="Resolve own and upstream versions and the "
            "publish folder")

        resolve.add_argument(
            '--pom',
            default='pom.xml',
            help="pom file to read the own version from, relative to the "
            "workspace (default: %(default)s)")
        resolve.add_argument(
            '--own-version',
            dest='own_version',
            default=None,
            help="use this version instead of reading the pom file")
        resolve.add_argument(
            '--branch',
            default=None,
            help="branch being built [GERRIT_BRANCH]")
        resolve.add_argument(
            '--upstream-repo-path',
            dest='upstream_repo_path',
            default='jgit',
            help="path of the upstream repository (default: %(default)s)")
        resolve.add_argument(
            '--upstream-repo',
            dest='upstream_repo',
            default='jgit',
            help="name of the upstream repository (default: %(default)s)")
        resolve.add_argument(
            '--upstream-version',
            dest='upstream_version',
            default=None,
            help="use this upstream version instead of resolving it")

    def execute(self, options, pipeline_config):
        context, lib, tools = self.create_context(pipeline_config)
        own_version = options.own_version or lib.get_own_version(options.pom)
        branch = options.branch or context.env.get('GERRIT_BRANCH', '')
        upstream_version = (options.upstream_version or
                            lib.get_upstream_version(
                                options.upstream_repo_path,
                                options.upstream_repo, own_version))
        resolved = {
            'own-version': own_version,
            'upstream-version': upstream_version,
            'publish-folder': lib.get_publish_folder(branch, own_version),
            'mvn-upstream-repo': lib.get_mvn_upstream_repo(
                options.upstream_repo, upstream_version),
        }
        local_yaml.dump(resolved, sys.stdout)
        return resolved
