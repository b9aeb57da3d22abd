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

import argparse
import os

from stevedore import extension

import egit_pipeline.version

SUBCOMMAND_NAMESPACE = 'egit_pipeline.cli.subcommands'


def __version__():
    return "egit-pipeline version: %s" % egit_pipeline.version.version_string


def create_parser():
    """ Create an ArgumentParser object usable by EgitPipeline.
    """
    parser = argparse.ArgumentParser()
    parser.add_argument(
        '--conf',
        dest='conf',
        default=os.environ.get('EGIT_PIPELINE_CONF', None),
        help="configuration file [EGIT_PIPELINE_CONF]")
    parser.add_argument(
        '-l',
        '--log_level',
        dest='log_level',
        default=os.environ.get('EGIT_PIPELINE_LOG_LEVEL', 'info'),
        help="log level (default: %(default)s) [EGIT_PIPELINE_LOG_LEVEL]")
    parser.add_argument(
        '--version',
        dest='version',
        action='version',
        version=__version__(),
        help="show version")
    parser.add_argument(
        '--workspace', '-w',
        dest='workspace',
        default=os.environ.get('WORKSPACE', None),
        help="directory to build in, overrides the configuration file "
        "[WORKSPACE]")
    parser.add_argument(
        '--build-number', '-b',
        dest='build_number',
        type=int,
        default=os.environ.get('BUILD_NUMBER', None),
        help="number of this build, used to name temporary directories "
        "[BUILD_NUMBER]")
    parser.add_argument(
        '--param', '-P',
        dest='params',
        action='append',
        default=[],
        metavar='KEY=VALUE',
        help="build parameter, available to pipeline definitions as {KEY} "
        "and to commands as environment variable. May be repeated.")
    parser.add_argument(
        '--allow-empty-variables',
        action='store_true',
        dest='allow_empty_variables',
        default=None,
        help="Don\'t fail if any of the variables inside any string are "
        "not defined, replace with empty string instead.")

    subparser = parser.add_subparsers(
        dest='command',
        help="build, test, list, resolve, publish or triggers")

    extension_manager = extension.ExtensionManager(
        namespace=SUBCOMMAND_NAMESPACE,
        invoke_on_load=True,
    )

    def parse_subcommand_args(ext, subparser):
        ext.obj.parse_args(subparser)

    extension_manager.map(parse_subcommand_args, subparser)

    return parser
