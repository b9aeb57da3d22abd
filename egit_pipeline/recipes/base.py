# Copyright 2012 Hewlett-Packard Development Company, L.P.
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

# Base class for an egit_pipeline recipe

import logging
import os

from egit_pipeline.errors import PipelineConfigException
from egit_pipeline.errors import PipelineException
from egit_pipeline.formatter import convert_types
from egit_pipeline.formatter import deep_format

logger = logging.getLogger(__name__)


class Recipe(object):
    """
    A base class for a build recipe: a complete sequence of stages building
    one kind of project.

    :arg Lib lib: version and path operations for the build
    :arg Tools tools: pipeline fragments for the build
    """

    #: Values used for keys the pipeline definition does not set.
    DEFAULTS = {}

    #: Keys every pipeline definition must provide, after applying
    #: DEFAULTS, mapped to a description shown when they are missing.
    MANDATORY = {}

    #: Keys converted to ``int`` or ``bool``, as build parameters and
    #: quoted YAML values arrive as strings.
    TYPES = {
        'timeout': int,
    }

    def __init__(self, lib, tools):
        self.lib = lib
        self.tools = tools

    @classmethod
    def configure(cls, data, params=None):
        """Merge the pipeline definition over DEFAULTS, whose placeholders
        are filled from the build parameters.
        """
        config = deep_format(cls.DEFAULTS, params or {})
        config.update(data)
        return convert_types(config, cls.TYPES)

    def build(self, context, data):
        """Check the pipeline definition, then run the recipe.

        :arg BuildContext context: the build to run in
        :arg dict data: the expanded pipeline definition
        :returns: the build result
        """
        config = self.configure(data, context.env)
        self.lib.config_check(config, self.MANDATORY)
        try:
            with context.recording():
                self.run(context, config)
        finally:
            if context.result is None:
                context.result = context.current_result
        return context.result

    def run(self, context, config):
        """Execute the stages of the recipe. Override this method."""
        raise NotImplementedError

    def prepare(self, context, config):
        env = context.env
        if not env.get('GERRIT_BRANCH') and config.get('default-branch'):
            env['GERRIT_BRANCH'] = config['default-branch']
        jdk = config.get('jdk')
        if jdk:
            java_home = context.config.get_tool(jdk)
            if java_home:
                env['JAVA_HOME'] = java_home
            else:
                logger.warning("Tool %s not configured, keeping JAVA_HOME "
                               "%s", jdk, env.get('JAVA_HOME', '<unset>'))

    def branch(self, context):
        branch = context.env.get('GERRIT_BRANCH')
        if not branch:
            raise PipelineException(
                "No branch to build, set GERRIT_BRANCH or default-branch")
        return branch

    def java_version(self, context):
        java_home = context.env.get('JAVA_HOME')
        java = os.path.join(java_home, 'bin', 'java') if java_home else 'java'
        context.runner.run([java, '-version'])

    def own_version(self, context, config):
        own = config.get('own-version')
        if own:
            return own
        return self.lib.get_own_version('pom.xml')

    def upstream_version(self, context, config, own_version):
        upstream = config.get('upstream-version')
        if upstream:
            return upstream
        repo = config['upstream-repo']
        return self.lib.get_upstream_version(
            config.get('upstream-repo-path') or repo, repo, own_version)

    def credential(self, context, credential_id):
        value = context.config.get_credential(credential_id)
        if value:
            return value
        if context.dry_run:
            return '<{0}>'.format(credential_id)
        raise PipelineConfigException(
            "Credential '{0}' is not configured".format(credential_id))
