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

# Manage egit-pipeline configuration sources, defaults, and access.

from collections import defaultdict
import configparser
import io
import logging
import os
import re

from egit_pipeline.errors import PipelineConfigException

__all__ = [
    "PipelineConfig"
]

logger = logging.getLogger(__name__)

DEFAULT_CONF = """
[pipeline]
workspace=.
checkout-dir=repo
archive-dir=archive
node-label=migration
maven=apache-maven-latest
allow-duplicates=False
allow-empty-variables=False

[scm]
url=git://git.eclipse.org/gitroot/{project}.git

[upstream]
git-url=https://eclipse.gerrithub.io/{path}/{project}
repo-url=https://repo.eclipse.org/content/unzip/
fetch-timeout=10

[publish]
host=projects-storage.eclipse.org
user=genie.egit
credentials=projects-storage.eclipse.org-bot-ssh
download-root=/home/data/httpd/download.eclipse.org

[mail]
recipients=egit-build@eclipse.org
smtp-host=
smtp-port=25
sender=egit-pipeline@localhost

[ui]
xvnc=False
display=:99
window-manager=mutter --replace --sm-disable

# used to trigger downstream jobs only
[jenkins]
url=

[tools]

[credentials]
"""

CONFIG_REQUIRED_MESSAGE = ("A valid configuration file is required. "
                           "No configuration file passed.")
CREDENTIAL_ENV_PREFIX = 'EGIT_PIPELINE_CREDENTIAL_'


class PipelineConfig(object):

    def __init__(self, config_filename=None,
                 config_file_required=False):

        """
        The PipelineConfig class resolves priority between the built-in
        defaults, the configuration file and the command line, and offers a
        consistent accessor interface to the rest of the tool.

        :arg str config_filename: Name of configuration file on which to base
            this config object.
        :arg bool config_file_required: Whether failure to read the
            configuration file raises an exception or simply logs a warning
            and falls back to the default values.
        """

        config_parser = self._init_defaults()

        global_conf = '/etc/egit_pipeline/egit_pipeline.ini'
        user_conf = os.path.join(os.path.expanduser('~'), '.config',
                                 'egit_pipeline', 'egit_pipeline.ini')
        local_conf = os.path.join(os.path.dirname(__file__),
                                  'egit_pipeline.ini')
        conf = None
        if config_filename is not None:
            conf = config_filename
        else:
            if os.path.isfile(local_conf):
                conf = local_conf
            elif os.path.isfile(user_conf):
                conf = user_conf
            else:
                conf = global_conf

        config_fp = None
        try:
            config_fp = self._read_config_file(conf)
        except PipelineConfigException:
            if config_file_required:
                raise PipelineConfigException(CONFIG_REQUIRED_MESSAGE)
            else:
                logger.warning("Config file, {0}, not found. Using "
                               "default config values.".format(conf))

        if config_fp is not None:
            with config_fp:
                config_parser.read_file(config_fp)

        self.config_parser = config_parser

        self.pipeline = defaultdict(None)
        self.yamlparser = defaultdict(None)
        self.jenkins = defaultdict(None)
        self.params = {}

        self._setup()

    def _init_defaults(self):
        """ Initialize default configuration values using DEFAULT_CONF
        """
        config = configparser.ConfigParser(interpolation=None)
        config.read_file(io.StringIO(DEFAULT_CONF))
        return config

    def _read_config_file(self, config_filename):
        """ Given path to configuration file, open it for reading and return
        the file object.
        """
        if os.path.isfile(config_filename):
            logger.debug("Reading config from {0}".format(config_filename))
            config_fp = io.open(config_filename, 'r', encoding='utf-8')
        else:
            raise PipelineConfigException(
                "A valid configuration file is required. "
                "\n{0} is not valid.".format(config_filename))

        return config_fp

    def _setup(self):
        config = self.config_parser

        logger.debug("Config: {0}".format(config))

        self.pipeline['workspace'] = os.path.abspath(
            os.path.expanduser(config.get('pipeline', 'workspace')))
        self.pipeline['checkout_dir'] = config.get('pipeline', 'checkout-dir')
        self.pipeline['archive_dir'] = config.get('pipeline', 'archive-dir')
        self.pipeline['node_label'] = config.get('pipeline', 'node-label')
        self.pipeline['maven'] = config.get('pipeline', 'maven')
        self.pipeline['build_number'] = 0

        self.yamlparser['allow_duplicates'] = config.getboolean(
            'pipeline', 'allow-duplicates')
        self.yamlparser['allow_empty_variables'] = config.getboolean(
            'pipeline', 'allow-empty-variables')

        path = ["."]
        if config.has_option('pipeline', 'include-path'):
            path = config.get('pipeline', 'include-path').split(':')
        self.yamlparser['include_path'] = path

        try:
            user = config.get('jenkins', 'user')
        except configparser.NoOptionError:
            user = None
        self.jenkins['user'] = user

        try:
            password = config.get('jenkins', 'password')
        except configparser.NoOptionError:
            password = None
        self.jenkins['password'] = password

        try:
            timeout = config.getfloat('jenkins', 'timeout')
        except ValueError:
            raise PipelineConfigException("Jenkins timeout config is invalid")
        except configparser.NoOptionError:
            timeout = None
        self.jenkins['timeout'] = timeout
        self.jenkins['url'] = config.get('jenkins', 'url') or None

    def validate(self):
        if ((self.jenkins['user'] is not None and
             self.jenkins['password'] is None) or
            (self.jenkins['user'] is None and
             self.jenkins['password'] is not None)):
            raise PipelineConfigException(
                "Cannot authenticate to Jenkins with only one of User and "
                "Password provided, please check your configuration."
            )
        if self.pipeline['build_number'] < 0:
            raise PipelineConfigException("Build number must not be negative")

    def get(self, section, key, default=None):
        """ Return the value of key in section, or default when the section or
        the key is missing or empty.
        """
        try:
            value = self.config_parser.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default
        if value == '':
            return default
        return value

    def getboolean(self, section, key, default=False):
        try:
            return self.config_parser.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def getint(self, section, key, default=None):
        try:
            return self.config_parser.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default
        except ValueError:
            raise PipelineConfigException(
                "[{0}] {1} must be an integer".format(section, key))

    def get_tool(self, tool_id):
        """ Return the installation directory of the given tool, or None if
        the tool is not configured.
        """
        return self.get('tools', tool_id)

    def get_credential(self, credential_id):
        """ Look up a credential, first in the environment and then in the
        [credentials] section. File credentials hold a path, string
        credentials the secret itself. Returns None when not configured.
        """
        env_name = CREDENTIAL_ENV_PREFIX + re.sub(
            r'[^A-Za-z0-9]', '_', credential_id).upper()
        value = os.environ.get(env_name)
        if value:
            return value
        return self.get('credentials', credential_id)
