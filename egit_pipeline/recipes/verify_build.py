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

"""
The verify-build recipe builds a Gerrit patchset of a branch, either the
one given by the Gerrit trigger's ``$GERRIT_BRANCH`` or ``default-branch``,
and reports the test results.

:Parameters:
    * **repo-path** (`str`): full path to the repository to build, for
      instance ``egit/egit``
    * **p2-project** (`str`): project containing the built update site at
      ``target/repository``
    * **timeout** (`int`): job timeout in minutes (default 60)
    * **default-branch** (`str`): branch to build if ``$GERRIT_BRANCH`` is
      not set (optional)
    * **upstream-repo-path** (`str`): path to the upstream repo, for
      instance the first ``jgit`` of ``jgit/jgit`` (optional)
    * **upstream-repo** (`str`): upstream repository name, for instance the
      second ``jgit`` of ``jgit/jgit`` (optional)
    * **upstream-version** (`str`): auto-determined if not set (optional)
    * **no-tests** (`bool`): skip tests and static checks (default false)
    * **jdk** (`str`): tool id of the JDK (default temurin-jdk17-latest)
    * **gpg** (`bool`): sign with the ``secret-subkeys.asc`` keyring
      (default false)

Example:

.. code-block:: yaml

    - pipeline:
        name: egit-verify
        recipe: verify-build
        repo-path: egit/egit
        upstream-repo-path: jgit
        upstream-repo: jgit
        p2-project: org.eclipse.egit.repository
"""

import logging

from egit_pipeline.environment import ui_node
from egit_pipeline.gpg import initialize_keyring
from egit_pipeline.recipes.base import Recipe

logger = logging.getLogger(__name__)


class VerifyBuild(Recipe):

    DEFAULTS = {
        'timeout': 60,
        'no-tests': False,
        'jdk': 'temurin-jdk17-latest',
        'gpg': False,
    }

    TYPES = dict(Recipe.TYPES, **{
        'no-tests': bool,
        'gpg': bool,
    })

    MANDATORY = {
        'timeout': 'Job timeout in minutes, default 60',
        'repo-path': 'Full path to the repository to build, for instance '
                     '"egit/egit".',
        'p2-project': 'Project containing the built update site at '
                      'target/repository.',
    }

    def run(self, context, config):
        lib = self.lib
        tools = self.tools
        no_tests = config['no-tests']
        gpg = config['gpg']

        with ui_node(context, config['timeout']):
            try:
                self.prepare(context, config)
                with context.stage('Checkout'):
                    self.java_version(context)
                    tools.clone_and_checkout(
                        config['repo-path'], context.env.get('GERRIT_BRANCH'),
                        '$GERRIT_REFSPEC', {'build-chooser': 'gerrit'})
                with context.stage('Initialize PGP'):
                    if gpg:
                        initialize_keyring(
                            context.runner,
                            self.credential(context, 'secret-subkeys.asc'))
                    else:
                        logger.info("No GPG setup")
                with context.stage('Build'):
                    profiles = [] if no_tests else ['static-checks']
                    profiles.extend(['other-os', 'eclipse-sign'])
                    if gpg:
                        profiles.append('gpg-sign')
                    arguments = ['clean', 'install',
                                 '-P' + ','.join(profiles)]
                    if config.get('upstream-repo'):
                        own_version = self.own_version(context, config)
                        upstream_version = self.upstream_version(
                            context, config, own_version)
                        arguments.append(lib.get_mvn_upstream_repo(
                            config['upstream-repo'], upstream_version))
                    if no_tests:
                        arguments.append('-DskipTests=true')
                    if gpg:
                        passphrase = self.credential(context, 'gpg-passphrase')
                        with context.runner.environment(
                                EGIT_KEYRING_PASSPHRASE=passphrase):
                            tools.maven(arguments)
                    else:
                        tools.maven(arguments)
            finally:
                with context.stage('Results'):
                    tools.archive_artifacts([
                        config['p2-project'] + '/target/repository/**'
                    ])
                    if not no_tests:
                        tools.reporting()
