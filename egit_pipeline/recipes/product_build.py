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
The product-build recipe builds a branch, either the one given by the
Gerrit trigger's ``$GERRIT_BRANCH`` or ``default-branch``, deploys it to
the maven repository and publishes its p2 repository as update site.

The update site folder below ``publish-root`` depends on the version built:
``updates-nightly`` for snapshots of master, ``updates-stable-nightly`` for
snapshots of other branches, ``updates-X.Y`` or ``updates-X.Y.Z`` for
releases and ``staging/v<version>`` for milestones.

:Parameters:
    * **repo-path** (`str`): full path to the repository to build, for
      instance ``egit/egit``
    * **upstream-repo-path** (`str`): path to the upstream repo, for
      instance the first ``jgit`` of ``jgit/jgit``
    * **upstream-repo** (`str`): upstream repository name, for instance the
      second ``jgit`` of ``jgit/jgit``
    * **p2-project** (`str`): project containing the built update site at
      ``target/repository``
    * **publish-root** (`str`): folder on the download server under which
      the update site is placed
    * **timeout** (`int`): job timeout in minutes (default 60)
    * **default-branch** (`str`): branch to build if ``$GERRIT_BRANCH`` is
      not set (optional)
    * **upstream-version** (`str`): auto-determined if not set (optional)
    * **p2-zip** (`str`): p2 repository zip to also publish for releases
      (optional)
    * **jdk** (`str`): tool id of the JDK (optional)
    * **downstream-job** (`str`): Jenkins job triggered with
      ``EGIT_VERSION`` after deployment (optional)
"""

import logging

from egit_pipeline.builder import JenkinsManager
from egit_pipeline.environment import ui_node
from egit_pipeline.recipes.base import Recipe

logger = logging.getLogger(__name__)


class ProductBuild(Recipe):

    DEFAULTS = {
        'timeout': 60,
    }

    MANDATORY = {
        'timeout': 'Job timeout in minutes, default 60',
        'repo-path': 'Full path to the repository to build, for instance '
                     '"egit/egit".',
        'upstream-repo-path': 'Path to the upstream repo, for instance the '
                              'first "jgit" for "jgit/jgit".',
        'upstream-repo': 'Upstream repository name, for instance the second '
                         '"jgit" for "jgit/jgit".',
        'p2-project': 'Project containing the built update site at '
                      'target/repository.',
        'publish-root': 'Folder on p2 publish server under which the repo '
                        'should be placed. The appropriate subfolder is '
                        'determined automatically.',
    }

    def run(self, context, config):
        lib = self.lib
        tools = self.tools
        p2_project = config['p2-project']

        with ui_node(context, config['timeout']):
            try:
                with context.recording():
                    self.prepare(context, config)
                    branch = self.branch(context)
                    with context.stage('Checkout'):
                        self.java_version(context)
                        tools.clone_and_checkout(
                            config['repo-path'], branch,
                            '+refs/heads/*:refs/remotes/origin/*')
                    own_version = self.own_version(context, config)
                    publish_folder = '/{0}/{1}'.format(
                        config['publish-root'],
                        lib.get_publish_folder(branch, own_version))
                    publish_directory = lib.get_publish_directory(
                        publish_folder)
                    upstream_version = self.upstream_version(
                        context, config, own_version)
                    common_arguments = [
                        '-Pstatic-checks,other-os,eclipse-sign',
                        lib.get_mvn_upstream_repo(config['upstream-repo'],
                                                  upstream_version),
                        # needed by tycho-eclipserun for the p2 mirrors URL
                        '-DPUBLISH_FOLDER=' + publish_folder,
                    ]
                    with context.stage('Build'):
                        tools.maven(['clean', 'install'] + common_arguments)
                    with context.stage('Deploy'):
                        # Nexus
                        tools.maven(['deploy', '-DskipTests=true',
                                     '-Dskip-ui-tests=true'] +
                                    common_arguments)
                        # Update site
                        extra_source = None
                        if config.get('p2-zip') and own_version.endswith('-r'):
                            extra_source = '{0}/target/{1}'.format(
                                p2_project, config['p2-zip'])
                        tools.publish_update_site(
                            context.config.get('publish', 'user'),
                            context.config.get('publish', 'credentials'),
                            p2_project + '/target/repository',
                            publish_directory,
                            extra_source)
                    if config.get('downstream-job'):
                        self.trigger_downstream(context,
                                                config['downstream-job'],
                                                own_version)
            finally:
                try:
                    with context.stage('Results'):
                        tools.reporting([
                            p2_project + '/target/repository/**'
                        ])
                finally:
                    tools.send_mail(context.config.get('mail', 'recipients'))

    def trigger_downstream(self, context, job, own_version):
        parameters = {'EGIT_VERSION': own_version}
        if context.dry_run:
            context.runner.output.write('# trigger {0} EGIT_VERSION={1}\n'
                                        .format(job, own_version))
            return None
        return JenkinsManager(context.config).trigger_build(job, parameters)
