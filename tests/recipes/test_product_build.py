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

import os

import fixtures
import testtools

from egit_pipeline.context import FAILURE, SUCCESS
from egit_pipeline.errors import PipelineException
from egit_pipeline.recipes.presets import EgitProductBuild
from egit_pipeline.recipes.product_build import ProductBuild
from tests import base
from tests.base import mock
from tests.recipes.test_verify_build import LISTING
from tests.recipes.test_verify_build import RecipeTestCase


DOWNLOAD = '/home/data/httpd/download.eclipse.org'
SSH = 'ssh genie.egit@projects-storage.eclipse.org '


class TestProductBuild(RecipeTestCase):

    pipeline = {
        'name': 'egit-product',
        'recipe': 'egit-product-build',
        'own-version': '5.4.0-SNAPSHOT',
    }

    def setUp(self):
        super(TestProductBuild, self).setUp()
        self.useFixture(fixtures.EnvironmentVariable(
            'EGIT_PIPELINE_CREDENTIAL_PROJECTS_STORAGE_ECLIPSE_ORG_BOT_SSH'))

    @mock.patch('egit_pipeline.lib.Lib.fetch_listing', return_value=LISTING)
    def test_nightly_plan(self, fetch_mock):
        result = EgitProductBuild(self.lib, self.tools).build(self.context,
                                                              self.pipeline)

        self.assertEqual(SUCCESS, result)
        site = DOWNLOAD + '/egit/updates-nightly'
        upstream = ('-Djgit-site=https://repo.eclipse.org/content/unzip/'
                    'snapshots.unzip/org/eclipse/jgit/'
                    'org.eclipse.jgit.repository/5.4.0-SNAPSHOT/'
                    'org.eclipse.jgit.repository-5.4.0-SNAPSHOT.zip-unzip/')
        self.assertEqual([
            "mkdir -p tmp/egit.tmp",
            "java -version",
            "git init",
            "git config remote.origin.url "
            "git://git.eclipse.org/gitroot/egit/egit.git",
            "git fetch --tags --force --progress -- "
            "git://git.eclipse.org/gitroot/egit/egit.git "
            "'+refs/heads/*:refs/remotes/origin/*'",
            "git checkout -f origin/master",
            "mvn clean install -Pstatic-checks,other-os,eclipse-sign " +
            upstream + " -DPUBLISH_FOLDER=/egit/updates-nightly",
            "mvn deploy -DskipTests=true -Dskip-ui-tests=true "
            "-Pstatic-checks,other-os,eclipse-sign " + upstream +
            " -DPUBLISH_FOLDER=/egit/updates-nightly",
            SSH + "rm -rf " + site + "-tmp42",
            SSH + "mkdir -p " + site + "-tmp42",
            "scp -r 'org.eclipse.egit.repository/target/repository/*' "
            "genie.egit@projects-storage.eclipse.org:" + site + "-tmp42",
            SSH + "rm -rf " + site + "-old",
            SSH + "mkdir -p " + site,
            SSH + "mv " + site + " " + site + "-old",
            SSH + "mv " + site + "-tmp42 " + site,
            SSH + "rm -rf " + site + "-old",
            "# junit */target/surefire-reports/*.xml",
            "# archive org.eclipse.egit.repository/target/repository/**,"
            "*/target/screenshots/*,*/target/work/data/.metadata/*log",
            "# findbugs */target/*bugsXml.xml",
            "# mail egit-build@eclipse.org",
        ], self.plan())
        self.assertEqual(['Environment', 'Checkout', 'Build', 'Deploy',
                          'Results'],
                         [name for name, _ in self.context.stages])

    def test_release_plan(self):
        pipeline = dict(self.pipeline, **{
            'own-version': '5.3.0.201903130848-r',
            'upstream-version': '5.3.0.201903130848-r',
            'downstream-job': 'egit-github-product',
        })
        EgitProductBuild(self.lib, self.tools).build(self.context, pipeline)

        plan = self.plan()
        self.assertIn(
            "scp 'org.eclipse.egit.repository/target/"
            "org.eclipse.egit.repository-*.zip' "
            "genie.egit@projects-storage.eclipse.org:" + DOWNLOAD +
            "/egit/updates-5.3-tmp42/", plan)
        self.assertIn(
            "# trigger egit-github-product "
            "EGIT_VERSION=5.3.0.201903130848-r", plan)
        self.assertTrue(plan[6].endswith(
            "releases.unzip/org/eclipse/jgit/org.eclipse.jgit.repository/"
            "5.3.0.201903130848-r/org.eclipse.jgit.repository-"
            "5.3.0.201903130848-r.zip-unzip/ -DPUBLISH_FOLDER=/egit/"
            "updates-5.3"))

    def test_missing_branch(self):
        self.make_context(env={'PATH': '/usr/bin:/bin'})

        self.assertRaises(PipelineException,
                          EgitProductBuild(self.lib, self.tools).build,
                          self.context, self.pipeline)
        self.assertEqual(FAILURE, self.context.result)
        self.assertEqual(['Environment', 'Results'],
                         [name for name, _ in self.context.stages])
        self.assertEqual("# mail egit-build@eclipse.org",
                         self.commands()[-1])

    def test_default_branch(self):
        self.make_context(env={'PATH': '/usr/bin:/bin'})
        pipeline = dict(self.pipeline, **{
            'default-branch': 'stable-5.3',
            'own-version': '5.3.1-SNAPSHOT',
            'upstream-version': '5.3.1-SNAPSHOT',
        })
        EgitProductBuild(self.lib, self.tools).build(self.context, pipeline)

        plan = self.plan()
        self.assertIn("git checkout -f origin/stable-5.3", plan)
        self.assertIn(SSH + "mkdir -p " + DOWNLOAD +
                      "/egit/updates-stable-nightly", plan)

    @mock.patch('egit_pipeline.recipes.product_build.JenkinsManager')
    def test_trigger_downstream(self, manager_mock):
        self.make_context(dry_run=False)
        manager_mock.return_value.trigger_build.return_value = 17

        queued = ProductBuild(self.lib, self.tools).trigger_downstream(
            self.context, 'egit-github-product', '5.4.0-SNAPSHOT')

        self.assertEqual(17, queued)
        manager_mock.assert_called_once_with(self.config)
        manager_mock.return_value.trigger_build.assert_called_once_with(
            'egit-github-product', {'EGIT_VERSION': '5.4.0-SNAPSHOT'})


JGIT_TAGS = [
    'v5.2.1.201812262042-r',
    'v5.3.0.201903061415-rc1',
    'v5.3.0.201903130848-r',
    'v5.3.2.201906051522-r',
    'v5.3.3.201909060512-m1',
    'v5.4.0.201905221418-m2',
]


@testtools.skipUnless(base.git_path(), "git is not installed")
class TestProductBuildUpstreamTags(RecipeTestCase):
    """Dry runs resolving the upstream version from the tags of a local
    repository, queried from the checkout directory a dry run never creates.
    """

    def setUp(self):
        super(TestProductBuildUpstreamTags, self).setUp()
        self.useFixture(fixtures.EnvironmentVariable(
            'EGIT_PIPELINE_CREDENTIAL_PROJECTS_STORAGE_ECLIPSE_ORG_BOT_SSH'))
        upstream = self.useFixture(
            base.TaggedRepository('jgit', 'jgit', JGIT_TAGS))
        self.config.config_parser.set('upstream', 'git-url',
                                      upstream.git_url)
        self.make_context(env=dict(self.build_env, PATH=base.git_path(),
                                   HOME=self.workspace))

    def _build(self, own_version):
        pipeline = {
            'name': 'egit-product',
            'recipe': 'egit-product-build',
            'own-version': own_version,
        }
        result = EgitProductBuild(self.lib, self.tools).build(self.context,
                                                              pipeline)
        self.assertEqual(SUCCESS, result)
        self.assertFalse(os.path.exists(os.path.join(self.workspace,
                                                     'repo')))
        return self.plan()

    def test_release_plan(self):
        plan = self._build('5.3.0.201903130848-r')

        self.assertTrue(plan[6].endswith(
            "releases.unzip/org/eclipse/jgit/org.eclipse.jgit.repository/"
            "5.3.2.201906051522-r/org.eclipse.jgit.repository-"
            "5.3.2.201906051522-r.zip-unzip/ -DPUBLISH_FOLDER=/egit/"
            "updates-5.3"), plan[6])
        self.assertIn(SSH + "mkdir -p " + DOWNLOAD + "/egit/updates-5.3",
                      plan)

    def test_milestone_plan(self):
        plan = self._build('5.3.3.201908280000-rc1')

        self.assertTrue(plan[6].endswith(
            "releases.unzip/org/eclipse/jgit/org.eclipse.jgit.repository/"
            "5.3.3.201909060512-m1/org.eclipse.jgit.repository-"
            "5.3.3.201909060512-m1.zip-unzip/ -DPUBLISH_FOLDER=/egit/"
            "staging/v5.3.3.201908280000-rc1"), plan[6])
