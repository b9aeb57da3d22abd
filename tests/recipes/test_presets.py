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

from testscenarios.testcase import TestWithScenarios

from egit_pipeline.recipes import presets
from egit_pipeline.recipes.product_build import ProductBuild
from egit_pipeline.recipes.verify_build import VerifyBuild
from tests import base
from tests.base import mock
from tests.recipes.test_verify_build import RecipeTestCase


class TestPresetsAreComplete(TestWithScenarios, base.BaseTestCase):

    scenarios = [
        ('egit-product-build', dict(klass=presets.EgitProductBuild,
                                    base_klass=ProductBuild)),
        ('egit-github-product-build', dict(
            klass=presets.EgitGithubProductBuild, base_klass=ProductBuild)),
        ('egit-github-verify-build', dict(
            klass=presets.EgitGithubVerifyBuild, base_klass=VerifyBuild)),
    ]

    def test_mandatory_parameters_preset(self):
        config = self.klass.configure({'name': 'preset'}, {})
        missing = [key for key in self.base_klass.MANDATORY
                   if key not in config]
        self.assertEqual([], missing)


class TestPresetConfiguration(base.BaseTestCase):

    def test_egit_version_parameter(self):
        config = presets.EgitGithubProductBuild.configure(
            {'name': 'egit-github-product'},
            {'EGIT_VERSION': '5.3.0.201903130848-r'})
        self.assertEqual('5.3.0.201903130848-r', config['upstream-version'])
        self.assertEqual('egit/github', config['publish-root'])
        self.assertEqual(30, config['timeout'])

    def test_definition_overrides_preset(self):
        config = presets.EgitProductBuild.configure(
            {'name': 'egit-product', 'timeout': 120,
             'jdk': 'temurin-jdk11-latest'}, {})
        self.assertEqual(120, config['timeout'])
        self.assertEqual('temurin-jdk11-latest', config['jdk'])
        self.assertEqual('org.eclipse.egit.repository-*.zip',
                         config['p2-zip'])


class TestEgitGithubVerifyBuild(RecipeTestCase):

    def test_resolves_egit_version_without_parameter(self):
        with mock.patch('egit_pipeline.lib.Lib.get_tags',
                        return_value=u'abc\trefs/tags/'
                                     u'v5.3.0.201903130848-r\n') as tags:
            presets.EgitGithubVerifyBuild(self.lib, self.tools).build(
                self.context, {'name': 'egit-github-verify',
                               'own-version': '5.3.0.201903060810-m3'})

        tags.assert_called_once_with(
            'https://eclipse.gerrithub.io/egit/egit')
        self.assertIn(
            "mvn clean install -Pstatic-checks,other-os,eclipse-sign "
            "-Degit-site=https://repo.eclipse.org/content/unzip/"
            "releases.unzip/org/eclipse/egit/org.eclipse.egit.repository/"
            "5.3.0.201903130848-r/org.eclipse.egit.repository-"
            "5.3.0.201903130848-r.zip-unzip/", self.plan())
        self.assertIn("# archive org.eclipse.mylyn.github-site/target/"
                      "repository/**", self.plan())

    def test_uses_egit_version_parameter(self):
        env = dict(self.build_env, EGIT_VERSION='5.4.0-SNAPSHOT')
        self.make_context(env=env)
        with mock.patch('egit_pipeline.lib.Lib.get_tags') as tags:
            presets.EgitGithubVerifyBuild(self.lib, self.tools).build(
                self.context, {'name': 'egit-github-verify',
                               'own-version': '5.4.0-SNAPSHOT'})

        self.assertFalse(tags.called)
        self.assertIn("egit-site", self.plan()[6])
        self.assertIn("/5.4.0-SNAPSHOT/", self.plan()[6])
