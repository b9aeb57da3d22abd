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

import io
import os

import yaml

from tests.base import mock
from tests.cmd.test_cmd import CmdTestsBase
from tests.recipes.test_verify_build import LISTING


class TestResolve(CmdTestsBase):

    def _resolve(self, *args):
        _, out = self.execute_capturing_stdout(
            ['--conf', self.default_config_file, '-w', self.workspace,
             'resolve'] + list(args))
        return yaml.safe_load(out)

    def test_release(self):
        resolved = self._resolve(
            '--own-version', '5.3.0.201903130848-r',
            '--branch', 'stable-5.3',
            '--upstream-version', '5.3.0.201903130848-r')

        self.assertEqual({
            'own-version': '5.3.0.201903130848-r',
            'upstream-version': '5.3.0.201903130848-r',
            'publish-folder': 'updates-5.3',
            'mvn-upstream-repo':
                '-Djgit-site=https://repo.eclipse.org/content/unzip/'
                'releases.unzip/org/eclipse/jgit/'
                'org.eclipse.jgit.repository/5.3.0.201903130848-r/'
                'org.eclipse.jgit.repository-5.3.0.201903130848-r.zip-unzip/',
        }, resolved)

    @mock.patch('egit_pipeline.lib.Lib.fetch_listing', return_value=LISTING)
    def test_snapshot_from_pom(self, fetch_mock):
        with io.open(os.path.join(self.workspace, 'pom.xml'), 'w',
                     encoding='utf-8') as f:
            f.write(u'<project><version>5.4.0-SNAPSHOT</version></project>\n')

        resolved = self._resolve('--branch', 'master')

        self.assertEqual('5.4.0-SNAPSHOT', resolved['own-version'])
        self.assertEqual('5.4.0-SNAPSHOT', resolved['upstream-version'])
        self.assertEqual('updates-nightly', resolved['publish-folder'])
        self.assertTrue(fetch_mock.called)
