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

from tests.cmd.test_cmd import CmdTestsBase


SITE = '/home/data/httpd/download.eclipse.org/egit/updates-nightly'


class TestPublish(CmdTestsBase):

    def setUp(self):
        super(TestPublish, self).setUp()
        self.useFixture(fixtures.EnvironmentVariable(
            'EGIT_PIPELINE_CREDENTIAL_BOT_KEY', '/keys/bot'))
        site = os.path.join(self.workspace, 'site')
        os.makedirs(site)
        open(os.path.join(site, 'content.jar'), 'w').close()

    def test_dry_run(self):
        _, out = self.execute_capturing_stdout(
            ['--conf', self.default_config_file, '-w', self.workspace,
             '-b', '3', 'publish', 'site', SITE, '--user', 'genie.tester',
             '--credentials', 'bot-key', '--dry-run'])

        lines = out.splitlines()
        target = 'genie.tester@projects-storage.eclipse.org'
        self.assertEqual(8, len(lines))
        self.assertEqual('ssh -i /keys/bot {0} rm -rf {1}-tmp3'.format(
            target, SITE), lines[0])
        self.assertEqual('scp -r -i /keys/bot site/content.jar '
                         '{0}:{1}-tmp3'.format(target, SITE), lines[2])
        self.assertEqual('ssh -i /keys/bot {0} mv {1}-tmp3 {1}'.format(
            target, SITE), lines[6])
