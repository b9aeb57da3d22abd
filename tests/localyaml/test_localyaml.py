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

from testtools import ExpectedException
import yaml

from egit_pipeline import local_yaml
from tests import base


class TestCaseLocalYamlInclude(base.YamlTestCase):
    """
    Verify application specific tags independently of the pipeline parser
    """
    fixtures_path = os.path.join(os.path.dirname(__file__), 'fixtures')
    scenarios = base.get_scenarios(fixtures_path, 'yaml', 'json')


class TestCaseLocalYaml(base.BaseTestCase):

    fixtures_path = os.path.join(os.path.dirname(__file__), 'fixtures')

    def test_include_from_search_path(self):
        data = local_yaml.load(u"- defaults: !include: include001.yaml.inc\n",
                               search_path=[self.fixtures_path])
        self.assertEqual([{'defaults': {'name': 'global', 'timeout': 60}}],
                         data)

    def test_include_missing_file(self):
        with ExpectedException(IOError):
            local_yaml.load(u"- defaults: !include: missing.yaml.inc\n",
                            search_path=[self.fixtures_path])
        self.assertIn("Failed to include file using search path",
                      self.logger.output)

    def test_join_needs_list(self):
        with ExpectedException(yaml.constructor.ConstructorError):
            local_yaml.load(u"profiles: !join: static-checks\n")

    def test_dump(self):
        out = io.StringIO()
        local_yaml.dump({'publish-folder': 'updates-nightly',
                         'own-version': '5.4.0-SNAPSHOT'}, out)
        self.assertEqual(u"own-version: 5.4.0-SNAPSHOT\n"
                         u"publish-folder: updates-nightly\n",
                         out.getvalue())
