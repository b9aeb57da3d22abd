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
from testtools import ExpectedException

from egit_pipeline.errors import InvalidAttributeError
from tests import base


class TestProjectsToBuild(TestWithScenarios, base.PipelineTestCase):

    scenarios = [
        ('no-branches', dict(
            args=('PLAIN', 'egit/egit', None),
            expected=[{'project-compare-type': 'PLAIN',
                       'project-pattern': 'egit/egit'}])),
        ('single-branch', dict(
            args=('PLAIN', 'egit/egit', 'master'),
            expected=[{'project-compare-type': 'PLAIN',
                       'project-pattern': 'egit/egit',
                       'branches': [{'branch-compare-type': 'PLAIN',
                                     'branch-pattern': 'master'}]}])),
        ('mixed-branches', dict(
            args=('ANT', 'egit/**', ['master', ['REG_EXP', 'stable-.*']]),
            expected=[{'project-compare-type': 'ANT',
                       'project-pattern': 'egit/**',
                       'branches': [{'branch-compare-type': 'PLAIN',
                                     'branch-pattern': 'master'},
                                    {'branch-compare-type': 'REG_EXP',
                                     'branch-pattern': 'stable-.*'}]}])),
        ('empty-branch-list', dict(
            args=('REG_EXP', 'egit/.*', []),
            expected=[{'project-compare-type': 'REG_EXP',
                       'project-pattern': 'egit/.*'}])),
    ]

    def test_projects_to_build(self):
        self.assertEqual(self.expected,
                         self.tools.projects_to_build(*self.args))


class TestProjectsToBuildErrors(base.PipelineTestCase):

    def test_invalid_project_compare_type(self):
        with ExpectedException(InvalidAttributeError,
                               "'GLOB' is an invalid value for attribute "
                               "gerrit.trigger-match"):
            self.tools.projects_to_build('GLOB', 'egit/egit')

    def test_invalid_branch_compare_type(self):
        with ExpectedException(InvalidAttributeError,
                               "'GLOB' is an invalid value for attribute "
                               "gerrit.branch-compare-type"):
            self.tools.projects_to_build('PLAIN', 'egit/egit',
                                         [('GLOB', 'stable-*')])
