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

from egit_pipeline.config import PipelineConfig
from egit_pipeline.errors import PipelineException
from egit_pipeline import registry
from egit_pipeline.recipes.product_build import ProductBuild
from egit_pipeline.recipes.verify_build import VerifyBuild
from tests import base
from tests.base import mock


def fake_extension(name, plugin):
    ext = mock.Mock(plugin=plugin)
    ext.name = name
    return ext


class TestRecipeRegistry(base.BaseTestCase):

    def setUp(self):
        super(TestRecipeRegistry, self).setUp()
        patcher = mock.patch(
            'egit_pipeline.registry.extension.ExtensionManager')
        manager = patcher.start()
        self.addCleanup(patcher.stop)
        manager.return_value = [
            fake_extension('verify-build', VerifyBuild),
            fake_extension('product-build', ProductBuild),
        ]
        self.manager = manager
        self.registry = registry.RecipeRegistry(PipelineConfig(os.devnull))

    def test_loads_recipe_namespace(self):
        self.manager.assert_called_once_with(
            namespace='egit_pipeline.recipes', invoke_on_load=False)

    def test_names_sorted(self):
        self.assertEqual(['product-build', 'verify-build'],
                         self.registry.names)

    def test_get(self):
        self.assertIs(VerifyBuild, self.registry.get('verify-build'))

    def test_create(self):
        recipe = self.registry.create('product-build', 'lib', 'tools')
        self.assertIsInstance(recipe, ProductBuild)
        self.assertEqual('lib', recipe.lib)
        self.assertEqual('tools', recipe.tools)

    def test_unknown_recipe(self):
        e = self.assertRaises(PipelineException,
                              self.registry.get, 'nightly-build')
        self.assertEqual("Unknown recipe 'nightly-build', known recipes: "
                         "product-build, verify-build", str(e))
