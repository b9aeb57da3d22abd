#!/usr/bin/env python
# Copyright (C) 2015 OpenStack, LLC.
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

# Manage the registry of build recipes.

import logging

from stevedore import extension

from egit_pipeline.errors import PipelineException

__all__ = [
    "RecipeRegistry"
]

logger = logging.getLogger(__name__)

RECIPE_NAMESPACE = 'egit_pipeline.recipes'


class RecipeRegistry(object):
    """Maps recipe names, as used by the ``recipe`` key of a pipeline
    definition, to the recipe classes registered under the
    ``egit_pipeline.recipes`` entry point namespace.
    """

    def __init__(self, pipeline_config):
        self.pipeline_config = pipeline_config
        self.recipes = {}

        extension_manager = extension.ExtensionManager(
            namespace=RECIPE_NAMESPACE,
            invoke_on_load=False)
        for ext in extension_manager:
            logger.debug("Registering recipe '%s'", ext.name)
            self.recipes[ext.name] = ext.plugin

    @property
    def names(self):
        return sorted(self.recipes)

    def get(self, name):
        try:
            return self.recipes[name]
        except KeyError:
            raise PipelineException(
                "Unknown recipe '{0}', known recipes: {1}".format(
                    name, ', '.join(self.names)))

    def create(self, name, lib, tools):
        return self.get(name)(lib, tools)
