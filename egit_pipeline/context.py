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

# State of a single pipeline run.

import contextlib
import logging
import os

from egit_pipeline.errors import BuildTimeout

__all__ = [
    "BuildContext",
    "SUCCESS",
    "UNSTABLE",
    "FAILURE",
    "ABORTED",
]

logger = logging.getLogger(__name__)

SUCCESS = 'SUCCESS'
UNSTABLE = 'UNSTABLE'
FAILURE = 'FAILURE'
ABORTED = 'ABORTED'

# ordered from best to worst
_ORDER = [SUCCESS, UNSTABLE, FAILURE, ABORTED]


def worst(a, b):
    return a if _ORDER.index(a) >= _ORDER.index(b) else b


class BuildContext(object):
    """Everything a recipe needs while it runs: configuration, the command
    runner, the build number, and the build results.

    ``current_result`` only ever gets worse while the build runs; ``result``
    stays unset until the build is finalized, the way Jenkins reports it.
    """

    def __init__(self, pipeline_config, runner, build_number=None,
                 name=None):
        self.config = pipeline_config
        self.name = name or ''
        self.runner = runner
        self.workspace = pipeline_config.pipeline['workspace']
        if build_number is None:
            build_number = pipeline_config.pipeline['build_number']
        self.build_number = build_number
        self.current_result = SUCCESS
        self.result = None
        self.stages = []

    @property
    def env(self):
        return self.runner.env

    @property
    def dry_run(self):
        return self.runner.dry_run

    def mark(self, result):
        self.current_result = worst(self.current_result, result)

    @contextlib.contextmanager
    def recording(self):
        """Mark the build aborted or failed when the enclosed block raises."""
        try:
            yield
        except BuildTimeout:
            self.mark(ABORTED)
            raise
        except Exception:
            self.mark(FAILURE)
            raise

    @contextlib.contextmanager
    def stage(self, name):
        logger.info("[Pipeline] { (%s)", name)
        try:
            with self.recording():
                yield
        except Exception:
            self.stages.append((name, self.current_result))
            logger.error("[Pipeline] } (%s) %s", name, self.current_result)
            raise
        self.stages.append((name, self.current_result))
        logger.info("[Pipeline] } (%s)", name)

    def workspace_path(self, *parts):
        return os.path.join(self.workspace, *parts)
