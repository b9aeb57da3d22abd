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

# Build node environment: timeout, virtual display and build directories.

import contextlib
import logging
import shlex

from egit_pipeline.formatter import to_int

__all__ = [
    "ui_node"
]

logger = logging.getLogger(__name__)

XVNC_ARGS = ['-localhost', '-nolisten', 'tcp', '-geometry', '1024x768',
             '-depth', '24', '-SecurityTypes', 'None']


@contextlib.contextmanager
def ui_node(context, timeout):
    """Run the enclosed block with the given timeout in minutes on a node
    capable of UI tests: with an X display and a window manager if the [ui]
    section asks for one, inside the checkout directory of the workspace.
    """
    config = context.config
    runner = context.runner
    timeout = to_int(timeout, 'timeout')
    logger.info("Running on node '%s' with a timeout of %s minutes",
                config.pipeline['node_label'], timeout)

    try:
        with context.recording(), runner.timeout(timeout), \
                runner.directory(context.workspace):
            with context.stage('Environment'):
                display = {}
                if config.getboolean('ui', 'xvnc'):
                    display['DISPLAY'] = config.get('ui', 'display', ':99')
                    runner.start(['Xvnc', display['DISPLAY']] + XVNC_ARGS)
                with runner.environment(**display):
                    if display:
                        runner.start(shlex.split(
                            config.get('ui', 'window-manager')))
                    runner.run(['mkdir', '-p', 'tmp/egit.tmp'])
            with runner.environment(**display):
                # a subdirectory keeps the sources apart from tmp
                with runner.directory(config.pipeline['checkout_dir']):
                    yield
    finally:
        runner.stop()
