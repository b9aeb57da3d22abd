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

# Run external commands on behalf of the build.

import contextlib
import logging
import os
import shlex
import subprocess
import sys
import time

from egit_pipeline.errors import BuildTimeout
from egit_pipeline.errors import CommandError

__all__ = [
    "Runner"
]

logger = logging.getLogger(__name__)


class Runner(object):
    """Executes commands in the current build directory and environment.

    Commands given to :meth:`run` and :meth:`start` change state (clone,
    build, upload); in dry-run mode they are only written to ``output``.
    Commands given to :meth:`capture` are read-only queries and are always
    executed, so that a dry run still resolves real versions.
    """

    def __init__(self, env=None, cwd=None, dry_run=False, output=None):
        self.env = dict(os.environ if env is None else env)
        self.cwd = os.path.abspath(cwd or os.getcwd())
        self.dry_run = dry_run
        self.output = output or sys.stdout
        self.deadline = None
        self._processes = []

    def _remaining(self):
        if self.deadline is None:
            return None
        remaining = self.deadline - time.monotonic()
        if remaining <= 0:
            raise BuildTimeout("Build timeout exceeded")
        return remaining

    def _log(self, args):
        line = shlex.join(args)
        logger.info("+ %s", line)
        return line

    def run(self, args, input=None):
        args = [str(a) for a in args]
        line = self._log(args)
        if self.dry_run:
            self.output.write(line + '\n')
            return
        try:
            proc = subprocess.run(args, cwd=self.cwd, env=self.env,
                                  input=input, text=True,
                                  timeout=self._remaining())
        except subprocess.TimeoutExpired:
            raise BuildTimeout(
                "Command '{0}' exceeded the build timeout".format(line))
        except OSError as e:
            raise CommandError(args, 127, str(e))
        if proc.returncode != 0:
            raise CommandError(args, proc.returncode)

    def _query_cwd(self):
        # dry runs never create directories, so fall back to the nearest
        # existing parent
        cwd = self.cwd
        if self.dry_run:
            while not os.path.isdir(cwd) and os.path.dirname(cwd) != cwd:
                cwd = os.path.dirname(cwd)
        return cwd

    def capture(self, args):
        args = [str(a) for a in args]
        line = self._log(args)
        try:
            proc = subprocess.run(args, cwd=self._query_cwd(), env=self.env,
                                  stdout=subprocess.PIPE, text=True,
                                  timeout=self._remaining())
        except subprocess.TimeoutExpired:
            raise BuildTimeout(
                "Command '{0}' exceeded the build timeout".format(line))
        except OSError as e:
            raise CommandError(args, 127, str(e))
        if proc.returncode != 0:
            raise CommandError(args, proc.returncode, proc.stdout)
        return proc.stdout

    def start(self, args):
        """Launch a background process, stopped again by :meth:`stop`."""
        args = [str(a) for a in args]
        line = self._log(args)
        if self.dry_run:
            self.output.write(line + ' &\n')
            return None
        try:
            proc = subprocess.Popen(args, cwd=self.cwd, env=self.env)
        except OSError as e:
            raise CommandError(args, 127, str(e))
        self._processes.append(proc)
        return proc

    def stop(self):
        while self._processes:
            proc = self._processes.pop()
            if proc.poll() is not None:
                continue
            logger.debug("Terminating background process %d", proc.pid)
            proc.terminate()
            try:
                proc.wait(timeout=10)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()

    def path(self, *parts):
        return os.path.join(self.cwd, *parts)

    @contextlib.contextmanager
    def directory(self, path):
        """Run the enclosed commands in path, relative to the current
        directory. The directory is created if needed.
        """
        previous = self.cwd
        self.cwd = os.path.normpath(os.path.join(previous, path))
        if not self.dry_run:
            os.makedirs(self.cwd, exist_ok=True)
        try:
            yield self.cwd
        finally:
            self.cwd = previous

    @contextlib.contextmanager
    def environment(self, **variables):
        previous = dict(self.env)
        self.env.update(variables)
        try:
            yield self.env
        finally:
            self.env = previous

    @contextlib.contextmanager
    def timeout(self, minutes):
        previous = self.deadline
        self.deadline = time.monotonic() + minutes * 60
        if previous is not None:
            self.deadline = min(previous, self.deadline)
        try:
            yield
        finally:
            self.deadline = previous
