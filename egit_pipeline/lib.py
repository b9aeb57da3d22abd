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

# Operations to determine versions and paths depending on versions.

import io
import logging
import re

import requests

from egit_pipeline.errors import MissingParameterError
from egit_pipeline.errors import PipelineException

__all__ = [
    "Lib"
]

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r'.*refs/tags/v(\d+\.\d+\.)(\d+)\.(\d+)(-.*)')
SNAPSHOT_RE = re.compile(r'<a href="[^"]*/(\d+\.\d+\.)(\d+)-SNAPSHOT/"[^>]*>')
OWN_VERSION_RE = re.compile(r'<version>([^<>]*)</version>')
RELEASE_RE = re.compile(r'(\d+\.\d+)\.(\d+).*')
# vertical whitespace, as git ls-remote or a web server may deliver it
LINES_RE = re.compile(r'[\n\x0b\f\r\x85\u2028\u2029]+')

MAX_REDIRECTS = 8


def split_lines(text):
    return LINES_RE.split(text.strip())


class Lib(object):
    """Determines versions, and paths depending on versions, for a build.

    Versions follow the EGit conventions: ``5.3.0-SNAPSHOT`` for nightly
    builds, ``5.3.0.201903130848-r`` for releases and anything else
    (``5.3.0.201903060810-m3``, ``-rc1``) for milestones staged before a
    release.
    """

    def __init__(self, context):
        self.context = context
        self.config = context.config

    def config_check(self, config, mandatory):
        """Check that config contains all the keys of mandatory, whose values
        describe the parameter. Logs every missing key with its description,
        then fails if any was missing.
        """
        missing = [key for key in mandatory if key not in config]
        for key in missing:
            logger.warning('[WARN] Missing parameter %s: %s',
                           key, mandatory[key])
        if missing:
            raise MissingParameterError(missing)

    def get_own_version(self, pom):
        """Read the first <version> tag from the given pom file, relative to
        the current build directory.
        """
        path = self.context.runner.path(pom)
        try:
            with io.open(path, 'r', encoding='utf-8') as f:
                match = OWN_VERSION_RE.search(f.read())
        except OSError as e:
            raise PipelineException(
                "Cannot read version from {0}: {1}".format(path, e.strerror))
        if match is None:
            raise PipelineException(
                "No <version> found in {0}".format(path))
        return match.group(1)

    def get_upstream_version(self, upstream_repo_path, upstream_project,
                             own_version):
        """Determine the upstream version to build against.

        A -SNAPSHOT build takes the highest upstream snapshot with the same
        major.minor. Otherwise the most recent upstream tag matching our
        major.minor is used, i.e. for 5.3.something the most recent
        v5.3.x.yyyymmddhhmm tag; releases only consider release tags
        (suffix "-r"). Returns '' if no tag matches.
        """
        if own_version.endswith('-SNAPSHOT'):
            return self.get_upstream_snapshot_version(upstream_project,
                                                      own_version)
        url = self.config.get('upstream', 'git-url').format(
            path=upstream_repo_path, project=upstream_project)
        tags = split_lines(self.get_tags(url))
        tag = ''
        max_patch = -1
        max_time = -1
        is_release = own_version.endswith('-r')
        for line in reversed(tags):
            t = line.strip()
            m = TAG_RE.match(t)
            if not m or not own_version.startswith(m.group(1)):
                continue
            if is_release and not t.endswith('-r'):
                continue
            patch = int(m.group(2))
            date = int(m.group(3))
            if patch > max_patch or (patch == max_patch and date > max_time):
                max_patch = patch
                max_time = date
                tag = m.group(1) + m.group(2) + '.' + m.group(3) + m.group(4)
        logger.info("Upstream version of %s/%s for %s: %s",
                    upstream_repo_path, upstream_project, own_version,
                    tag or '<none>')
        return tag

    def get_upstream_snapshot_version(self, upstream_project, own_version):
        url = self._repository_url('snapshots', upstream_project) + '/'
        text = self.fetch_listing(url)
        version = own_version
        max_patch = -1
        for line in split_lines(text):
            m = SNAPSHOT_RE.search(line)
            if m and own_version.startswith(m.group(1)):
                patch = int(m.group(2))
                if patch > max_patch:
                    max_patch = patch
                    version = m.group(1) + m.group(2) + '-SNAPSHOT'
        logger.info("Upstream snapshot of %s for %s: %s",
                    upstream_project, own_version, version)
        return version

    def get_tags(self, url):
        return self.context.runner.capture(
            ['git', 'ls-remote', '--tags', '--refs', url])

    def fetch_listing(self, url):
        """Return the body of the HTML directory listing at url."""
        timeout = self.config.getint('upstream', 'fetch-timeout', 10)
        logger.debug("Fetching %s", url)
        session = requests.Session()
        session.max_redirects = MAX_REDIRECTS
        try:
            response = session.get(url, timeout=timeout,
                                   allow_redirects=True)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise PipelineException(
                "Cannot read snapshot listing {0}: {1}".format(url, e))
        finally:
            session.close()
        return response.text

    def _repository_url(self, kind, project):
        base = self.config.get('upstream', 'repo-url')
        if not base.endswith('/'):
            base += '/'
        return ("{0}{1}.unzip/org/eclipse/{2}/org.eclipse.{2}.repository"
                .format(base, kind, project))

    def get_mvn_upstream_repo(self, project, version):
        """Return the complete maven option -D<project>-site=... pointing at
        the unzipped p2 repository of the given upstream version.
        """
        kind = 'snapshots' if version.endswith('-SNAPSHOT') else 'releases'
        pkg = "org.eclipse.{0}.repository".format(project)
        return "-D{0}-site={1}/{2}/{3}-{2}.zip-unzip/".format(
            project, self._repository_url(kind, project), version, pkg)

    def get_publish_folder(self, branch, own_version):
        """Return the subfolder name to publish the p2 repository to."""
        if own_version.endswith('-SNAPSHOT'):
            if 'master' in (branch or ''):
                return 'updates-nightly'
            # only the last release and master are ever built
            return 'updates-stable-nightly'
        if own_version.endswith('-r'):
            m = RELEASE_RE.match(own_version)
            if m is None:
                raise PipelineException(
                    "Cannot parse release version {0}".format(own_version))
            if int(m.group(2)) == 0:
                return 'updates-' + m.group(1)
            return 'updates-' + m.group(1) + '.' + m.group(2)
        return 'staging/v' + own_version

    def get_publish_directory(self, publish_folder):
        root = self.config.get('publish', 'download-root')
        return root.rstrip('/') + publish_folder
