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

# Collection of useful pipeline fragments for use in an EGit build.

from email.message import EmailMessage
import glob
import io
import logging
import os
import shutil
import smtplib
import string
import xml.etree.ElementTree as XML

import jinja2

from egit_pipeline.context import FAILURE, SUCCESS, UNSTABLE
from egit_pipeline.errors import CommandError
from egit_pipeline.errors import InvalidAttributeError
from egit_pipeline.errors import PipelineException
from egit_pipeline.errors import PublishError
from egit_pipeline import utils

__all__ = [
    "Tools"
]

logger = logging.getLogger(__name__)

COMPARE_TYPES = ['PLAIN', 'ANT', 'REG_EXP']
BUILD_CHOOSERS = ['default', 'gerrit']

MAIL_SUBJECTS = {
    FAILURE: "Build failed: {name} #{number}",
    UNSTABLE: "Build is unstable: {name} #{number}",
    SUCCESS: "Build is back to normal: {name} #{number}",
}

MAIL_TEMPLATE = jinja2.Template(u"""\
{{ name }} #{{ number }} finished with result {{ result }}.
{% if stages %}
Stages:
{% for stage, stage_result in stages %}  {{ stage }}: {{ stage_result }}
{% endfor %}{% endif %}
Workspace: {{ workspace }}
""")


class Tools(object):

    def __init__(self, context):
        self.context = context
        self.config = context.config

    def projects_to_build(self, match, repo, branches=None):
        """Construct a Gerrit trigger "projects" specification to trigger on
        the given repo and branches.

        :arg str match: compare type for repo
        :arg str repo: project name or pattern to trigger on
        :arg branches: a single branch name, or a list whose entries are
            either branch names or [compare type, pattern] pairs. If empty or
            None, no branch filter is added.
        """
        if match not in COMPARE_TYPES:
            raise InvalidAttributeError('trigger-match', match, COMPARE_TYPES,
                                        module_name='gerrit')
        project = {
            'project-compare-type': match,
            'project-pattern': repo,
        }
        if not branches:
            return [project]
        if isinstance(branches, str):
            branches = [branches]
        branch_specs = []
        for b in branches:
            if isinstance(b, (list, tuple)) and len(b) == 2:
                compare, pattern = b
                if compare not in COMPARE_TYPES:
                    raise InvalidAttributeError('branch-compare-type',
                                                compare, COMPARE_TYPES,
                                                module_name='gerrit')
            else:
                compare, pattern = 'PLAIN', b
            branch_specs.append({
                'branch-compare-type': compare,
                'branch-pattern': pattern,
            })
        project['branches'] = branch_specs
        return [project]

    def clone_and_checkout(self, project, branch, refspec, extras=None):
        """Clone the given project, for example "jgit/jgit", fetching with
        refspec and checking out branch. extras are merged into the checkout
        configuration handed to :meth:`checkout`.
        """
        expanded = string.Template(refspec).safe_substitute(self.context.env)
        if '$' in expanded:
            raise PipelineException(
                "Refspec '{0}' refers to unset variables".format(refspec))
        cfg = {
            'url': self.config.get('scm', 'url').format(project=project),
            'branches': [{'name': branch}],
            'remote': 'origin',
            'refspec': expanded,
            'build-chooser': 'default',
        }
        cfg.update(extras or {})
        self.checkout(cfg)

    def checkout(self, cfg):
        runner = self.context.runner
        chooser = cfg.get('build-chooser', 'default')
        if chooser not in BUILD_CHOOSERS:
            raise InvalidAttributeError('build-chooser', chooser,
                                        BUILD_CHOOSERS, module_name='checkout')
        remote = cfg.get('remote', 'origin')
        url = cfg['url']

        if not os.path.isdir(runner.path('.git')):
            runner.run(['git', 'init'])
        runner.run(['git', 'config', 'remote.{0}.url'.format(remote), url])
        runner.run(['git', 'fetch', '--tags', '--force', '--progress',
                    '--', url, cfg['refspec']])

        if chooser == 'gerrit':
            revision = self.context.env.get('GERRIT_PATCHSET_REVISION',
                                            'FETCH_HEAD')
        else:
            branch = cfg['branches'][0]['name']
            if branch.startswith('refs/'):
                revision = branch
            else:
                revision = '{0}/{1}'.format(remote, branch)
        runner.run(['git', 'checkout', '-f', revision])

    def publish_update_site(self, genie, credentials, source_directory,
                            publish_directory, extra_source=None):
        """Copy all content of source_directory to publish_directory on the
        publish host via ssh/scp, replacing publish_directory if it exists.

        The content is uploaded into a temporary sibling directory first and
        swapped in by two renames, so readers only briefly see no directory.
        """
        runner = self.context.runner
        host = self.config.get('publish', 'host')
        target = '{0}@{1}'.format(genie, host)
        key = self.config.get_credential(credentials)
        identity = ['-i', key] if key else []
        if not key:
            logger.info("No key configured for %s, using the ssh agent",
                        credentials)

        build_number = self.context.build_number
        tmp = '{0}-tmp{1}'.format(publish_directory, build_number)
        old = '{0}-old'.format(publish_directory)

        def remote(*command):
            runner.run(['ssh'] + identity + [target] + list(command))

        sources = self._expand(os.path.join(source_directory, '*'))
        extras = []
        if extra_source:
            extras = self._expand(extra_source)

        remote('rm', '-rf', tmp)
        remote('mkdir', '-p', tmp)
        runner.run(['scp', '-r'] + identity + sources +
                   ['{0}:{1}'.format(target, tmp)])
        if extras:
            runner.run(['scp'] + identity + extras +
                       ['{0}:{1}/'.format(target, tmp)])
        # remove a leftover -old directory, make sure there is something to
        # move away, then swap
        remote('rm', '-rf', old)
        remote('mkdir', '-p', publish_directory)
        remote('mv', publish_directory, old)
        remote('mv', tmp, publish_directory)
        remote('rm', '-rf', old)
        logger.info("Published %s to %s:%s", source_directory, host,
                    publish_directory)

    def _expand(self, pattern):
        matches = sorted(glob.glob(pattern, root_dir=self.context.runner.cwd))
        if matches:
            return matches
        if self.context.dry_run:
            return [pattern]
        raise PublishError("Nothing to publish matches '{0}'".format(pattern))

    def reporting(self, specific_artifacts=()):
        """Standard build reporting: test results, artifacts including
        screenshots and Eclipse logs, and static analysis results.
        """
        # don't use ** if the number of directories is known, this is a huge
        # performance problem
        self.junit('*/target/surefire-reports/*.xml')

        artifacts = list(specific_artifacts)
        artifacts.extend([
            '*/target/screenshots/*',
            '*/target/work/data/.metadata/*log',
        ])
        self.archive_artifacts(artifacts)
        self.findbugs('*/target/*bugsXml.xml')

    def junit(self, pattern):
        """Summarize JUnit XML results; failing tests make the build
        unstable, no results at all fail it.
        """
        if self.context.dry_run:
            self.context.runner.output.write('# junit {0}\n'.format(pattern))
            return None
        files = utils.find_files(pattern, self.context.runner.cwd)
        if not files:
            logger.error("No test report files were found matching %s",
                         pattern)
            self.context.mark(FAILURE)
            return None
        totals = {'tests': 0, 'failures': 0, 'errors': 0, 'skipped': 0}
        for fn in files:
            try:
                root = XML.parse(self.context.runner.path(fn)).getroot()
            except XML.ParseError as e:
                raise PipelineException(
                    "Cannot parse test report {0}: {1}".format(fn, e))
            suites = [root] if root.tag == 'testsuite' else root.iter(
                'testsuite')
            for suite in suites:
                for key in totals:
                    totals[key] += int(suite.get(key, 0))
        logger.info("Test results: %(tests)d tests, %(failures)d failures, "
                    "%(errors)d errors, %(skipped)d skipped", totals)
        if totals['failures'] or totals['errors']:
            self.context.mark(UNSTABLE)
        return totals

    def findbugs(self, pattern):
        if self.context.dry_run:
            self.context.runner.output.write(
                '# findbugs {0}\n'.format(pattern))
            return None
        count = 0
        for fn in utils.find_files(pattern, self.context.runner.cwd):
            try:
                root = XML.parse(self.context.runner.path(fn)).getroot()
            except XML.ParseError as e:
                logger.warning("Ignoring unreadable analysis result %s: %s",
                               fn, e)
                continue
            count += len(root.findall('.//BugInstance'))
        if count:
            logger.warning("Static analysis found %d bugs", count)
        return count

    def archive_artifacts(self, patterns):
        """Copy the files matching the ant-style patterns, relative to the
        current build directory, into the archive directory.
        """
        patterns = utils.split_patterns(patterns)
        runner = self.context.runner
        if self.context.dry_run:
            runner.output.write('# archive {0}\n'.format(','.join(patterns)))
            return []
        files = utils.find_files(patterns, runner.cwd)
        if not files:
            logger.error("No artifacts found that match the file pattern "
                         "\"%s\"", ','.join(patterns))
            self.context.mark(FAILURE)
            return []
        archive = self.context.workspace_path(
            self.config.pipeline['archive_dir'])
        for fn in files:
            dest = os.path.join(archive, fn)
            os.makedirs(os.path.dirname(dest), exist_ok=True)
            shutil.copy2(runner.path(fn), dest)
        logger.info("Archived %d artifacts to %s", len(files), archive)
        return files

    def send_mail(self, to):
        """Send an e-mail depending on the build outcome: on every failing or
        unstable build, and on the first successful build after those.

        :arg str to: whitespace-separated e-mail addresses
        """
        context = self.context
        if context.result is None:
            context.result = context.current_result
        result = context.result

        if context.dry_run:
            context.runner.output.write('# mail {0}\n'.format(to))
            return False

        previous = self._swap_recorded_result(result)
        if result not in (FAILURE, UNSTABLE) and not (
                result == SUCCESS and previous not in (None, SUCCESS)):
            logger.debug("No mail for result %s (previous %s)",
                         result, previous)
            return False

        recipients = to.split()
        for author in self._individuals():
            if author not in recipients:
                recipients.append(author)

        host = self.config.get('mail', 'smtp-host')
        if not host:
            logger.warning("No [mail] smtp-host configured, not sending "
                           "mail to %s", ', '.join(recipients))
            return False

        msg = EmailMessage()
        msg['Subject'] = MAIL_SUBJECTS[result].format(
            name=context.name, number=context.build_number)
        msg['From'] = self.config.get('mail', 'sender')
        msg['To'] = ', '.join(recipients)
        msg.set_content(MAIL_TEMPLATE.render(
            name=context.name, number=context.build_number, result=result,
            stages=context.stages, workspace=context.workspace))
        port = self.config.getint('mail', 'smtp-port', 25)
        try:
            with smtplib.SMTP(host, port) as smtp:
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send mail to %s: %s",
                         ', '.join(recipients), e)
            return False
        logger.info("Sent mail to %s", ', '.join(recipients))
        return True

    def _swap_recorded_result(self, result):
        """Record result for this pipeline and return the previous one."""
        state_dir = self.context.workspace_path('.egit-pipeline')
        state = os.path.join(state_dir, '{0}.result'.format(
            self.context.name or 'build'))
        previous = None
        if os.path.isfile(state):
            with io.open(state, 'r', encoding='utf-8') as f:
                previous = f.read().strip() or None
        os.makedirs(state_dir, exist_ok=True)
        with io.open(state, 'w', encoding='utf-8') as f:
            f.write(result + u'\n')
        return previous

    def _individuals(self):
        try:
            author = self.context.runner.capture(
                ['git', 'log', '-1', '--format=%ae', 'HEAD'])
        except CommandError as e:
            logger.debug("Cannot determine culprits: %s", e)
            return []
        return [a for a in author.split() if '@' in a]

    def maven(self, arguments, mvn_version='apache-maven-latest'):
        """Run mvn with the given arguments, supplying the EGit default
        arguments automatically.

        :arg list arguments: for mvn
        :arg str mvn_version: tool identifier from the [tools] section
        """
        workspace = self.context.workspace
        args = list(arguments)
        # General build setup
        args.extend([
            # suppress progress output
            '--batch-mode',
            # show maven errors
            '--errors',
            # have a separate maven repo per job
            '-Dmaven.repo.local={0}/.repository'.format(workspace),
            # avoid flaky or not updated mirrors
            '-Declipse.p2.mirrors=false',
            # temporary directory for egit tests
            '-Degit.test.tmpdir={0}/tmp/egit.tmp/'.format(workspace),
            # temporary directory for java
            '-Djava.io.tmpdir={0}/tmp/'.format(workspace),
        ])
        # mvn logging setup
        args.extend([
            # make eclipse log to the build log, not just into a file
            '-Dtest.vmparams=-Declipse.consoleLog=true',
            # enable timestamps in mvn logging
            '-Dorg.slf4j.simpleLogger.showDateTime=true',
            # set timestamp format
            '-Dorg.slf4j.simpleLogger.dateTimeFormat=HH:mm:ss',
            # disable download progress output
            '-Dorg.slf4j.simpleLogger.log.org.apache.maven.cli.transfer.'
            'Slf4jMavenTransferListener=warn',
            # disable parallel maven build threadsafe warning
            '-Dorg.slf4j.simpleLogger.log.org.apache.maven.lifecycle.'
            'internal.builder.BuilderCommon=error',
        ])

        mvn_home = self.config.get_tool(mvn_version)
        mvn = 'mvn.cmd' if os.name == 'nt' else 'mvn'
        if mvn_home:
            mvn = os.path.join(mvn_home, 'bin', mvn)
        else:
            logger.debug("Tool %s not configured, using mvn from PATH",
                         mvn_version)
        self.context.runner.run([mvn] + args)
