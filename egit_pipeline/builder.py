#!/usr/bin/env python
# Copyright (C) 2012 OpenStack, LLC.
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

# Trigger downstream jobs on a Jenkins server

import logging

import jenkins
import requests

__all__ = [
    "JenkinsManager"
]

logger = logging.getLogger(__name__)


class JenkinsManager(object):

    def __init__(self, pipeline_config):
        url = pipeline_config.jenkins['url']
        user = pipeline_config.jenkins['user']
        password = pipeline_config.jenkins['password']
        timeout = pipeline_config.jenkins['timeout']

        self.url = url
        self.jenkins = None
        if url is None:
            return
        if timeout is not None:
            self.jenkins = jenkins.Jenkins(url, user, password, timeout)
        else:
            self.jenkins = jenkins.Jenkins(url, user, password)

    def trigger_build(self, job_name, parameters=None):
        """Queue a build of job_name without waiting for it. Failures are
        logged and do not affect the calling build.

        :returns: the queue item number, or None if nothing was queued
        """
        if self.jenkins is None:
            logger.warning("No [jenkins] url configured, not triggering "
                           "downstream job {0}".format(job_name))
            return None
        logger.info("Triggering downstream job {0} with {1}".format(
            job_name, parameters))
        try:
            return self.jenkins.build_job(job_name, parameters)
        except (jenkins.JenkinsException,
                requests.exceptions.RequestException, OSError) as e:
            logger.warning("Unable to trigger downstream job {0} on {1}: "
                           "{2}".format(job_name, self.url, e))
            return None
