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

# Recipes preconfigured for the EGit family of projects.

from egit_pipeline.recipes.product_build import ProductBuild
from egit_pipeline.recipes.verify_build import VerifyBuild


class EgitProductBuild(ProductBuild):
    """EGit product build, against the matching JGit version."""

    DEFAULTS = dict(ProductBuild.DEFAULTS, **{
        'timeout': 60,
        'repo-path': 'egit/egit',
        'upstream-repo-path': 'jgit',
        'upstream-repo': 'jgit',
        'p2-project': 'org.eclipse.egit.repository',
        'p2-zip': 'org.eclipse.egit.repository-*.zip',
        'publish-root': 'egit',
        'jdk': 'adoptopenjdk-hotspot-jdk8-latest',
    })


class EgitGithubProductBuild(ProductBuild):
    """EGit-GitHub product build against the EGit version given by the
    ``EGIT_VERSION`` build parameter, which EGit product builds pass on to
    their downstream job; without it the EGit version is resolved.
    """

    DEFAULTS = dict(ProductBuild.DEFAULTS, **{
        'timeout': 30,
        'repo-path': 'egit/egit-github',
        'upstream-repo-path': 'egit',
        'upstream-repo': 'egit',
        'upstream-version': '{EGIT_VERSION|}',
        'p2-project': 'org.eclipse.egit.github.repository',
        'p2-zip': 'org.eclipse.egit.github.repository-*.zip',
        'publish-root': 'egit/github',
    })


class EgitGithubVerifyBuild(VerifyBuild):

    DEFAULTS = dict(VerifyBuild.DEFAULTS, **{
        'timeout': 30,
        'repo-path': 'egit/egit-github',
        'upstream-repo-path': 'egit',
        'upstream-repo': 'egit',
        'upstream-version': '{EGIT_VERSION|}',
        'p2-project': 'org.eclipse.mylyn.github-site',
    })
