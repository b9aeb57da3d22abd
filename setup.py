# Copyright (C) 2020 EGit Committers and others.
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

import os

import setuptools


def parse_requirements(filename):
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), filename)
    with open(path) as f:
        return [line.strip() for line in f
                if line.strip() and not line.startswith('#')]


requires = parse_requirements('requirements.txt')
test_requires = parse_requirements('test-requirements.txt')


setuptools.setup(
    name='egit-pipeline',
    version='6.0.0',
    author='EGit Committers',
    author_email='egit-dev@eclipse.org',
    description='Run the EGit Jenkins pipelines from YAML definitions',
    license='Apache License, Version 2.0',
    url='https://github.com/eclipse-egit/egit-pipelines',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=requires,
    extras_require={'test': test_requires},
    python_requires='>=3.11',
    zip_safe=False,
    classifiers=[
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
    ],
    entry_points={
        'console_scripts': [
            'egit-pipeline=egit_pipeline.cli.entry:main',
        ],
        'egit_pipeline.cli.subcommands': [
            'build=egit_pipeline.cli.subcommand.build:BuildSubCommand',
            'test=egit_pipeline.cli.subcommand.test:TestSubCommand',
            'list=egit_pipeline.cli.subcommand.list:ListSubCommand',
            'resolve=egit_pipeline.cli.subcommand.resolve:ResolveSubCommand',
            'publish=egit_pipeline.cli.subcommand.publish:PublishSubCommand',
            'triggers='
            'egit_pipeline.cli.subcommand.triggers:TriggersSubCommand',
        ],
        'egit_pipeline.recipes': [
            'verify-build=egit_pipeline.recipes.verify_build:VerifyBuild',
            'product-build=egit_pipeline.recipes.product_build:ProductBuild',
            'egit-product-build=egit_pipeline.recipes.presets:'
            'EgitProductBuild',
            'egit-github-product-build=egit_pipeline.recipes.presets:'
            'EgitGithubProductBuild',
            'egit-github-verify-build=egit_pipeline.recipes.presets:'
            'EgitGithubVerifyBuild',
        ],
    }
)
