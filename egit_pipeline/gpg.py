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

# Prepare the gpg keyring used to sign build artifacts.

import logging

__all__ = [
    "initialize_keyring",
    "list_fingerprints",
]

logger = logging.getLogger(__name__)

# answers to "gpg --edit-key <fpr> trust": ultimate trust, confirm
TRUST_ULTIMATELY = "5\ny\n"


def list_fingerprints(runner):
    output = runner.capture(['gpg', '--list-keys', '--with-colons'])
    fingerprints = set()
    for line in output.splitlines():
        fields = line.split(':')
        if fields[0] == 'fpr' and len(fields) > 9 and fields[9]:
            fingerprints.add(fields[9])
    return sorted(fingerprints)


def initialize_keyring(runner, keyring):
    """Import the secret subkeys in keyring and trust every key ultimately,
    so that maven-gpg-plugin can sign without asking.
    """
    runner.run(['gpg', '--batch', '--import', keyring])
    fingerprints = list_fingerprints(runner)
    for fpr in fingerprints:
        runner.run(['gpg', '--batch', '--command-fd', '0', '--expert',
                    '--edit-key', fpr, 'trust'], input=TRUST_ULTIMATELY)
    logger.info("Trusting %d keys", len(fingerprints))
    return fingerprints
