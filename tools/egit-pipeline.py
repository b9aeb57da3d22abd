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

# Runs egit-pipeline from a source checkout. Subcommands and recipes are
# stevedore plugins, so the package metadata must still be available, for
# example through "pip install -e .".

import os
import sys
sys.path.insert(0, os.path.abspath('.'))

from egit_pipeline.cli import entry  # noqa: E402

entry.main()
