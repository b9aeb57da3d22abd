#!/usr/bin/env python
# Copyright (C) 2015 Hewlett-Packard Development Company, L.P.
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

# functions that don't fit in well elsewhere

import fnmatch
import glob
import os.path


def recurse_path(root, excludes=None):
    if excludes is None:
        excludes = []

    basepath = os.path.realpath(root)
    pathlist = [basepath]

    patterns = [e for e in excludes if os.path.sep not in e]
    absolute = [e for e in excludes if os.path.isabs(e)]
    relative = [e for e in excludes if os.path.sep in e and
                not os.path.isabs(e)]
    for root, dirs, files in os.walk(basepath, topdown=True):
        # sort in-place to ensure dirnames are visited in alphabetical order
        dirs.sort()
        dirs[:] = [
            d for d in dirs
            if not any([fnmatch.fnmatch(d, pattern) for pattern in patterns])
            if not any([fnmatch.fnmatch(os.path.abspath(os.path.join(root, d)),
                                        path)
                        for path in absolute])
            if not any([fnmatch.fnmatch(os.path.relpath(os.path.join(root, d)),
                                        path)
                        for path in relative])
        ]
        pathlist.extend([os.path.join(root, path) for path in dirs])

    return pathlist


def split_patterns(patterns):
    """Flatten a collection of comma-separated ant-style patterns."""
    if isinstance(patterns, str):
        patterns = [patterns]
    result = []
    for entry in patterns:
        result.extend(p.strip() for p in entry.split(',') if p.strip())
    return result


def find_files(patterns, root='.'):
    """Return the sorted, unique list of files below root matching any of the
    given ant-style patterns, as paths relative to root.

    A trailing ``/**`` selects everything below a directory; ``**`` elsewhere
    matches any number of directories.
    """
    found = set()
    for pattern in split_patterns(patterns):
        if pattern.endswith('/**'):
            pattern += '/*'
        for match in glob.glob(os.path.join(root, pattern), recursive=True,
                               include_hidden=True):
            if os.path.isfile(match):
                found.add(os.path.relpath(match, root))
    return sorted(found)
