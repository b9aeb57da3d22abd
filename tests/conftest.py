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

"""Let pytest expand testscenarios-based test cases.

pytest does not honour the ``load_tests`` protocol testscenarios relies on,
so every class carrying ``scenarios`` is collected as one subclass per
scenario, with that scenario's attributes applied.
"""

import unittest

from _pytest.unittest import UnitTestCase


def pytest_pycollect_makeitem(collector, name, obj):
    if not (isinstance(obj, type) and issubclass(obj, unittest.TestCase)):
        return None
    scenarios = getattr(obj, 'scenarios', None)
    if scenarios is None:
        return None
    items = []
    for scenario_name, attrs in scenarios:
        attrs = dict(attrs)
        # the scenario is already applied; stop testscenarios re-expanding
        attrs['scenarios'] = None
        cls = type(obj.__name__, (obj,), attrs)
        cls.__qualname__ = obj.__qualname__
        cls.__module__ = obj.__module__
        item = UnitTestCase.from_parent(
            collector, name='{0}[{1}]'.format(name, scenario_name))
        item._obj = cls
        items.append(item)
    return items
