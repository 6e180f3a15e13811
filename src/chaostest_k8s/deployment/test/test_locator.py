# Copyright 2024 IBM, Red Hat
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
Tests for PodLocator.
"""

from types import SimpleNamespace

import pytest

from chaostest_k8s.common.kubernetes_cluster.kube_api_helpers import (
    PodNotReadyError,
    ResourceNotFoundError,
)
from chaostest_k8s.deployment import PodLocator


@pytest.fixture()
def locator(core_api):
    return PodLocator(core_api=core_api)


def test_list_pods_returns_every_pod_in_namespace(locator, core_api):
    core_api.add_pod("t1", "node-1", "10.0.0.1")
    core_api.add_pod("t1", "node-2")
    core_api.add_pod("other", "node-3", "10.0.0.3")

    names = [pod.metadata.name for pod in locator.list_pods("t1")]
    assert names == ["node-1", "node-2"]


def test_list_pods_empty(locator):
    assert locator.list_pods("t1") == []


def test_get_pod_prefers_scheduled_pod(locator, core_api):
    core_api.add_pod("t1", "node-1")
    core_api.add_pod("t1", "node-10", "10.0.0.10")
    scheduled = core_api.add_pod("t1", "node-1", "10.0.0.1")

    pod = locator.get_pod("node-1", "t1")
    assert pod is scheduled
    assert pod.status.pod_ip == "10.0.0.1"


def test_get_pod_not_found(locator, core_api):
    core_api.add_pod("t1", "node-10", "10.0.0.10")
    with pytest.raises(ResourceNotFoundError) as excinfo:
        locator.get_pod("node-1", "t1")
    assert not isinstance(excinfo.value, PodNotReadyError)
    assert excinfo.value.name == "node-1"


def test_get_pod_without_ip_is_not_ready(locator, core_api):
    core_api.add_pod("t1", "node-1")
    with pytest.raises(PodNotReadyError):
        locator.get_pod("node-1", "t1")
    # callers treating not-ready as absent can catch the base error
    with pytest.raises(ResourceNotFoundError):
        locator.get_pod("node-1", "t1")


def test_get_pod_skips_pods_without_metadata_or_status(locator, core_api):
    core_api.pods.append(("t1", SimpleNamespace(metadata=None, status=None)))
    core_api.pods.append(
        ("t1", SimpleNamespace(metadata=SimpleNamespace(name="node-1"), status=None))
    )
    with pytest.raises(PodNotReadyError):
        locator.get_pod("node-1", "t1")


def test_get_pod_lists_again_on_every_call(locator, core_api):
    core_api.add_pod("t1", "node-1")
    with pytest.raises(PodNotReadyError):
        locator.get_pod("node-1", "t1")

    core_api.pods.clear()
    core_api.add_pod("t1", "node-1", "10.0.0.1")
    assert locator.get_pod("node-1", "t1").status.pod_ip == "10.0.0.1"
    lists = [c for c in core_api.calls if c[0] == "list_namespaced_pod"]
    assert len(lists) == 2


def test_controller_delegates_to_locator(controller, core_api):
    core_api.add_pod("t1", "node-1", "10.0.0.1")
    assert len(controller.list_pods("t1")) == 1
    assert controller.get_pod("node-1", "t1").metadata.name == "node-1"
