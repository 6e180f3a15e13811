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
Global pytest configuration for chaostest-k8s tests.

The fake APIs below keep resources in memory and mimic the status codes the
Kubernetes API server answers with, so controller tests never need a cluster.
Failures can be queued on `create_failures` to simulate rejected requests.
"""

from types import SimpleNamespace

import pytest
from kubernetes.client import (
    V1DeploymentCondition,
    V1DeploymentStatus,
    V1ObjectMeta,
    V1Pod,
    V1PodStatus,
)
from kubernetes.client.rest import ApiException

from chaostest_k8s.deployment import DeploymentConfiguration, ResourceController


def _conflict():
    return ApiException(status=409, reason="Conflict")


def _not_found():
    return ApiException(status=404, reason="Not Found")


class FakeCoreV1Api:
    def __init__(self):
        self.namespaces = set()
        self.services = {}
        self.pods = []
        self.calls = []
        self.create_failures = []
        self.delete_failures = []

    def create_namespace(self, body):
        name = body["metadata"]["name"]
        self.calls.append(("create_namespace", name))
        if name in self.namespaces:
            raise _conflict()
        self.namespaces.add(name)
        return SimpleNamespace(metadata=SimpleNamespace(name=name))

    def read_namespace(self, name):
        self.calls.append(("read_namespace", name))
        if name not in self.namespaces:
            raise _not_found()
        return SimpleNamespace(metadata=SimpleNamespace(name=name))

    def delete_namespace(self, name):
        self.calls.append(("delete_namespace", name))
        if name not in self.namespaces:
            raise _not_found()
        self.namespaces.discard(name)
        return {}

    def create_namespaced_service(self, namespace, body):
        name = body["metadata"]["name"]
        self.calls.append(("create_namespaced_service", namespace, name))
        if self.create_failures:
            raise self.create_failures.pop(0)
        if (namespace, name) in self.services:
            raise _conflict()
        self.services[(namespace, name)] = body
        return body

    def delete_namespaced_service(self, name, namespace):
        self.calls.append(("delete_namespaced_service", namespace, name))
        if self.delete_failures:
            raise self.delete_failures.pop(0)
        if (namespace, name) not in self.services:
            raise _not_found()
        del self.services[(namespace, name)]
        return {}

    def create_namespaced_pod(self, namespace, body):
        self.calls.append(("create_namespaced_pod", namespace, body["metadata"]["name"]))
        self.pods.append((namespace, body))
        return body

    def list_namespaced_pod(self, namespace):
        self.calls.append(("list_namespaced_pod", namespace))
        return SimpleNamespace(
            items=[pod for ns, pod in self.pods if ns == namespace]
        )

    def add_pod(self, namespace, name, pod_ip=None):
        """Register a pod as the scheduler would report it."""
        pod = V1Pod(
            metadata=V1ObjectMeta(name=name, namespace=namespace),
            status=V1PodStatus(pod_ip=pod_ip),
        )
        self.pods.append((namespace, pod))
        return pod


class FakeAppsV1Api:
    def __init__(self):
        self.deployments = {}
        self.statuses = {}
        self.calls = []
        self.create_failures = []

    def create_namespaced_deployment(self, namespace, body):
        name = body["metadata"]["name"]
        self.calls.append(("create_namespaced_deployment", namespace, name))
        if self.create_failures:
            raise self.create_failures.pop(0)
        if (namespace, name) in self.deployments:
            raise _conflict()
        self.deployments[(namespace, name)] = body
        return body

    def delete_namespaced_deployment(self, name, namespace):
        self.calls.append(("delete_namespaced_deployment", namespace, name))
        if (namespace, name) not in self.deployments:
            raise _not_found()
        del self.deployments[(namespace, name)]
        self.statuses.pop((namespace, name), None)
        return {}

    def read_namespaced_deployment_status(self, name, namespace):
        self.calls.append(("read_namespaced_deployment_status", namespace, name))
        if (namespace, name) not in self.deployments:
            raise _not_found()
        return SimpleNamespace(
            metadata=SimpleNamespace(name=name),
            status=self.statuses.get((namespace, name)),
        )

    def set_conditions(self, namespace, name, *conditions):
        self.statuses[(namespace, name)] = V1DeploymentStatus(
            conditions=[
                V1DeploymentCondition(type=type_, status=status)
                for type_, status in conditions
            ]
        )

    def image_of(self, namespace, name):
        body = self.deployments[(namespace, name)]
        return body["spec"]["template"]["spec"]["containers"][0]["image"]


@pytest.fixture(autouse=True)
def reset_auth_state(monkeypatch):
    """Ensure no test leaks an authenticated client into another."""
    monkeypatch.setattr("chaostest_k8s.common.kubernetes_cluster.auth.api_client", None)
    monkeypatch.setattr("chaostest_k8s.common.kubernetes_cluster.auth.config_path", None)


@pytest.fixture()
def core_api():
    return FakeCoreV1Api()


@pytest.fixture()
def apps_api():
    return FakeAppsV1Api()


@pytest.fixture()
def controller(core_api, apps_api):
    return ResourceController(
        config=DeploymentConfiguration(run_id="abc123"),
        core_api=core_api,
        apps_api=apps_api,
    )
