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
Lifecycle operations for the test node resources.

The ResourceController creates and tears down the namespace, NodePort service,
node deployment and bare node pods of a test run, and exposes a single-shot
read of the deployment's availability. Polling is left to the caller.
"""

import logging
from typing import Any, List, Mapping, Optional, Set, Union

from kubernetes import client
from kubernetes.client.rest import ApiException

from ..common.kubernetes_cluster.auth import config_check, get_api_client
from ..common.kubernetes_cluster.kube_api_helpers import (
    NamespaceTerminatedError,
    ResourceNotFoundError,
    describe_api_error,
    is_conflict,
    is_not_found,
)
from .builders import build_deployment, build_namespace, build_pod, build_service
from .config import DeploymentConfiguration
from .locator import PodLocator
from .status import AVAILABLE_CONDITION, DeploymentCondition, NodeSpec

logger = logging.getLogger(__name__)


class ResourceController:
    """
    Creates, deletes and reports on the Kubernetes resources of a test run.

    Service and Deployment creation recover from a leftover resource of the
    same name by deleting it and creating once more. A second failure is
    raised to the caller; there is never more than one retry.

    Args:
        config: Per-run settings. Defaults to an empty DeploymentConfiguration.
        core_api: CoreV1Api used for namespaces, services and pods.
        apps_api: AppsV1Api used for deployments.
    """

    def __init__(
        self,
        config: Optional[DeploymentConfiguration] = None,
        core_api: Optional[client.CoreV1Api] = None,
        apps_api: Optional[client.AppsV1Api] = None,
    ):
        self.config = config if config is not None else DeploymentConfiguration()
        if core_api is None or apps_api is None:
            config_check()
            api_client = get_api_client()
            core_api = core_api or client.CoreV1Api(api_client)
            apps_api = apps_api or client.AppsV1Api(api_client)
        self.core_api = core_api
        self.apps_api = apps_api
        self.locator = PodLocator(core_api=core_api)
        self._terminated_namespaces: Set[str] = set()

    def _ensure_open(self, namespace: str):
        if namespace in self._terminated_namespaces:
            raise NamespaceTerminatedError(namespace)

    # -------------------------------------------------------------------------
    # Namespaces
    # -------------------------------------------------------------------------

    def create_namespace(self, name: str) -> client.V1Namespace:
        """
        Create the namespace of a test run.

        Name conflicts are not handled here; a fresh name is expected per run.
        """
        self._ensure_open(name)
        namespace = self.core_api.create_namespace(build_namespace(name))
        logger.info(f"Created namespace {name}")
        return namespace

    def read_namespace(self, name: str) -> client.V1Namespace:
        try:
            return self.core_api.read_namespace(name)
        except ApiException as e:
            if is_not_found(e):
                raise ResourceNotFoundError("Namespace", name) from e
            raise

    def delete_namespace(self, namespace: str):
        """
        Delete the namespace unless the configuration keeps it.

        The namespace is marked torn down before the delete call is issued, so
        this controller refuses further creates in it even when the delete
        fails or the namespace is kept.
        """
        logger.info(f"Taking down NameSpace {namespace}...")
        self._terminated_namespaces.add(namespace)
        if self.config.keep_namespace:
            logger.info(f"Keeping namespace {namespace}")
            return None
        return self.core_api.delete_namespace(namespace)

    # -------------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------------

    def create_service(self, port: int, namespace: str, service_name: str):
        """
        Create the NodePort service, replacing any service of the same name.

        Any failure of the first create (name taken, node port allocated, ...)
        triggers a best-effort delete followed by exactly one more create.
        """
        self._ensure_open(namespace)
        body = build_service(port, service_name)
        try:
            return self.core_api.create_namespaced_service(namespace, body)
        except Exception as e:
            logger.warning(
                f"Creating service {service_name} in {namespace} failed, recreating it: "
                f"{describe_api_error(e)}"
            )

        try:
            self.core_api.delete_namespaced_service(service_name, namespace)
        except Exception as e:
            logger.debug(f"Ignoring failed delete of service {service_name}: {e}")
        return self.core_api.create_namespaced_service(namespace, body)

    def delete_service(self, service_name: str, namespace: str):
        logger.info("Taking down Service...")
        return self.core_api.delete_namespaced_service(service_name, namespace)

    # -------------------------------------------------------------------------
    # Deployments
    # -------------------------------------------------------------------------

    def create_deployment(self, image: str, namespace: str, deployment_name: str):
        """
        Create the node deployment.

        Only a conflict (HTTP 409) means a deployment from a previous run was
        left behind; it is deleted and the create is retried once. Any other
        status is raised unchanged and nothing is deleted.
        """
        self._ensure_open(namespace)
        body = build_deployment(image, deployment_name, self.config.run_label)
        try:
            return self.apps_api.create_namespaced_deployment(namespace, body)
        except ApiException as e:
            if not is_conflict(e):
                logger.error(
                    f"Creating deployment {deployment_name} in {namespace} failed: "
                    f"{describe_api_error(e)}"
                )
                raise
            logger.warning(
                f"Deployment {deployment_name} already exists in {namespace}, recreating it"
            )

        self.apps_api.delete_namespaced_deployment(deployment_name, namespace)
        return self.apps_api.create_namespaced_deployment(namespace, body)

    def get_deployment_status(
        self, deployment_name: str, namespace: str
    ) -> Optional[DeploymentCondition]:
        """
        Read the deployment's "Available" condition.

        Returns:
            The Available condition, or None when the deployment has not
            reported it yet.

        Raises:
            ResourceNotFoundError: The deployment does not exist.
        """
        try:
            deployment = self.apps_api.read_namespaced_deployment_status(
                deployment_name, namespace
            )
        except ApiException as e:
            if is_not_found(e):
                raise ResourceNotFoundError(
                    "Deployment", deployment_name, namespace
                ) from e
            raise

        status = deployment.status
        if status is None or not status.conditions:
            return None
        for condition in status.conditions:
            if condition.type == AVAILABLE_CONDITION:
                return DeploymentCondition.from_api(condition)
        return None

    def delete_deployment(self, deployment_name: str, namespace: str):
        logger.info("Taking down Deployment...")
        return self.apps_api.delete_namespaced_deployment(deployment_name, namespace)

    # -------------------------------------------------------------------------
    # Pods
    # -------------------------------------------------------------------------

    def create_pod(self, node_spec: Union[NodeSpec, Mapping[str, Any]], namespace: str):
        """
        Create a bare node pod. The caller picks a distinct node id per attempt.
        """
        self._ensure_open(namespace)
        if not isinstance(node_spec, NodeSpec):
            node_spec = NodeSpec.from_mapping(node_spec)
        body = build_pod(node_spec, self.config.image_pull_policy)
        return self.core_api.create_namespaced_pod(namespace, body)

    def list_pods(self, namespace: str) -> List[client.V1Pod]:
        return self.locator.list_pods(namespace)

    def get_pod(self, node_id: str, namespace: str) -> client.V1Pod:
        return self.locator.get_pod(node_id, namespace)
