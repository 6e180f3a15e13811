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
Pod lookup for running nodes.

Every call lists the namespace again; nothing is cached between calls.
"""

import logging
from typing import List, Optional

from kubernetes import client

from ..common.kubernetes_cluster.auth import config_check, get_api_client
from ..common.kubernetes_cluster.kube_api_helpers import (
    PodNotReadyError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)


class PodLocator:
    """
    Resolves a node id to its scheduled pod by listing pods in a namespace.
    """

    def __init__(self, core_api: Optional[client.CoreV1Api] = None):
        if core_api is None:
            config_check()
            core_api = client.CoreV1Api(get_api_client())
        self.core_api = core_api

    def list_pods(self, namespace: str) -> List[client.V1Pod]:
        response = self.core_api.list_namespaced_pod(namespace)
        return list(response.items or [])

    def get_pod(self, node_id: str, namespace: str) -> client.V1Pod:
        """
        Return the first pod named `node_id` that has been assigned an IP.

        Raises:
            PodNotReadyError: The pod exists but has no pod IP yet.
            ResourceNotFoundError: No pod with that name exists.
        """
        seen_unscheduled = False
        for pod in self.list_pods(namespace):
            if pod.metadata is None or pod.metadata.name != node_id:
                continue
            if pod.status is not None and pod.status.pod_ip:
                return pod
            seen_unscheduled = True

        if seen_unscheduled:
            logger.debug(f"Pod {node_id} in {namespace} is not scheduled yet")
            raise PodNotReadyError(node_id, namespace)
        raise ResourceNotFoundError("Pod", node_id, namespace)
