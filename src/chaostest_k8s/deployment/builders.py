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
Spec builders for the node resources.

These functions only construct the documents submitted to the Kubernetes API.
They perform no API calls, so the controller can build a body once and submit
it again unchanged when a create has to be retried.
"""

from typing import Any, Dict

from ..common.utils.constants import NODE_ARGS, NODE_RPC_PORT, SERVICE_APP_LABEL
from .status import NodeSpec


def build_namespace(name: str) -> Dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Namespace",
        "metadata": {"name": name},
    }


def build_service(port: int, service_name: str) -> Dict[str, Any]:
    """
    Build a NodePort service exposing the node RPC port on `port` of every node.
    """
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {
            "name": service_name,
            "labels": {"app": SERVICE_APP_LABEL},
        },
        "spec": {
            "type": "NodePort",
            "selector": {"app": SERVICE_APP_LABEL},
            "ports": [
                {
                    "name": "http",
                    "port": NODE_RPC_PORT,
                    "targetPort": NODE_RPC_PORT,
                    "nodePort": port,
                    "protocol": "TCP",
                }
            ],
        },
    }


def build_deployment(image: str, deployment_name: str, run_label: str) -> Dict[str, Any]:
    """
    Build a single replica Deployment running a dev node.

    `run_label` is used as the selector, the pod template label and the
    container name, so each run only ever matches its own pods.
    """
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": deployment_name,
            "labels": {"app": run_label},
        },
        "spec": {
            "replicas": 1,
            "selector": {"matchLabels": {"app": run_label}},
            "template": {
                "metadata": {"labels": {"app": run_label}},
                "spec": {
                    "containers": [
                        {
                            "name": run_label,
                            "image": image,
                            "ports": [{"containerPort": NODE_RPC_PORT}],
                            "args": list(NODE_ARGS),
                        }
                    ]
                },
            },
        },
    }


def build_pod(node: NodeSpec, image_pull_policy: str) -> Dict[str, Any]:
    return {
        "metadata": {
            "labels": {"app": node.label},
            "name": node.node_id,
        },
        "spec": {
            "containers": [
                {
                    "image": node.image,
                    "imagePullPolicy": image_pull_policy,
                    "name": node.node_id,
                    "ports": list(node.ports),
                    "args": list(node.args),
                }
            ]
        },
    }
