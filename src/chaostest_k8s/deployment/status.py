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
The status sub-module defines the dataclasses exchanged with callers: the
projection of a deployment condition and the spec of a bare node pod.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

AVAILABLE_CONDITION = "Available"


def _field(obj: Any, name: str, default=None):
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


@dataclass
class DeploymentCondition:
    """
    For storing one entry of a Deployment's status.conditions list.
    """

    type: str
    status: str
    reason: Optional[str] = None
    message: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.type == AVAILABLE_CONDITION and self.status == "True"

    @classmethod
    def from_api(cls, condition: Any) -> "DeploymentCondition":
        """Project a V1DeploymentCondition (or its dict form) onto this dataclass."""
        return cls(
            type=_field(condition, "type"),
            status=_field(condition, "status"),
            reason=_field(condition, "reason"),
            message=_field(condition, "message"),
        )


@dataclass
class NodeSpec:
    """
    For describing a single bare node pod.

    Attributes:
        label: Value of the pod's `app` label
        node_id: Pod name, also used as the container name
        image: Container image
        args: Container arguments
        ports: Container ports, as V1ContainerPort objects or dicts
    """

    label: str
    node_id: str
    image: str
    args: List[str] = field(default_factory=list)
    ports: List[Union[Dict[str, Any], Any]] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, spec: Mapping[str, Any]) -> "NodeSpec":
        """Accept either snake_case keys or the `nodeId` form used by test harnesses."""
        node_id = spec.get("node_id", spec.get("nodeId"))
        if node_id is None:
            raise ValueError("node spec requires a 'nodeId'")
        return cls(
            label=spec["label"],
            node_id=node_id,
            image=spec["image"],
            args=list(spec.get("args") or []),
            ports=list(spec.get("ports") or []),
        )
