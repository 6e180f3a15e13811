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
The config sub-module contains the definition of the DeploymentConfiguration
dataclass, which carries the per-run settings passed in when creating a
ResourceController.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..common.utils.constants import DEFAULT_IMAGE_PULL_POLICY, SERVICE_APP_LABEL

RUN_ID_ENV = "CI_COMMIT_SHORT_SHA"
KEEP_NAMESPACE_ENV = "KEEP_NAMESPACE"

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class DeploymentConfiguration:
    """
    This dataclass holds the settings a test run threads into the controller.

    Args:
        run_id:
            Suffix appended to the node label so deployments from different
            runs do not select each other's pods.
        keep_namespace:
            When True, namespace teardown is skipped and reported as successful.
        image_pull_policy:
            Pull policy applied to bare pods.
    """

    run_id: str = ""
    keep_namespace: bool = False
    image_pull_policy: str = DEFAULT_IMAGE_PULL_POLICY

    def __post_init__(self):
        if not isinstance(self.run_id, str):
            raise TypeError(
                f"'run_id' should be of type str, got {type(self.run_id).__name__}"
            )
        if not isinstance(self.keep_namespace, bool):
            raise TypeError(
                f"'keep_namespace' should be of type bool, got {type(self.keep_namespace).__name__}"
            )

    @property
    def run_label(self) -> str:
        return SERVICE_APP_LABEL + self.run_id

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "DeploymentConfiguration":
        """
        Build a configuration from the CI environment.

        `KEEP_NAMESPACE` is read as a boolean flag, so "1", "true", "yes" and
        "on" (any case) keep the namespace after teardown.
        """
        if environ is None:
            environ = os.environ
        keep = environ.get(KEEP_NAMESPACE_ENV, "").strip().lower() in _TRUTHY
        return cls(run_id=environ.get(RUN_ID_ENV, ""), keep_namespace=keep)
