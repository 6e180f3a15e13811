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
Caller-side helpers built on top of the ResourceController.
"""

import logging
from time import sleep
from typing import TYPE_CHECKING, Optional

from .status import DeploymentCondition

if TYPE_CHECKING:  # pragma: no cover
    from .controller import ResourceController

logger = logging.getLogger(__name__)


def wait_for_deployment_available(
    controller: "ResourceController",
    deployment_name: str,
    namespace: str,
    timeout: Optional[int] = 300,
    interval: float = 2,
) -> DeploymentCondition:
    """
    Poll the deployment until its Available condition reports "True".

    Args:
        controller: The controller used to read the deployment status.
        deployment_name: Name of the deployment to wait for.
        namespace: Namespace of the deployment.
        timeout: Maximum time to wait in seconds. If None, waits indefinitely.
        interval: Seconds to sleep between two status reads.

    Returns:
        The Available condition once it is satisfied.

    Raises:
        TimeoutError: If timeout is reached before the deployment is available.
        ResourceNotFoundError: If the deployment does not exist.
    """
    logger.info(f"Waiting for deployment {deployment_name} to become available...")
    time_elapsed = 0.0

    while True:
        condition = controller.get_deployment_status(deployment_name, namespace)
        if condition is not None and condition.is_available:
            logger.info(f"Deployment {deployment_name} is available")
            return condition
        if timeout is not None and time_elapsed >= timeout:
            raise TimeoutError(
                f"timed out after waiting {timeout}s for deployment {deployment_name} to be available"
            )
        sleep(interval)
        time_elapsed += interval
