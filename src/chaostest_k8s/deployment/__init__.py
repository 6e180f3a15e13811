from .config import DeploymentConfiguration

from .status import (
    DeploymentCondition,
    NodeSpec,
)

from .controller import ResourceController

from .locator import PodLocator

from .utils import wait_for_deployment_available
