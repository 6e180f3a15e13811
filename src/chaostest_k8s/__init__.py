from .deployment import (
    DeploymentConfiguration,
    DeploymentCondition,
    NodeSpec,
    ResourceController,
    PodLocator,
    wait_for_deployment_available,
)

from .forward import (
    ForwardServer,
    start_forward_server,
)

from .common import (
    config_check,
    get_api_client,
    load_kube_config,
    ResourceNotFoundError,
    PodNotReadyError,
    NamespaceTerminatedError,
)

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("chaostest-k8s")  # use metadata associated with built package

except PackageNotFoundError:
    __version__ = "v0.0.0"
