# Importing everything from the kubernetes_cluster module
from .kubernetes_cluster import (
    config_check,
    get_api_client,
    load_kube_config,
    set_api_client,
    ResourceNotFoundError,
    PodNotReadyError,
    NamespaceTerminatedError,
    api_status,
    is_conflict,
    is_not_found,
    describe_api_error,
)
