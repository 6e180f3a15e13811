from .constants import (
    NODE_RPC_PORT,
    SERVICE_APP_LABEL,
    NODE_ARGS,
    DEFAULT_IMAGE_PULL_POLICY,
    FORWARD_BIND_ADDRESS,
    FORWARD_BUFFER_SIZE,
    NOT_FOUND_STATUS,
    CONFLICT_STATUS,
)
