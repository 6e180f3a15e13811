from .proxy import (
    ForwardServer,
    splice,
    start_forward_server,
)

from .tunnel import open_pod_tunnel
