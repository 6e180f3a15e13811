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
Streaming tunnels to a pod port over the Kubernetes port-forward API.
"""

import logging
import socket
import threading

from kubernetes import client
from kubernetes.stream import portforward

logger = logging.getLogger(__name__)

# portforward swaps call_api on the shared ApiClient while the websocket opens.
_handshake_lock = threading.Lock()


def open_pod_tunnel(
    core_api: client.CoreV1Api, namespace: str, pod_name: str, port: int
) -> socket.socket:
    """
    Open a port-forward websocket to `pod_name:port` and return its local socket.

    Bytes written to the returned socket reach the container port and bytes the
    container sends can be read from it. Closing the socket ends the tunnel.
    Handshakes are serialized so concurrent connections never leave the client
    patched.
    """
    with _handshake_lock:
        forward = portforward(
            core_api.connect_get_namespaced_pod_portforward,
            pod_name,
            namespace,
            ports=str(port),
        )
    tunnel = forward.socket(port)
    tunnel.setblocking(True)
    logger.debug(f"Opened tunnel to {namespace}/{pod_name}:{port}")
    return tunnel
