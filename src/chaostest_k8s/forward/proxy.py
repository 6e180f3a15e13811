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
Local TCP forwarding into a pod.

This is the equivalent of `kubectl port-forward pod/<pod> <port>`:

    localhost:<port> -> port-forward tunnel -> <pod>:<port>

Each accepted connection gets its own tunnel and is relayed by two threads,
one per direction. When either direction reaches end of stream or fails, both
sockets are shut down and the session ends. There is no reconnect; the local
peer connects again if it needs to.
"""

import functools
import logging
import socket
import socketserver
import threading
from typing import Callable, Optional, Tuple

from kubernetes import client

from ..common.kubernetes_cluster.auth import config_check, get_api_client
from ..common.utils.constants import FORWARD_BIND_ADDRESS, FORWARD_BUFFER_SIZE
from .tunnel import open_pod_tunnel

logger = logging.getLogger(__name__)

TunnelFactory = Callable[[str, str, int], socket.socket]


def _pipe(source: socket.socket, sink: socket.socket, done: threading.Event):
    try:
        while True:
            data = source.recv(FORWARD_BUFFER_SIZE)
            if not data:
                break
            sink.sendall(data)
    except OSError as e:
        logger.debug(f"Relay stopped: {e}")
    finally:
        done.set()


def _shutdown(sock: socket.socket):
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # already disconnected
        pass


def splice(local: socket.socket, remote: socket.socket):
    """
    Copy bytes both ways between two connected sockets until either side ends.
    """
    done = threading.Event()
    workers = [
        threading.Thread(target=_pipe, args=(local, remote, done), daemon=True),
        threading.Thread(target=_pipe, args=(remote, local, done), daemon=True),
    ]
    for worker in workers:
        worker.start()
    done.wait()
    _shutdown(local)
    _shutdown(remote)
    for worker in workers:
        worker.join()


class _ForwardRequestHandler(socketserver.BaseRequestHandler):
    server: "ForwardServer"

    def handle(self):
        server = self.server
        target = f"{server.namespace}/{server.pod_name}:{server.port}"
        try:
            tunnel = server.tunnel_factory(server.namespace, server.pod_name, server.port)
        except Exception as e:
            logger.error(f"Opening tunnel to {target} for {self.client_address} failed: {e}")
            return

        logger.debug(f"Relaying {self.client_address} to {target}")
        try:
            splice(self.request, tunnel)
        finally:
            tunnel.close()
            logger.debug(f"Closed session {self.client_address} to {target}")


class ForwardServer(socketserver.ThreadingTCPServer):
    """
    Listener forwarding every accepted connection to one pod port.

    Attributes:
        namespace: Namespace of the target pod
        pod_name: Name of the target pod
        port: Container port connections are tunneled to
        tunnel_factory: Callable opening a tunnel for (namespace, pod_name, port)
    """

    daemon_threads = True
    allow_reuse_address = True

    def __init__(
        self,
        server_address: Tuple[str, int],
        namespace: str,
        pod_name: str,
        port: int,
        tunnel_factory: TunnelFactory,
    ):
        self.namespace = namespace
        self.pod_name = pod_name
        self.port = port
        self.tunnel_factory = tunnel_factory
        self._serve_thread: Optional[threading.Thread] = None
        super().__init__(server_address, _ForwardRequestHandler)

    @property
    def address(self) -> Tuple[str, int]:
        return self.server_address[:2]

    def start(self):
        self._serve_thread = threading.Thread(
            target=self.serve_forever,
            name=f"forward {self.namespace}/{self.pod_name}:{self.port}",
            daemon=True,
        )
        self._serve_thread.start()

    def shutdown(self):
        """
        Stop accepting connections and close the listener.

        Sessions already relaying keep running until one of their sockets closes.
        """
        if self._serve_thread is not None:
            super().shutdown()
            self._serve_thread.join()
            self._serve_thread = None
        self.server_close()

    def __exit__(self, *args):
        self.shutdown()


def start_forward_server(
    namespace: str,
    pod_name: str,
    port: int,
    on_ready: Optional[Callable[[], None]] = None,
    core_api: Optional[client.CoreV1Api] = None,
    tunnel_factory: Optional[TunnelFactory] = None,
    local_port: Optional[int] = None,
    bind_address: str = FORWARD_BIND_ADDRESS,
) -> ForwardServer:
    """
    Start forwarding a loopback port to `pod_name:port` inside `namespace`.

    Args:
        namespace: Namespace of the target pod.
        pod_name: Name of the target pod.
        port: Container port to reach. Also the local port unless `local_port` is given.
        on_ready: Called once, after the listener is bound and accepting.
        core_api: CoreV1Api used to open port-forward tunnels.
        tunnel_factory: Replaces the port-forward tunnel, mainly for tests.
        local_port: Local port to listen on; 0 picks a free port.
        bind_address: Local address to bind, loopback by default.

    Returns:
        The running ForwardServer.
    """
    if tunnel_factory is None:
        if core_api is None:
            config_check()
            core_api = client.CoreV1Api(get_api_client())
        tunnel_factory = functools.partial(open_pod_tunnel, core_api)

    if local_port is None:
        local_port = port

    server = ForwardServer(
        (bind_address, local_port), namespace, pod_name, port, tunnel_factory
    )
    server.start()
    logger.info("Forwarding server started, ready to connect")
    if on_ready is not None:
        try:
            on_ready()
        except BaseException:
            server.shutdown()
            raise
    return server
