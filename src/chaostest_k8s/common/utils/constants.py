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
Constants shared by the deployment and forwarding modules.
"""

# RPC port exposed by every substrate node container.
NODE_RPC_PORT = 9933

# Label value matched by the NodePort service selector.
SERVICE_APP_LABEL = "substrate-node"

NODE_ARGS = ["--dev", "--rpc-external", "--ws-external"]

DEFAULT_IMAGE_PULL_POLICY = "Always"

FORWARD_BIND_ADDRESS = "127.0.0.1"
FORWARD_BUFFER_SIZE = 65536

NOT_FOUND_STATUS = 404
CONFLICT_STATUS = 409
