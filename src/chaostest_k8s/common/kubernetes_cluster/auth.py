# Copyright 2022 IBM, Red Hat
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
The auth sub-module loads cluster credentials and hands out the shared
Kubernetes API client used by the controller, locator and forward proxy.
"""

import logging
import os
from typing import Optional

from kubernetes import client, config

logger = logging.getLogger(__name__)

global api_client
api_client = None
global config_path
config_path = None


def load_kube_config(kube_config_path: str) -> str:
    """
    Load a user supplied Kubernetes config file instead of the default location.
    """
    global config_path
    global api_client

    try:
        config.load_kube_config(kube_config_path)
    except config.ConfigException as e:
        config_path = None
        raise PermissionError(
            f"Unable to load Kubernetes configuration from {kube_config_path}"
        ) from e
    config_path = kube_config_path
    api_client = None
    return "Loaded user config file at path %s" % kube_config_path


def config_check() -> Optional[str]:
    """
    Check and load the Kubernetes config from the default location.

    This function checks if a Kubernetes config file exists at the default path
    (`~/.kube/config`). If none is provided, it tries to load in-cluster config.
    If the `config_path` global variable was set by `load_kube_config`, that
    configuration is already loaded and used directly.

    Returns:
        str:
            The loaded config path if one was supplied, otherwise None.

    Raises:
        PermissionError:
            If no valid credentials or config file is found.
    """
    global config_path
    global api_client

    if api_client is not None:
        return config_path

    home_directory = os.path.expanduser("~")
    if config_path == None:
        if os.path.isfile("%s/.kube/config" % home_directory):
            config.load_kube_config()
        elif "KUBERNETES_PORT" in os.environ:
            config.load_incluster_config()
        else:
            raise PermissionError(
                "Action not permitted, have you put in correct/up-to-date auth credentials?"
            )
        logger.debug("Loaded default Kubernetes configuration")

    return config_path


def get_api_client() -> client.ApiClient:
    """
    Retrieve the Kubernetes API client with the default configuration.

    This function returns the current API client instance if already loaded,
    or creates a new API client with the default configuration.
    """
    if api_client != None:
        return api_client
    return client.ApiClient()


def set_api_client(new_client: Optional[client.ApiClient]):
    """
    Install an already authenticated client, e.g. one built by a test harness.
    """
    global api_client
    api_client = new_client
