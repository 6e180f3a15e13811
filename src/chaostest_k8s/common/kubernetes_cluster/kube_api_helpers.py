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
This sub-module exists primarily to be used internally for Kubernetes API
error classification and the error types raised by the deployment helpers.

API failures that are not translated here (conflicts that survive a retry and
every other rejected request) propagate to the caller as the original
`kubernetes.client.ApiException`, so status, reason and body stay intact.
"""

import json
from typing import Optional

from ..utils.constants import CONFLICT_STATUS, NOT_FOUND_STATUS


ERROR_MESSAGES = {
    401: "Access to the API is unauthorized.\n"
    "Check your credentials or permissions.",
    403: "Access denied:\n"
    "Ensure your role has sufficient permissions and that you are logged in to the correct cluster.",
    404: "The requested resource could not be located.\n"
    "Please verify the resource name and namespace.",
    409: "A resource with the same name already exists in the namespace.",
    422: "The request was rejected because something in the resource definition is invalid.",
}

ERROR_MESSAGES_FALLBACK = "An error occurred while communicating with the cluster."


class ResourceNotFoundError(LookupError):
    """
    Raised when a namespace, deployment or pod is absent from the cluster.
    """

    def __init__(self, kind: str, name: str, namespace: Optional[str] = None):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        if namespace:
            message = f"{kind} '{name}' is not present in namespace '{namespace}'"
        else:
            message = f"{kind} '{name}' is not present in the cluster"
        super().__init__(message)


class PodNotReadyError(ResourceNotFoundError):
    """
    Raised when a pod exists but has not been assigned an IP address yet.
    """

    def __init__(self, name: str, namespace: str):
        super().__init__("Pod", name, namespace)
        self.args = (f"Pod '{name}' in namespace '{namespace}' has no pod IP yet",)


class NamespaceTerminatedError(RuntimeError):
    """
    Raised when a resource is created in a namespace already marked for deletion.
    """

    def __init__(self, namespace: str):
        self.namespace = namespace
        super().__init__(
            f"Namespace '{namespace}' has been torn down, no resources may be created in it"
        )


def api_status(e: Exception) -> Optional[int]:
    """Return the HTTP status code carried by an API failure, if any."""
    return getattr(e, "status", None)


def is_conflict(e: Exception) -> bool:
    return api_status(e) == CONFLICT_STATUS


def is_not_found(e: Exception) -> bool:
    return api_status(e) == NOT_FOUND_STATUS


def _format_api_error_body(body) -> str:
    """
    Extract a short, readable detail from a Kubernetes Status API response body.
    Returns a single line like "Details: <message>" instead of raw JSON.
    """
    if not body:
        return ""
    try:
        raw = body.decode() if isinstance(body, bytes) else body
        data = json.loads(raw)
        msg = data.get("message")
        if not msg:
            return ""
        return f"Details: {msg}"
    except (json.JSONDecodeError, AttributeError, TypeError):
        return f"Response: {body}"


def describe_api_error(e: Exception) -> str:
    """
    Build a log-friendly description of an API failure.

    Known status codes map to a fixed explanation; the response body message is
    appended when present, otherwise the reason and status are shown.
    """
    status_code = api_status(e)
    if status_code is None:
        return f"{type(e).__name__}: {e}"

    message = ERROR_MESSAGES.get(status_code, ERROR_MESSAGES_FALLBACK)
    detail = _format_api_error_body(getattr(e, "body", None))
    if detail:
        return f"{message}\n{detail}"
    return f"{message}\nReason: {getattr(e, 'reason', None)} (HTTP {status_code})."
