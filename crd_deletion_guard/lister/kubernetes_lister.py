from typing import Any

from kubernetes import client, config

from ..models import GroupVersionResource
from .interface import ResourceLister


def load_api_client(kubeconfig: str = "") -> client.ApiClient:
    """
    Build an ApiClient from the given kubeconfig, or from the in-cluster
    service account when the path is empty. Raises ConfigException.
    """
    if kubeconfig:
        return config.new_client_from_config(config_file=kubeconfig)
    config.load_incluster_config()
    return client.ApiClient()


class KubernetesLister(ResourceLister):
    def __init__(self, api_client: client.ApiClient) -> None:
        # CustomObjectsApi holds no per-call state; one instance serves all requests
        self._api = client.CustomObjectsApi(api_client)

    def list(
        self,
        gvr: GroupVersionResource,
        limit: int,
        timeout_seconds: float | None = None,
    ) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {"limit": limit}
        if timeout_seconds is not None:
            kwargs["_request_timeout"] = timeout_seconds
        resp = self._api.list_cluster_custom_object(
            gvr.group, gvr.version, gvr.resource, **kwargs
        )
        return resp.get("items") or []
