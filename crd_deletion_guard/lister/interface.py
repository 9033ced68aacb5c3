from typing import Any

from ..models import GroupVersionResource


class ResourceLister:
    def list(
        self,
        gvr: GroupVersionResource,
        limit: int,
        timeout_seconds: float | None = None,
    ) -> list[dict[str, Any]]:
        """
        Return up to `limit` live objects at `gvr` across all namespaces.
        Raise on any failure to reach or query the cluster.
        """
        raise NotImplementedError
