import re
from typing import Any

from .models import (
    DEFAULT_ADMISSION_API_VERSION,
    AdmissionResponseModel,
    CRDSpec,
    GroupVersionResource,
    StatusModel,
)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def resolve_gvr(spec: CRDSpec) -> GroupVersionResource:
    """
    Pick the version to list instances with: the first served version that is
    also the storage version, otherwise the last served version. If nothing is
    served the version is left empty and the list call fails downstream.
    """
    version = ""
    for v in spec.versions:
        if v.served:
            version = v.name
            if v.storage:
                break
    return GroupVersionResource(group=spec.group, version=version, resource=spec.plural)


def should_check_crd(name: str, crds: frozenset[str]) -> bool:
    """An empty filter guards every CRD."""
    if not crds:
        return True
    return name in crds


def failure_response(message: str) -> AdmissionResponseModel:
    return AdmissionResponseModel(
        allowed=False,
        result=StatusModel(message=message, causes=[message]),
    )


def make_admission_review(
    response: AdmissionResponseModel, api_version: str = DEFAULT_ADMISSION_API_VERSION
) -> dict[str, Any]:
    """Wrap a response in the AdmissionReview envelope the API server expects back."""
    return {
        "apiVersion": api_version,
        "kind": "AdmissionReview",
        "response": response.to_dict(),
    }


def parse_timeout(value: str | None) -> float | None:
    """
    Parse the Go duration the API server puts in the webhook's ?timeout= query
    parameter (e.g. "10s", "1m30s", "500ms"). Returns seconds, or None if absent
    or malformed.
    """
    if not value:
        return None
    pos = 0
    total = 0.0
    for m in _DURATION_PART.finditer(value):
        if m.start() != pos:
            return None
        total += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()
    if pos != len(value) or total <= 0:
        return None
    return total


def effective_timeout(requested: str | None, limit_seconds: float) -> float:
    """Cap the caller's deadline by the configured lookup timeout."""
    timeout = parse_timeout(requested)
    if timeout is None:
        return float(limit_seconds)
    return min(timeout, float(limit_seconds))
