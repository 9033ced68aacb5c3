"""
Minimal models for the Kubernetes AdmissionReview envelope and the parts of a
CustomResourceDefinition this webhook reads.
Unknown fields are ignored so that new Kubernetes fields don't break the app.

References:
- AdmissionReview request/response shape:
  https://kubernetes.io/docs/reference/access-authn-authz/extensible-admission-controllers/#request-and-response
- CustomResourceDefinition (apiextensions.k8s.io/v1) API reference:
  https://kubernetes.io/docs/reference/kubernetes-api/extend-resources/custom-resource-definition-v1/
"""

from dataclasses import dataclass, field
from typing import Any, Optional

ADMISSION_API_VERSIONS = ("admission.k8s.io/v1", "admission.k8s.io/v1beta1")
DEFAULT_ADMISSION_API_VERSION = "admission.k8s.io/v1"

# Denials are reported as a conflict with the current cluster state.
DENIAL_CODE = 409
DENIAL_REASON = "Invalid"


class DecodeError(ValueError):
    """A field in a decoded payload has the wrong JSON type."""


class CRDParseError(DecodeError):
    """The embedded oldObject could not be read as a CustomResourceDefinition."""


def _field(
    d: dict[str, Any], key: str, kind: type, default, error: type[DecodeError] = DecodeError
):
    # Strict getter: a missing key or null takes the default, a wrong type is an error
    v = d.get(key)
    if v is None:
        return default
    if not isinstance(v, kind):
        raise error(f"{key}: expected {kind.__name__}, got {type(v).__name__}")
    return v


@dataclass(frozen=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


@dataclass(frozen=True)
class CRDVersion:
    name: str
    served: bool
    storage: bool


@dataclass(frozen=True)
class CRDSpec:
    group: str
    plural: str
    versions: tuple[CRDVersion, ...]

    @staticmethod
    def from_object(obj: Any) -> "CRDSpec":
        if not isinstance(obj, dict):
            raise CRDParseError("oldObject is not a JSON object")
        spec = _field(obj, "spec", dict, {}, CRDParseError)
        names = _field(spec, "names", dict, {}, CRDParseError)
        raw_versions = _field(spec, "versions", list, [], CRDParseError)

        versions = []
        for v in raw_versions:
            if v is None:
                v = {}
            if not isinstance(v, dict):
                raise CRDParseError("versions: expected a list of objects")
            versions.append(
                CRDVersion(
                    name=_field(v, "name", str, "", CRDParseError),
                    served=_field(v, "served", bool, False, CRDParseError),
                    storage=_field(v, "storage", bool, False, CRDParseError),
                )
            )

        return CRDSpec(
            group=_field(spec, "group", str, "", CRDParseError),
            plural=_field(names, "plural", str, "", CRDParseError),
            versions=tuple(versions),
        )


@dataclass
class AdmissionRequestModel:
    uid: str
    resource_group: str
    resource_version: str
    resource: str
    name: str
    operation: str
    old_object: Any = None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> Optional["AdmissionRequestModel"]:
        if not isinstance(d, dict):
            return None
        # A field of the wrong type fails the whole envelope, like a schema decode would
        try:
            res = _field(d, "resource", dict, {})
            return AdmissionRequestModel(
                uid=_field(d, "uid", str, ""),
                resource_group=_field(res, "group", str, ""),
                resource_version=_field(res, "version", str, ""),
                resource=_field(res, "resource", str, ""),
                name=_field(d, "name", str, ""),
                operation=_field(d, "operation", str, ""),
                old_object=d.get("oldObject"),
            )
        except DecodeError:
            return None


@dataclass
class AdmissionReviewModel:
    api_version: str
    request: AdmissionRequestModel

    @staticmethod
    def from_dict(d: Any) -> Optional["AdmissionReviewModel"]:
        if not isinstance(d, dict):
            return None
        if d.get("kind") != "AdmissionReview":
            return None
        api_version = d.get("apiVersion")
        if api_version not in ADMISSION_API_VERSIONS:
            return None
        req = AdmissionRequestModel.from_dict(d.get("request"))
        if req is None:
            return None
        return AdmissionReviewModel(api_version=api_version, request=req)


def best_effort_uid(d: Any) -> str:
    """Pull request.uid out of a payload that failed to decode, or return ''."""
    if not isinstance(d, dict):
        return ""
    req = d.get("request")
    if not isinstance(req, dict):
        return ""
    uid = req.get("uid")
    return uid if isinstance(uid, str) else ""


@dataclass
class StatusModel:
    message: str
    reason: str = DENIAL_REASON
    code: int = DENIAL_CODE
    status: str = "Failure"
    causes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "reason": self.reason,
            "code": self.code,
            "message": self.message,
            "details": {"causes": [{"message": c} for c in self.causes]},
        }


@dataclass
class AdmissionResponseModel:
    allowed: bool
    uid: str = ""
    result: StatusModel | None = None

    def to_dict(self) -> dict[str, Any]:
        resp: dict[str, Any] = {"uid": self.uid, "allowed": self.allowed}
        if self.result is not None:
            # AdmissionResponse.Result is serialized as "status" on the wire
            resp["status"] = self.result.to_dict()
        return resp
