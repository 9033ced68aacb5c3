import logging

from .helpers import failure_response, resolve_gvr, should_check_crd
from .lister.interface import ResourceLister
from .models import (
    AdmissionRequestModel,
    AdmissionResponseModel,
    CRDParseError,
    CRDSpec,
)

log = logging.getLogger("crd-deletion-guard")

CRD_GROUP = "apiextensions.k8s.io"
CRD_RESOURCE = "customresourcedefinitions"


class DeletionValidator:
    """
    Decide whether a CRD may be deleted: deny while at least one instance of
    the custom resource it defines is still stored in the cluster.
    """

    def __init__(self, lister: ResourceLister, crds: frozenset[str] = frozenset()) -> None:
        self._lister = lister
        self._crds = frozenset(crds)

    def decide(
        self, req: AdmissionRequestModel, timeout_seconds: float | None = None
    ) -> AdmissionResponseModel:
        """Return the response for one request. The caller sets the uid."""
        if req.resource_group != CRD_GROUP:
            log.info(
                "expected resource to be %s, actual=%s/%s",
                CRD_GROUP,
                req.resource_group,
                req.resource_version,
            )
            return failure_response("Unexpected resource kind")

        if req.resource != CRD_RESOURCE:
            log.info("expected resource to be %s, actual=%s", CRD_RESOURCE, req.resource)
            return failure_response("Unexpected resource kind")

        if not should_check_crd(req.name, self._crds):
            log.debug("CRD %s not in filter; allowing delete", req.name)
            return AdmissionResponseModel(allowed=True)

        try:
            crd = CRDSpec.from_object(req.old_object)
        except CRDParseError as e:
            log.error("cannot unmarshal CRD from spec: %s oldObject=%r", e, req.old_object)
            return failure_response("Cannot unmarshal CRD from spec")

        gvr = resolve_gvr(crd)
        try:
            items = self._lister.list(gvr, limit=1, timeout_seconds=timeout_seconds)
        except Exception:
            # Fail closed: an unknown instance count blocks the delete
            log.error("unable to get list of existing CRDs schema=%s", gvr, exc_info=True)
            return failure_response("Unable to get list of existing CRDs")

        if items:
            log.debug(
                "at least one resource exists name=%s operation=%s", req.name, req.operation
            )
            return failure_response(f"There are still some {req.name} in the cluster")

        log.debug("found none, allowing %s name=%s", req.operation, req.name)
        return AdmissionResponseModel(allowed=True)
