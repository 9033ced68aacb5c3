import json
import logging

from flask import Blueprint, Response, request

from .config import Settings
from .helpers import effective_timeout, failure_response, make_admission_review
from .models import AdmissionReviewModel, best_effort_uid
from .validator import DeletionValidator

log = logging.getLogger("crd-deletion-guard")

_TEXT = {"Content-Type": "text/plain; charset=utf-8"}


def create_routes(settings: Settings, validator: DeletionValidator) -> Blueprint:
    bp = Blueprint("webhook", __name__)

    @bp.route("/healthz", methods=["GET"])
    def healthz():
        return "OK", 200, _TEXT

    @bp.route("/validate", methods=["POST"])
    def validate():
        """
        Validating webhook: handle CRD DELETE, denying while instances remain.
        """
        body = request.get_data()
        if not body:
            log.info("request has no body")
            return "request has no body", 400, _TEXT

        content_type = request.headers.get("Content-Type", "")
        if content_type != "application/json":
            log.info("invalid Content-Type expected `application/json`, actual=%s", content_type)
            return "invalid Content-Type, want `application/json`", 415, _TEXT

        log.debug("received request content=%s", body.decode("utf-8", "replace"))

        try:
            payload = json.loads(body)
        except ValueError:
            payload = None
        admission = AdmissionReviewModel.from_dict(payload)

        if admission is None:
            log.error("unable to deserialize request")
            resp = failure_response("Unable to deserialize request")
            resp.uid = best_effort_uid(payload)
            review = make_admission_review(resp)
        else:
            timeout = effective_timeout(
                request.args.get("timeout"), settings.list_timeout_seconds
            )
            resp = validator.decide(admission.request, timeout_seconds=timeout)
            resp.uid = admission.request.uid
            review = make_admission_review(resp, admission.api_version)

        try:
            resp_bytes = json.dumps(review)
        except (TypeError, ValueError) as e:
            log.error("could not serialize response: %s", e)
            return f"could not serialize response: {e}", 500, _TEXT

        log.debug("sending response content=%s", resp_bytes)
        return Response(resp_bytes, status=200, mimetype="application/json")

    return bp
