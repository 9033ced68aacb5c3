"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: MIT-0
"""
import logging
import sys
from typing import Sequence

from flask import Flask
from kubernetes.config import ConfigException

from . import config
from .config import Settings
from .lister.interface import ResourceLister
from .lister.kubernetes_lister import KubernetesLister, load_api_client
from .routes import create_routes
from .validator import DeletionValidator

log = logging.getLogger("crd-deletion-guard")


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    # Keep client library chatter out of the webhook log
    for name in ("kubernetes", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app(settings: Settings, lister: ResourceLister) -> Flask:
    app = Flask(__name__)
    validator = DeletionValidator(lister, settings.crds)
    app.register_blueprint(create_routes(settings, validator))
    return app


def build_lister(settings: Settings) -> ResourceLister:
    """Construct the cluster lister; exit the process if that is impossible."""
    try:
        api_client = load_api_client(settings.kubeconfig)
    except ConfigException as e:
        log.error("error building kubernetes config: %s", e)
        sys.exit(1)
    except Exception:
        log.error("error creating kubernetes client", exc_info=True)
        sys.exit(1)
    return KubernetesLister(api_client)


def main(argv: Sequence[str] | None = None) -> None:
    settings = config.parse_args(argv)
    configure_logging(settings.log_debug)

    app = create_app(settings, build_lister(settings))

    if settings.crds:
        log.info("Guarding CRDs: %s", ", ".join(sorted(settings.crds)))
    else:
        log.info("Guarding all CRDs")
    log.info("Running on %d", config.PORT)
    try:
        app.run(
            host="0.0.0.0",
            port=config.PORT,
            ssl_context=(settings.cert_file, settings.key_file),
            threaded=True,
        )
    except Exception:
        log.error("failed to start server", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
