import argparse
import dataclasses
import os
from dataclasses import dataclass, field
from typing import Sequence

# The API server is configured to call the webhook on this port.
PORT = 8443


def _get_env(name: str, default: str) -> str:
    val = os.getenv(name)
    return val if val is not None and val != "" else default


def _parse_int(name: str, default: int) -> int:
    val = _get_env(name, str(default))
    try:
        parsed = int(val)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_bool(name: str, default: bool) -> bool:
    val = _get_env(name, "").lower()
    if val in ("1", "true", "yes"):
        return True
    if val in ("0", "false", "no"):
        return False
    return default


def _parse_names(name: str) -> frozenset[str]:
    val = _get_env(name, "")
    return frozenset(n.strip() for n in val.split(",") if n.strip())


@dataclass(frozen=True)
class Settings:
    kubeconfig: str = ""  # empty means in-cluster config
    cert_file: str = "/cert/cert"
    key_file: str = "/cert/key"
    log_debug: bool = False
    # CRD names to guard; empty guards every CRD
    crds: frozenset[str] = field(default_factory=frozenset)
    list_timeout_seconds: int = 10


def load() -> Settings:
    return Settings(
        kubeconfig=_get_env("KUBECONFIG_PATH", ""),
        cert_file=_get_env("TLS_CERT_FILE", "/cert/cert"),
        key_file=_get_env("TLS_KEY_FILE", "/cert/key"),
        log_debug=_parse_bool("LOG_DEBUG", False),
        crds=_parse_names("CRDS"),
        list_timeout_seconds=_parse_int("LIST_TIMEOUT_SECONDS", 10),
    )


def parse_args(argv: Sequence[str] | None = None, base: Settings | None = None) -> Settings:
    """
    Overlay command-line flags on top of the environment settings.
    Each --crds occurrence adds one name to the filter.
    """
    base = base if base is not None else load()

    parser = argparse.ArgumentParser(
        description="Validating webhook that blocks deletion of CRDs that still have instances"
    )
    parser.add_argument(
        "--kubeconfig",
        default=base.kubeconfig,
        help="Path to kubeconfig file, e.g. ~/.kube/kind-config-kind (default: in-cluster)",
    )
    parser.add_argument(
        "--cert-file", default=base.cert_file, help="Path to certificate file to serve TLS"
    )
    parser.add_argument(
        "--key-file", default=base.key_file, help="Path to key file to serve TLS"
    )
    parser.add_argument(
        "--log-debug",
        action="store_true",
        default=base.log_debug,
        help="Enable debug logging",
    )
    parser.add_argument(
        "--crds",
        action="append",
        default=[],
        metavar="NAME",
        help="CRD to block deletion of, e.g. 'prometheuses.monitoring.coreos.com'. "
        "Repeatable. Default blocks all CRDs.",
    )
    parser.add_argument(
        "--list-timeout",
        type=int,
        default=base.list_timeout_seconds,
        help="Upper bound in seconds for the instance lookup",
    )
    args = parser.parse_args(argv)

    crds = frozenset(args.crds) if args.crds else base.crds
    return dataclasses.replace(
        base,
        kubeconfig=args.kubeconfig,
        cert_file=args.cert_file,
        key_file=args.key_file,
        log_debug=args.log_debug,
        crds=crds,
        list_timeout_seconds=max(1, args.list_timeout),
    )
