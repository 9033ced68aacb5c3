import pytest

from crd_deletion_guard.helpers import (
	effective_timeout,
	parse_timeout,
	resolve_gvr,
	should_check_crd,
)
from crd_deletion_guard.models import CRDSpec, CRDVersion, GroupVersionResource


def spec(*versions, group="example.com", plural="widgets") -> CRDSpec:
	return CRDSpec(
		group=group,
		plural=plural,
		versions=tuple(CRDVersion(name, served, storage) for name, served, storage in versions),
	)


@pytest.mark.parametrize(
	"versions,expected",
	[
		# served + storage after a served-only version
		([("v1", True, False), ("v2", True, True)], "v2"),
		# first served + storage wins, even if a later one is marked too
		([("v1", True, True), ("v2", True, True)], "v1"),
		([("v1alpha1", False, False), ("v1", True, True), ("v2", True, False)], "v1"),
		# no storage among served versions -> last served
		([("v1", True, False), ("v2", True, False), ("v3", False, True)], "v2"),
		([("v1", True, False)], "v1"),
		# nothing served -> empty
		([("v1", False, True), ("v2", False, False)], ""),
		([], ""),
	],
)
def test_resolve_gvr_version(versions, expected):
	assert resolve_gvr(spec(*versions)).version == expected


def test_resolve_gvr_group_and_resource():
	gvr = resolve_gvr(spec(("v1", True, True), group="monitoring.coreos.com", plural="prometheuses"))
	assert gvr == GroupVersionResource("monitoring.coreos.com", "v1", "prometheuses")


def test_resolve_gvr_storage_not_served_is_skipped():
	# storage alone does not stop the scan; the version must also be served
	gvr = resolve_gvr(spec(("v1", False, True), ("v2", True, False)))
	assert gvr.version == "v2"


def test_should_check_crd():
	assert should_check_crd("widgets.example.com", frozenset())
	assert should_check_crd("widgets.example.com", frozenset({"widgets.example.com"}))
	assert not should_check_crd("gadgets.example.com", frozenset({"widgets.example.com"}))


@pytest.mark.parametrize(
	"value,expected",
	[
		("10s", 10.0),
		("30s", 30.0),
		("1m30s", 90.0),
		("500ms", 0.5),
		("1h", 3600.0),
		("2.5s", 2.5),
		(None, None),
		("", None),
		("10", None),
		("abc", None),
		("10x", None),
		("0s", None),
	],
)
def test_parse_timeout(value, expected):
	assert parse_timeout(value) == expected


def test_effective_timeout_caps_requested_deadline():
	assert effective_timeout("30s", 10) == 10.0
	assert effective_timeout("5s", 10) == 5.0
	assert effective_timeout(None, 10) == 10.0
	assert effective_timeout("bogus", 7) == 7.0
