from unittest import mock

import pytest
from kubernetes.client.rest import ApiException

from crd_deletion_guard.lister import kubernetes_lister
from crd_deletion_guard.lister.kubernetes_lister import KubernetesLister, load_api_client
from crd_deletion_guard.models import GroupVersionResource

GVR = GroupVersionResource("example.com", "v2", "widgets")


@pytest.fixture()
def custom_api():
	with mock.patch.object(kubernetes_lister.client, "CustomObjectsApi") as mock_cls:
		api = mock.Mock()
		mock_cls.return_value = api
		yield api


def test_list_passes_gvr_limit_and_timeout(custom_api):
	custom_api.list_cluster_custom_object.return_value = {"items": [{"metadata": {"name": "w1"}}]}

	items = KubernetesLister(mock.Mock()).list(GVR, limit=1, timeout_seconds=4.0)

	assert items == [{"metadata": {"name": "w1"}}]
	custom_api.list_cluster_custom_object.assert_called_once_with(
		"example.com", "v2", "widgets", limit=1, _request_timeout=4.0
	)


def test_list_without_timeout(custom_api):
	custom_api.list_cluster_custom_object.return_value = {"items": []}

	assert KubernetesLister(mock.Mock()).list(GVR, limit=1) == []
	custom_api.list_cluster_custom_object.assert_called_once_with(
		"example.com", "v2", "widgets", limit=1
	)


def test_list_missing_items(custom_api):
	custom_api.list_cluster_custom_object.return_value = {"items": None}
	assert KubernetesLister(mock.Mock()).list(GVR, limit=1) == []


def test_list_propagates_api_errors(custom_api):
	custom_api.list_cluster_custom_object.side_effect = ApiException(status=404, reason="Not Found")
	with pytest.raises(ApiException):
		KubernetesLister(mock.Mock()).list(GVR, limit=1)


def test_load_api_client_from_kubeconfig():
	with mock.patch.object(kubernetes_lister.config, "new_client_from_config") as new_client:
		new_client.return_value = "api-client"
		assert load_api_client("/tmp/kubeconfig") == "api-client"
		new_client.assert_called_once_with(config_file="/tmp/kubeconfig")


def test_load_api_client_in_cluster():
	with mock.patch.object(kubernetes_lister.config, "load_incluster_config") as incluster, \
		 mock.patch.object(kubernetes_lister.client, "ApiClient") as api_client:
		api_client.return_value = "api-client"
		assert load_api_client("") == "api-client"
		incluster.assert_called_once_with()
