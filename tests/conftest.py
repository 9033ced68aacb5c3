from typing import Any

import pytest

from crd_deletion_guard.app import create_app
from crd_deletion_guard.config import Settings


class FakeLister:
	def __init__(self, items=None, error: Exception | None = None):
		self.items = items or []
		self.error = error
		self.calls: list[dict[str, Any]] = []

	def list(self, gvr, limit, timeout_seconds=None):
		self.calls.append({"gvr": gvr, "limit": limit, "timeout_seconds": timeout_seconds})
		if self.error is not None:
			raise self.error
		return self.items[:limit]


@pytest.fixture()
def settings():
	return Settings()


@pytest.fixture()
def lister():
	return FakeLister()


@pytest.fixture()
def app(settings, lister):
	app = create_app(settings, lister)
	app.config.update({"TESTING": True})
	yield app


@pytest.fixture()
def client(app):
	return app.test_client()
