from datetime import UTC, datetime
from pathlib import Path

import pytest

from kubeintel.infra.k8s import ClientGateway, ClusterContext, MutationOps
from tests.fakes import FakeClusterBackend

FIXED_TIME = datetime(2024, 5, 1, 12, 30, 0, tzinfo=UTC)


@pytest.fixture
def ctx() -> ClusterContext:
    return ClusterContext(Path("/a/b"), "ctx")


@pytest.fixture
def backend() -> FakeClusterBackend:
    return FakeClusterBackend(namespaces=["shop", "default", "kube-system"])


@pytest.fixture
def gateway(backend: FakeClusterBackend) -> ClientGateway:
    return ClientGateway(backend)


@pytest.fixture
def mutations(backend: FakeClusterBackend) -> MutationOps:
    return MutationOps(backend, clock=lambda: FIXED_TIME)


