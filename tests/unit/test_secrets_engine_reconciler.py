"""Tests for the secrets engine reconciler."""

import json

import pytest

from vaultsync.reconcilers import MountTypeMismatchError, ReconcilerFactory, SecretsEngineReconciler
from vaultsync.resources import AwsRole, AwsSecretsEngine, GcpRoleSet, GcpSecretsEngine
from vaultsync.tasks import DeleteReviewQueue, WritePool


@pytest.fixture
def pool(backend):
    with WritePool(backend, workers=2) as pool:
        yield pool


@pytest.fixture
def review(backend):
    return DeleteReviewQueue(backend, confirm=lambda message: False)


@pytest.fixture
def reconciler(backend, pool, review):
    return ReconcilerFactory.create("secrets_engines", backend, pool, review)


def aws(overwrite=False, roles=("deploy",)):
    return AwsSecretsEngine.from_dict(
        "aws",
        {
            "mount": {"description": "AWS", "config": {"max_lease_ttl": "24h"}},
            "root_config": {"access_key": "AKIA", "secret_key": "s"},
            "config_lease": {"lease": "30m", "lease_max": "1h"},
            "overwrite_root_config": overwrite,
        },
        roles={name: AwsRole(policy='{"Version": "2012-10-17"}') for name in roles},
    )


def gcp(overwrite=False):
    return GcpSecretsEngine.from_dict(
        "gcp",
        {
            "root_config": {"credentials": {"private_key_id": "k1"}},
            "config_lease": {"ttl": "1h", "max_ttl": "2h"},
            "overwrite_root_config": overwrite,
        },
        rolesets={"viewer": GcpRoleSet.from_dict({
            "project": "p",
            "bindings": [{"resource": "//r", "roles": ["roles/viewer"]}],
        })},
    )


def declare(*engines):
    return {engine.path: engine for engine in engines}


class TestAwsEngine:
    """Tests for AWS engine reconciliation."""

    def test_factory_creates_engine_reconciler(self, reconciler):
        # Assert
        assert isinstance(reconciler, SecretsEngineReconciler)

    def test_new_mount_gets_root_config(self, backend, pool, reconciler):
        """Should write root credentials when the mount was just enabled."""
        # Act
        reconciler.apply(declare(aws()))
        pool.wait()

        # Assert
        assert backend.enabled == [("aws/", "aws")]
        assert backend.written("aws/config/root") == [{"access_key": "AKIA", "secret_key": "s"}]
        assert backend.written("aws/config/lease") == [{"lease": "30m", "lease_max": "1h"}]
        assert backend.written("aws/roles/deploy") == [{"policy": '{"Version": "2012-10-17"}'}]

    def test_existing_mount_keeps_root_config(self, backend, pool, reconciler):
        """Should not overwrite root credentials on an existing mount."""
        # Arrange
        backend.add_mount("aws/", "aws")

        # Act
        reconciler.apply(declare(aws()))
        pool.wait()

        # Assert
        assert backend.enabled == []
        assert backend.written("aws/config/root") == []
        assert backend.written("aws/config/lease") == [{"lease": "30m", "lease_max": "1h"}]
        assert backend.written("sys/mounts/aws/tune") == [
            {"max_lease_ttl": "24h", "description": "AWS"}
        ]

    def test_overwrite_flag_forces_root_config(self, backend, pool, reconciler):
        # Arrange
        backend.add_mount("aws/", "aws")

        # Act
        reconciler.apply(declare(aws(overwrite=True)))
        pool.wait()

        # Assert
        assert backend.written("aws/config/root") == [{"access_key": "AKIA", "secret_key": "s"}]

    def test_type_mismatch_is_fatal(self, backend, reconciler):
        # Arrange
        backend.add_mount("aws/", "kv")

        # Act & Assert
        with pytest.raises(MountTypeMismatchError):
            reconciler.apply(declare(aws()))

    def test_cleanup_proposes_undeclared_roles(self, backend, review, reconciler):
        # Arrange
        backend.add_mount("aws/", "aws")
        backend.data["aws/roles/deploy"] = {}
        backend.data["aws/roles/legacy"] = {}

        # Act
        reconciler.cleanup(declare(aws()))

        # Assert
        assert [task.path for task in review.pending] == ["aws/roles/legacy"]
        assert review.pending[0].description == "AWS role [aws/roles/legacy]"

    def test_cleanup_proposes_undeclared_managed_mounts_only(self, backend, review, reconciler):
        """Should ignore kv, system and other unmanaged mounts."""
        # Arrange
        backend.add_mount("aws/", "aws")
        backend.add_mount("aws-old/", "aws")
        backend.add_mount("gcp-old/", "gcp")
        backend.add_mount("kv1/", "kv", version="1")

        # Act
        reconciler.cleanup(declare(aws()))

        # Assert
        assert [task.path for task in review.pending] == [
            "sys/mounts/aws-old/",
            "sys/mounts/gcp-old/",
        ]

    def test_verify_reports_mismatch_without_mutation(self, backend, reconciler):
        # Arrange
        backend.add_mount("aws/", "kv")

        # Act & Assert
        with pytest.raises(MountTypeMismatchError):
            reconciler.verify(declare(aws()))
        assert backend.enabled == []
        assert backend.writes == []

    def test_verify_accepts_absent_and_matching_mounts(self, backend, reconciler):
        # Arrange
        backend.add_mount("aws/", "aws")

        # Act
        reconciler.verify(declare(aws(), gcp()))

        # Assert
        assert backend.writes == []


class TestGcpEngine:
    """Tests for GCP engine reconciliation."""

    def test_new_mount_writes_single_config(self, backend, pool, reconciler):
        """Should merge lease and credentials into one config write."""
        # Act
        reconciler.apply(declare(gcp()))
        pool.wait()

        # Assert
        (config,) = backend.written("gcp/config")
        assert config["ttl"] == "1h"
        assert config["max_ttl"] == "2h"
        assert json.loads(config["credentials"]) == {"private_key_id": "k1"}

        (roleset,) = backend.written("gcp/roleset/viewer")
        assert roleset["project"] == "p"
        assert 'resource "//r"' in roleset["bindings"]

    def test_existing_mount_omits_credentials(self, backend, pool, reconciler):
        # Arrange
        backend.add_mount("gcp/", "gcp")

        # Act
        reconciler.apply(declare(gcp()))
        pool.wait()

        # Assert
        assert backend.written("gcp/config") == [{"ttl": "1h", "max_ttl": "2h"}]

    def test_cleanup_proposes_undeclared_rolesets(self, backend, review, reconciler):
        # Arrange
        backend.add_mount("gcp/", "gcp")
        backend.data["gcp/rolesets/viewer"] = {}
        backend.data["gcp/rolesets/editor"] = {}

        # Act
        reconciler.cleanup(declare(gcp()))

        # Assert
        assert [task.path for task in review.pending] == ["gcp/roleset/editor"]
