"""Tests for resource loaders."""

import json
import logging

import pytest

from vaultsync.core.secrets import SecretResolver, SubstitutionIncompleteError, VaultKVSecretBackend
from vaultsync.loaders import (
    AuthMethodLoader,
    ConfigurationError,
    LoaderFactory,
    SecretsEngineLoader,
    UnsupportedFormatError,
    get_registered_loaders,
)
from vaultsync.resources import AwsSecretsEngine, GcpSecretsEngine

BASE = "secret/vaultsync/"


@pytest.fixture
def resolver(backend):
    return SecretResolver(VaultKVSecretBackend(backend), base_path=BASE)


GITHUB = {
    "auth_options": {"type": "github", "description": "GitHub auth"},
    "config": {"organization": "acme", "token": "%{github_token}%"},
}


class TestLoaderFactory:
    """Tests for LoaderFactory."""

    def test_registered_kinds(self):
        # Act
        loaders = get_registered_loaders()

        # Assert
        assert "auth_methods" in loaders
        assert "secrets_engines" in loaders

    def test_create_auth_loader(self, resolver):
        # Act
        loader = LoaderFactory.create("auth_methods", resolver)

        # Assert
        assert isinstance(loader, AuthMethodLoader)

    def test_unknown_kind_raises(self, resolver):
        # Act & Assert
        with pytest.raises(ValueError, match="Unknown resource kind"):
            LoaderFactory.create("policies", resolver)


class TestAuthMethodLoader:
    """Tests for AuthMethodLoader."""

    def test_load_substitutes_secrets(self, backend, resolver, config_root, write_config):
        """Should substitute from <base>auth_methods/<name>."""
        # Arrange
        write_config("auth_methods/github.json", GITHUB)
        backend.put_secret(BASE + "auth_methods/github", {"github_token": "ghp_123"})

        # Act
        declared = AuthMethodLoader(resolver).load(config_root)

        # Assert
        auth_method = declared["github/"]
        assert auth_method.type == "github"
        assert auth_method.options.description == "GitHub auth"
        assert auth_method.config == {"organization": "acme", "token": "ghp_123"}

    def test_missing_directory_is_empty(self, resolver, config_root):
        # Act & Assert
        assert AuthMethodLoader(resolver).load(config_root) == {}

    def test_unknown_extension_skipped(self, resolver, config_root, write_config, caplog):
        """Should warn about and ignore files without a .json extension."""
        # Arrange
        write_config("auth_methods/notes.txt", "not config")
        write_config("auth_methods/userpass.json", {"auth_options": {"type": "userpass"}})

        # Act
        with caplog.at_level(logging.WARNING):
            declared = AuthMethodLoader(resolver).load(config_root)

        # Assert
        assert list(declared) == ["userpass/"]
        assert "notes.txt" in caplog.text

    def test_yaml_file_is_fatal(self, resolver, config_root, write_config):
        """Should reject YAML configuration outright."""
        # Arrange
        write_config("auth_methods/github.yaml", "auth_options:\n  type: github\n")

        # Act & Assert
        with pytest.raises(UnsupportedFormatError):
            AuthMethodLoader(resolver).load(config_root)

    def test_name_collision_is_fatal(self, resolver, config_root, write_config):
        """Should reject two files mapping to the same logical name."""
        # Arrange
        write_config("auth_methods/github.json", GITHUB)
        write_config("auth_methods/github.JSON", GITHUB)

        # Act & Assert
        with pytest.raises(ConfigurationError, match="both declare"):
            AuthMethodLoader(resolver).load(config_root)

    def test_invalid_json_is_fatal(self, resolver, config_root, write_config):
        # Arrange
        write_config("auth_methods/broken.json", '{"auth_options": ')

        # Act & Assert
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            AuthMethodLoader(resolver).load(config_root)

    def test_invalid_json_after_substitution_is_fatal(
        self, backend, resolver, config_root, write_config
    ):
        """Should re-validate once secrets are substituted."""
        # Arrange
        write_config(
            "auth_methods/github.json",
            '{"auth_options": {"type": "github"}, "config": {"token": "%{token}%"}}',
        )
        backend.put_secret(BASE + "auth_methods/github", {"token": 'has"quote'})

        # Act & Assert
        with pytest.raises(ConfigurationError, match="after secret substitution"):
            AuthMethodLoader(resolver).load(config_root)

    def test_unresolved_placeholder_is_fatal(self, resolver, config_root, write_config):
        # Arrange
        write_config("auth_methods/github.json", GITHUB)

        # Act & Assert
        with pytest.raises(SubstitutionIncompleteError) as exc_info:
            AuthMethodLoader(resolver).load(config_root)
        assert exc_info.value.tokens == ["%{github_token}%"]

    def test_missing_type_is_fatal(self, resolver, config_root, write_config):
        # Arrange
        write_config("auth_methods/mystery.json", {"config": {}})

        # Act & Assert
        with pytest.raises(ConfigurationError, match="auth_options.type"):
            AuthMethodLoader(resolver).load(config_root)

    def test_certificate_file_inlined(self, resolver, config_root, write_config):
        """Should replace *_file keys with the referenced file's text."""
        # Arrange
        write_config("certs/k8s-ca.pem", "-----BEGIN CERTIFICATE-----\nabc\n")
        write_config("auth_methods/kubernetes.json", {
            "auth_options": {"type": "kubernetes"},
            "config": {
                "kubernetes_host": "https://k8s:6443",
                "kubernetes_ca_cert_file": "certs/k8s-ca.pem",
            },
        })

        # Act
        declared = AuthMethodLoader(resolver).load(config_root)

        # Assert
        config = declared["kubernetes/"].config
        assert "kubernetes_ca_cert_file" not in config
        assert config["kubernetes_ca_cert"] == "-----BEGIN CERTIFICATE-----\nabc\n"

    def test_unreadable_certificate_file_is_fatal(self, resolver, config_root, write_config):
        # Arrange
        write_config("auth_methods/kubernetes.json", {
            "auth_options": {"type": "kubernetes"},
            "config": {"kubernetes_ca_cert_file": "certs/missing.pem"},
        })

        # Act & Assert
        with pytest.raises(ConfigurationError, match="kubernetes_ca_cert_file"):
            AuthMethodLoader(resolver).load(config_root)


class TestSecretsEngineLoader:
    """Tests for SecretsEngineLoader."""

    def test_load_aws_engine_with_roles(self, backend, resolver, config_root, write_config):
        """Should substitute engine and role files from the engine's secret path."""
        # Arrange
        write_config("secrets-engines/aws-prod/aws.json", {
            "mount": {"description": "Prod AWS", "config": {"max_lease_ttl": "24h"}},
            "root_config": {"access_key": "%{access_key}%", "secret_key": "%{secret_key}%"},
            "config_lease": {"lease": "30m", "lease_max": "1h"},
        })
        policy = {"Version": "2012-10-17", "Statement": [{"Resource": "%{bucket_arn}%"}]}
        write_config("secrets-engines/aws-prod/roles/deploy.json", policy)
        backend.put_secret(BASE + "secrets-engines/aws-prod", {
            "access_key": "AKIA", "secret_key": "shh", "bucket_arn": "arn:aws:s3:::b",
        })

        # Act
        declared = SecretsEngineLoader(resolver).load(config_root)

        # Assert
        engine = declared["aws-prod/"]
        assert isinstance(engine, AwsSecretsEngine)
        assert engine.type == "aws"
        assert engine.options.description == "Prod AWS"
        assert engine.options.max_lease_ttl == "24h"
        assert engine.root_config.access_key == "AKIA"
        assert engine.config_lease.lease == "30m"
        assert json.loads(engine.roles["deploy"].policy)["Statement"][0]["Resource"] == "arn:aws:s3:::b"

    def test_load_gcp_engine_with_rolesets(self, resolver, config_root, write_config):
        # Arrange
        write_config("secrets-engines/gcp/gcp.json", {
            "root_config": {"credentials": {"type": "service_account", "project_id": "p"}},
            "config_lease": {"ttl": "1h"},
        })
        write_config("secrets-engines/gcp/rolesets/viewer.json", {
            "project": "p",
            "bindings": [{"resource": "//cloudresourcemanager.googleapis.com/projects/p",
                          "roles": ["roles/viewer"]}],
        })

        # Act
        declared = SecretsEngineLoader(resolver).load(config_root)

        # Assert
        engine = declared["gcp/"]
        assert isinstance(engine, GcpSecretsEngine)
        assert engine.root_config.credentials["project_id"] == "p"
        assert engine.rolesets["viewer"].bindings[0].roles == ("roles/viewer",)

    def test_directory_without_kind_file_is_fatal(self, resolver, config_root, write_config):
        # Arrange
        write_config("secrets-engines/empty/readme.txt", "nothing here")

        # Act & Assert
        with pytest.raises(ConfigurationError, match="exactly one"):
            SecretsEngineLoader(resolver).load(config_root)

    def test_directory_with_two_kind_files_is_fatal(self, resolver, config_root, write_config):
        # Arrange
        write_config("secrets-engines/both/aws.json", {})
        write_config("secrets-engines/both/gcp.json", {})

        # Act & Assert
        with pytest.raises(ConfigurationError, match="found 2"):
            SecretsEngineLoader(resolver).load(config_root)

    def test_yaml_kind_file_is_fatal(self, resolver, config_root, write_config):
        # Arrange
        write_config("secrets-engines/aws/aws.yml", "mount: {}\n")

        # Act & Assert
        with pytest.raises(UnsupportedFormatError):
            SecretsEngineLoader(resolver).load(config_root)

    def test_invalid_roleset_is_fatal(self, resolver, config_root, write_config):
        """Should reject a roleset without a project."""
        # Arrange
        write_config("secrets-engines/gcp/gcp.json", {})
        write_config("secrets-engines/gcp/rolesets/bad.json", {"bindings": []})

        # Act & Assert
        with pytest.raises(ConfigurationError, match="Error parsing"):
            SecretsEngineLoader(resolver).load(config_root)

    def test_mount_type_must_match_kind_file(self, resolver, config_root, write_config):
        """Should reject a mount block naming another engine type."""
        # Arrange
        write_config("secrets-engines/aws/aws.json", {"mount": {"type": "gcp"}})

        # Act & Assert
        with pytest.raises(ConfigurationError, match="does not match engine type 'aws'"):
            SecretsEngineLoader(resolver).load(config_root)

    def test_matching_mount_type_accepted(self, resolver, config_root, write_config):
        # Arrange
        write_config("secrets-engines/aws/aws.json", {"mount": {"type": "aws"}})

        # Act
        declared = SecretsEngineLoader(resolver).load(config_root)

        # Assert
        assert declared["aws/"].type == "aws"


class TestAuthMethodShape:
    """Tests for auth method shape validation."""

    def test_collection_must_be_object(self, resolver, config_root, write_config):
        """Should reject a users list instead of a users object."""
        # Arrange
        write_config("auth_methods/people.json", {
            "auth_options": {"type": "userpass"},
            "additional_config": {"users": ["alice", "bob"]},
        })

        # Act & Assert
        with pytest.raises(ConfigurationError, match="additional_config.users must be an object"):
            AuthMethodLoader(resolver).load(config_root)

    def test_collection_entry_must_be_object(self, resolver, config_root, write_config):
        # Arrange
        write_config("auth_methods/ci.json", {
            "auth_options": {"type": "jwt"},
            "additional_config": {"roles": {"deploy": "not-an-object"}},
        })

        # Act & Assert
        with pytest.raises(ConfigurationError, match="additional_config.roles.deploy"):
            AuthMethodLoader(resolver).load(config_root)

    def test_additional_config_must_be_object(self, resolver, config_root, write_config):
        # Arrange
        write_config("auth_methods/people.json", {
            "auth_options": {"type": "userpass"},
            "additional_config": ["users"],
        })

        # Act & Assert
        with pytest.raises(ConfigurationError, match="additional_config must be an object"):
            AuthMethodLoader(resolver).load(config_root)

    def test_unknown_type_extras_not_checked(self, resolver, config_root, write_config):
        """Should leave additional_config of hookless types alone."""
        # Arrange
        write_config("auth_methods/github.json", {
            "auth_options": {"type": "github"},
            "additional_config": {"teams": ["a", "b"]},
        })

        # Act
        declared = AuthMethodLoader(resolver).load(config_root)

        # Assert
        assert declared["github/"].additional_config == {"teams": ["a", "b"]}
