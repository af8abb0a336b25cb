"""Tests for the esofix CLI."""

from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from esofix.cli import app, run_variant
from esofix.client import InMemoryControlPlane
from esofix.config.models import IamConfig
from esofix.core.errors import ConfigError
from esofix.fixtures import Framework
from esofix.resources import AccessOpts, AwsServiceType, Tag


class TestEsofixCLI:
    """Test the esofix CLI."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_app_help(self):
        result = self.runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "render" in result.output
        assert "apply" in result.output
        assert "names" in result.output

    def test_version(self):
        result = self.runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip()

    def test_names(self):
        result = self.runner.invoke(app, ["names", "ns1"])
        assert result.exit_code == 0
        assert "irsa-ref-ns1" in result.output
        assert "irsa-mounted-ns1" in result.output
        assert "referent-authns1" in result.output

    def test_render_static(self):
        result = self.runner.invoke(app, ["render", "static", "--namespace", "test-ns", "--region", "us-east-1"])
        assert result.exit_code == 0, result.output

        secret, store = list(yaml.safe_load_all(result.output))
        assert secret["kind"] == "Secret"
        assert secret["metadata"] == {"name": "provider-secret", "namespace": "test-ns"}
        assert secret["stringData"] == {"kid": "****", "sak": "****", "st": "****"}
        assert store["kind"] == "SecretStore"
        assert store["metadata"]["name"] == "aws-static-creds"
        aws = store["spec"]["provider"]["aws"]
        assert aws["region"] == "us-east-1"
        assert "role" not in aws

    def test_render_session_tags(self):
        result = self.runner.invoke(
            app,
            ["render", "session-tags", "-n", "test-ns", "--tag", "team=a", "--tag", "env=e2e", "--service", "ParameterStore"],
        )
        assert result.exit_code == 0, result.output

        _, store = list(yaml.safe_load_all(result.output))
        aws = store["spec"]["provider"]["aws"]
        assert aws["service"] == "ParameterStore"
        assert aws["role"] == IamConfig().role_session_tags
        assert aws["sessionTags"] == [{"key": "team", "value": "a"}, {"key": "env", "value": "e2e"}]

    def test_render_referent(self):
        result = self.runner.invoke(app, ["render", "referent-static", "-n", "ns1"])
        assert result.exit_code == 0, result.output

        _, store = list(yaml.safe_load_all(result.output))
        assert store["kind"] == "ClusterSecretStore"
        assert store["metadata"] == {"name": "referent-authns1"}

    def test_render_rejects_bad_input(self):
        result = self.runner.invoke(app, ["render", "nope", "-n", "ns"])
        assert result.exit_code == 2
        result = self.runner.invoke(app, ["render", "session-tags", "-n", "ns"])
        assert result.exit_code == 2
        result = self.runner.invoke(app, ["render", "static", "-n", "ns", "--external-id", "x", "--role", ""])
        assert result.exit_code == 2
        assert "--external-id only applies" in result.output

    def test_render_rejects_tags_for_other_variants(self):
        for variant in ("static", "external-id", "referent-static"):
            result = self.runner.invoke(app, ["render", variant, "-n", "ns", "--tag", "team=a"])
            assert result.exit_code == 2, variant
            assert "--tag only applies to the session-tags fixture" in result.output
            assert "kind: Secret" not in result.output

    def test_apply_uses_kubernetes_client(self, tmp_path, monkeypatch):
        cfg = tmp_path / "esofix.yaml"
        cfg.write_text("namespace: e2e-ns\naws:\n  region: us-east-1\n", encoding="utf-8")
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")

        client = InMemoryControlPlane()
        with patch("esofix.cli.KubernetesControlPlane", return_value=client):
            result = self.runner.invoke(app, ["apply", "static", "-c", str(cfg)])

        assert result.exit_code == 0, result.output
        assert "Secret e2e-ns/provider-secret" in result.output
        assert "SecretStore e2e-ns/aws-static-creds" in result.output
        assert client.exists("SecretStore", "aws-static-creds", "e2e-ns")

    def test_apply_role_comes_from_set_override(self, tmp_path, monkeypatch):
        cfg = tmp_path / "esofix.yaml"
        cfg.write_text("namespace: e2e-ns\n", encoding="utf-8")
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")

        client = InMemoryControlPlane()
        with patch("esofix.cli.KubernetesControlPlane", return_value=client):
            result = self.runner.invoke(
                app, ["apply", "external-id", "-c", str(cfg), "--set", "aws.role=arn:aws:iam::1:role/custom"]
            )

        assert result.exit_code == 0, result.output
        store = client.get("SecretStore", "aws-ext-id", "e2e-ns")
        assert store.provider.role == "arn:aws:iam::1:role/custom"

    def test_apply_duplicate_exits_with_creation_code(self, tmp_path, monkeypatch):
        cfg = tmp_path / "esofix.yaml"
        cfg.write_text("namespace: e2e-ns\n", encoding="utf-8")
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")

        client = InMemoryControlPlane()
        with patch("esofix.cli.KubernetesControlPlane", return_value=client):
            first = self.runner.invoke(app, ["apply", "static", "-c", str(cfg)])
            second = self.runner.invoke(app, ["apply", "static", "-c", str(cfg)])

        assert first.exit_code == 0
        assert second.exit_code == 4

    def test_apply_without_credentials(self, tmp_path, monkeypatch):
        cfg = tmp_path / "esofix.yaml"
        cfg.write_text("namespace: e2e-ns\n", encoding="utf-8")
        monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
        monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)

        result = self.runner.invoke(app, ["apply", "static", "-c", str(cfg)])
        assert result.exit_code == 2


class TestRunVariant:
    def test_external_id_defaults_to_iam_config(self):
        client = InMemoryControlPlane()
        iam = IamConfig()
        fixture = run_variant(
            "external-id",
            Framework(namespace="ns", client=client),
            AccessOpts(kid="k", sak="s"),
            AwsServiceType.SECRETS_MANAGER,
            iam=iam,
        )
        assert fixture.store.provider.role == iam.role_external_id
        assert fixture.store.provider.external_id == iam.trusted_external_id

    def test_explicit_role_is_kept(self):
        fixture = run_variant(
            "session-tags",
            Framework(namespace="ns", client=InMemoryControlPlane()),
            AccessOpts(kid="k", sak="s", role="arn:custom"),
            AwsServiceType.SECRETS_MANAGER,
            iam=IamConfig(),
            tags=[Tag(key="a", value="b")],
        )
        assert fixture.store.provider.role == "arn:custom"

    def test_tags_on_external_id_variant_create_nothing(self):
        client = InMemoryControlPlane()
        with pytest.raises(ConfigError):
            run_variant(
                "external-id",
                Framework(namespace="ns", client=client),
                AccessOpts(kid="k", sak="s"),
                AwsServiceType.SECRETS_MANAGER,
                iam=IamConfig(),
                tags=[Tag(key="a", value="b")],
            )
        assert client.history == []
