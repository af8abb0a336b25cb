from __future__ import annotations

import os
import sys
import unittest


class FixtureTestBase(unittest.TestCase):
    def setUp(self) -> None:
        repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        src_path = os.path.join(repo_root, "src")
        if src_path not in sys.path:
            sys.path.insert(0, src_path)

        from esofix.client import InMemoryControlPlane
        from esofix.fixtures import Framework
        from esofix.resources import AccessOpts

        self.client = InMemoryControlPlane()
        self.f = Framework(namespace="test-ns", client=self.client)
        self.access = AccessOpts(kid="k", sak="s", st="t", region="us-east-1", role="")


class TestStaticStoreSetup(FixtureTestBase):
    def test_creates_credentials_then_store(self) -> None:
        from esofix.fixtures import setup_static_store

        fixture = setup_static_store(self.f, self.access, "SecretsManager")

        secret, store = self.client.history
        self.assertEqual((secret.kind, secret.name, secret.namespace), ("Secret", "provider-secret", "test-ns"))
        self.assertEqual(secret.string_data, {"kid": "k", "sak": "s", "st": "t"})
        self.assertEqual((store.kind, store.name, store.namespace), ("SecretStore", "aws-static-creds", "test-ns"))
        self.assertEqual(fixture.secret, secret)
        self.assertEqual(fixture.store, store)

        provider = store.provider
        self.assertEqual(provider.role, "")
        self.assertEqual(provider.external_id, "")
        self.assertIsNone(provider.session_tags)
        self.assertEqual(provider.region, "us-east-1")
        for selector, key in (
            (provider.secret_ref.access_key_id, "kid"),
            (provider.secret_ref.secret_access_key, "sak"),
            (provider.secret_ref.session_token, "st"),
        ):
            self.assertEqual((selector.name, selector.key), ("provider-secret", key))

    def test_static_setup_ignores_role_in_access(self) -> None:
        from esofix.fixtures import setup_static_store

        access = self.access.model_copy(update={"role": "arn:aws:iam::1:role/unused"})
        fixture = setup_static_store(self.f, access, "SecretsManager")
        self.assertEqual(fixture.store.provider.role, "")

    def test_second_invocation_fails(self) -> None:
        from esofix.core.errors import ResourceCreationError
        from esofix.fixtures import setup_static_store

        setup_static_store(self.f, self.access, "SecretsManager")
        with self.assertRaises(ResourceCreationError):
            setup_static_store(self.f, self.access, "SecretsManager")
        # the failing call stops at the credential secret
        self.assertEqual(len(self.client.history), 2)

    def test_caller_supplied_names(self) -> None:
        from esofix.fixtures import setup_static_store

        setup_static_store(self.f, self.access, "SecretsManager")
        fixture = setup_static_store(
            self.f, self.access, "ParameterStore", store_name="aws-static-ps", secret_name="provider-secret-ps"
        )
        self.assertEqual(fixture.store.name, "aws-static-ps")
        self.assertEqual(fixture.store.provider.credential_secret_name, "provider-secret-ps")

    def test_same_fixture_in_two_namespaces(self) -> None:
        from esofix.fixtures import Framework, setup_static_store

        setup_static_store(self.f, self.access, "SecretsManager")
        other = Framework(namespace="other-ns", client=self.client)
        fixture = setup_static_store(other, self.access, "SecretsManager")
        self.assertEqual(fixture.store.namespace, "other-ns")


class TestAssumedRoleSetup(FixtureTestBase):
    def test_external_id_store(self) -> None:
        from esofix.fixtures import IAM_ROLE_EXTERNAL_ID, IAM_TRUSTED_EXTERNAL_ID, setup_external_id_store

        access = self.access.model_copy(update={"role": IAM_ROLE_EXTERNAL_ID})
        fixture = setup_external_id_store(self.f, access, IAM_TRUSTED_EXTERNAL_ID, None, "SecretsManager")

        self.assertEqual(fixture.secret.name, "provider-secret-ext-id")
        self.assertEqual(fixture.store.name, "aws-ext-id")
        provider = fixture.store.provider
        self.assertEqual(provider.role, IAM_ROLE_EXTERNAL_ID)
        self.assertEqual(provider.external_id, IAM_TRUSTED_EXTERNAL_ID)
        self.assertIsNone(provider.session_tags)
        self.assertEqual(provider.credential_secret_name, "provider-secret-ext-id")

    def test_external_id_without_role_creates_nothing(self) -> None:
        from esofix.core.errors import ProviderConfigError
        from esofix.fixtures import setup_external_id_store

        with self.assertRaises(ProviderConfigError):
            setup_external_id_store(self.f, self.access, "ext", None, "SecretsManager")
        self.assertEqual(self.client.history, [])

    def test_rejected_session_tags_setup_leaves_no_credential_secret(self) -> None:
        from esofix.core.errors import ProviderConfigError
        from esofix.fixtures import setup_session_tags_store
        from esofix.resources import Tag

        with self.assertRaises(ProviderConfigError):
            setup_session_tags_store(self.f, self.access, [Tag(key="a", value="b")], "SecretsManager")
        self.assertFalse(self.client.exists("Secret", "provider-secret-sess-tags", "test-ns"))

    def test_external_id_setup_with_plain_assumed_role(self) -> None:
        from esofix.fixtures import IAM_ROLE_EXTERNAL_ID, setup_external_id_store

        access = self.access.model_copy(update={"role": IAM_ROLE_EXTERNAL_ID})
        fixture = setup_external_id_store(self.f, access, "", None, "SecretsManager")

        self.assertEqual([r.kind for r in self.client.history], ["Secret", "SecretStore"])
        self.assertEqual(fixture.store.provider.role, IAM_ROLE_EXTERNAL_ID)
        self.assertEqual(fixture.store.provider.external_id, "")

    def test_session_tags_store(self) -> None:
        from esofix.fixtures import IAM_ROLE_SESSION_TAGS, setup_session_tags_store
        from esofix.resources import Tag

        tags = [Tag(key="namespace", value="test-ns"), Tag(key="suite", value="aws")]
        access = self.access.model_copy(update={"role": IAM_ROLE_SESSION_TAGS})
        fixture = setup_session_tags_store(self.f, access, tags, "ParameterStore")

        self.assertEqual(fixture.secret.name, "provider-secret-sess-tags")
        self.assertEqual(fixture.store.name, "aws-sess-tags")
        provider = fixture.store.provider
        self.assertEqual(provider.session_tags, tags)
        self.assertEqual(provider.external_id, "")
        self.assertEqual(provider.service.value, "ParameterStore")


class TestReferentSetup(FixtureTestBase):
    def test_cluster_store_named_after_namespace(self) -> None:
        from esofix.fixtures import create_referent_static_store

        fixture = create_referent_static_store(self.f, self.access, "SecretsManager")

        self.assertEqual(fixture.secret.name, "referent-provider-secret")
        self.assertEqual(fixture.secret.namespace, "test-ns")
        self.assertEqual(fixture.store.kind, "ClusterSecretStore")
        self.assertEqual(fixture.store.name, "referent-authtest-ns")
        self.assertEqual(fixture.store.provider.role, "")
        self.assertIsNone(fixture.store.provider.secret_ref.access_key_id.namespace)

    def test_referent_store_collides_on_rerun(self) -> None:
        from esofix.client import InMemoryControlPlane
        from esofix.core.errors import ResourceCreationError
        from esofix.fixtures import Framework, create_referent_static_store
        from esofix.fixtures.stores import create_referent_static_store as create_store
        from esofix.fixtures.provider import new_store_provider

        create_referent_static_store(self.f, self.access, "SecretsManager")
        with self.assertRaises(ResourceCreationError):
            create_referent_static_store(self.f, self.access, "SecretsManager")

        # cluster scope: the store name clashes even when the secret does not
        client = InMemoryControlPlane()
        create_store(client, "referent-authtest-ns", new_store_provider("SecretsManager", "r", "x"))
        with self.assertRaises(ResourceCreationError) as ctx:
            create_referent_static_store(Framework(namespace="test-ns", client=client), self.access, "SecretsManager")
        self.assertEqual(ctx.exception.kind, "ClusterSecretStore")


if __name__ == "__main__":
    unittest.main()
