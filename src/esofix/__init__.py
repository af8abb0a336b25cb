"""esofix

Fixtures for external-secrets e2e tests against the AWS provider:
- fixtures: naming, credential secrets, provider config, stores, setup entry points
- resources, client, config, auth, observability
"""

__all__ = [
    "fixtures",
    "resources",
    "client",
    "config",
    "auth",
    "observability",
]
