from __future__ import annotations

from typing import List, Optional

import typer
import yaml
from typer import Argument, Option

from .auth import load_access_opts
from .client import InMemoryControlPlane, KubernetesControlPlane
from .config.loader import load_config
from .config.models import IamConfig
from .core.errors import ConfigError, EsofixError, get_exit_code
from .fixtures import (
    Fixture,
    Framework,
    create_referent_static_store,
    mounted_irsa_store_name,
    referenced_irsa_store_name,
    referent_store_name,
    setup_external_id_store,
    setup_session_tags_store,
    setup_static_store,
)
from .observability.logging import get_logger, log_config_fingerprint, set_verbose
from .resources.models import AccessOpts, AwsServiceType, Tag

VARIANTS = ("static", "external-id", "session-tags", "referent-static")

app = typer.Typer(
    name="esofix",
    help="esofix - AWS secret-store fixtures for external-secrets e2e tests",
    no_args_is_help=True,
    add_completion=False,
)


def _parse_tags(raw: List[str]) -> List[Tag]:
    tags: List[Tag] = []
    for item in raw:
        if "=" not in item:
            raise ConfigError(f"Invalid --tag (expected key=value): {item!r}")
        key, value = item.split("=", 1)
        tags.append(Tag(key=key.strip(), value=value.strip()))
    return tags


def run_variant(
    variant: str,
    f: Framework,
    access: AccessOpts,
    service: AwsServiceType,
    *,
    iam: IamConfig,
    external_id: Optional[str] = None,
    tags: Optional[List[Tag]] = None,
) -> Fixture:
    """Run one setup entry point; assumed-role variants default to the IAM roles from config.

    Options the chosen variant has no use for are rejected rather than dropped.
    """
    if tags and variant != "session-tags":
        raise ConfigError(f"--tag only applies to the session-tags fixture, not {variant!r}")
    if external_id and variant != "external-id":
        raise ConfigError(f"--external-id only applies to the external-id fixture, not {variant!r}")
    if variant == "static":
        return setup_static_store(f, access, service)
    if variant == "external-id":
        if not access.role:
            access = access.model_copy(update={"role": iam.role_external_id})
        return setup_external_id_store(f, access, external_id or iam.trusted_external_id, None, service)
    if variant == "session-tags":
        if not access.role:
            access = access.model_copy(update={"role": iam.role_session_tags})
        if not tags:
            raise ConfigError("session-tags fixture needs at least one --tag key=value")
        return setup_session_tags_store(f, access, tags, service)
    if variant == "referent-static":
        return create_referent_static_store(f, access, service)
    raise ConfigError(f"Unknown fixture variant {variant!r}; choose one of: {', '.join(VARIANTS)}")


def _masked(manifest: dict) -> dict:
    if "stringData" in manifest:
        manifest = dict(manifest)
        manifest["stringData"] = {k: "****" for k in manifest["stringData"]}
    return manifest


@app.command("names")
def names(namespace: str = Argument(..., help="Test namespace")) -> None:
    """Print the store names derived from a namespace."""
    typer.echo(f"referenced IRSA store: {referenced_irsa_store_name(namespace)}")
    typer.echo(f"mounted IRSA store:    {mounted_irsa_store_name(namespace)}")
    typer.echo(f"referent store:        {referent_store_name(namespace)}")


@app.command("render")
def render(
    variant: str = Argument(..., help=f"Fixture variant: {', '.join(VARIANTS)}"),
    namespace: str = Option(..., "-n", "--namespace", help="Test namespace"),
    region: str = Option("eu-west-1", "--region", help="AWS region"),
    role: str = Option("", "--role", help="Role to assume"),
    external_id: Optional[str] = Option(None, "--external-id", help="External id for the trust relationship"),
    tag: List[str] = Option([], "--tag", help="Session tag key=value (repeatable)"),
    service: AwsServiceType = Option(AwsServiceType.SECRETS_MANAGER, "--service", help="AWS service type"),
    verbose: bool = Option(False, "--verbose", help="Enable verbose output"),
) -> None:
    """Print the manifests a fixture would create, without touching a cluster."""
    set_verbose(verbose)
    client = InMemoryControlPlane()
    access = AccessOpts(kid="placeholder", sak="placeholder", st="placeholder", region=region, role=role)
    try:
        run_variant(
            variant,
            Framework(namespace=namespace, client=client),
            access,
            service,
            iam=IamConfig(),
            external_id=external_id,
            tags=_parse_tags(tag),
        )
    except EsofixError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(get_exit_code(e))

    manifests = [_masked(r.to_manifest()) for r in client.history]
    typer.echo(yaml.safe_dump_all(manifests, sort_keys=False).rstrip())


@app.command("apply")
def apply(
    variant: str = Argument(..., help=f"Fixture variant: {', '.join(VARIANTS)}"),
    config: str = Option("esofix.yaml", "-c", "--config", help="Path to esofix config file"),
    namespace: Optional[str] = Option(None, "-n", "--namespace", help="Test namespace (overrides config)"),
    external_id: Optional[str] = Option(None, "--external-id", help="External id for the trust relationship"),
    tag: List[str] = Option([], "--tag", help="Session tag key=value (repeatable)"),
    set_overrides: List[str] = Option([], "--set", help="Override config values: key.path=value"),
    verbose: bool = Option(False, "--verbose", help="Enable verbose output"),
) -> None:
    """Create a fixture in the cluster, with credentials taken from the environment."""
    set_verbose(verbose)
    logger = get_logger()
    try:
        cfg = load_config(config, set_overrides=set_overrides)
        log_config_fingerprint(cfg.model_dump(mode="json"))
        ns = namespace or cfg.namespace
        if not ns:
            raise ConfigError("No namespace given; pass --namespace or set 'namespace' in config")
        access = load_access_opts(cfg)
        client = KubernetesControlPlane(
            kubeconfig=cfg.kubernetes.kubeconfig,
            context=cfg.kubernetes.context,
            in_cluster=cfg.kubernetes.in_cluster,
        )
        fixture = run_variant(
            variant,
            Framework(namespace=ns, client=client),
            access,
            cfg.service_type,
            iam=cfg.iam,
            external_id=external_id,
            tags=_parse_tags(tag),
        )
    except EsofixError as e:
        logger.error("Fixture setup failed", variant=variant, error=str(e))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(get_exit_code(e))

    typer.echo(f"✓ Created {fixture.secret.kind} {fixture.secret.namespace}/{fixture.secret.name}")
    where = f"{fixture.store.namespace}/{fixture.store.name}" if fixture.store.namespace else fixture.store.name
    typer.echo(f"✓ Created {fixture.store.kind} {where}")


@app.callback(invoke_without_command=True)
def version_callback(
    ctx: typer.Context,
    version: bool = Option(False, "--version", help="Show version and exit"),
) -> None:
    """esofix CLI - provision AWS secret-store fixtures."""
    if version:
        import importlib.metadata as importlib_metadata

        try:
            version_str = importlib_metadata.version("esofix")
        except importlib_metadata.PackageNotFoundError:
            version_str = "0.0.0+local"
        typer.echo(version_str)
        raise typer.Exit(0)


def main() -> None:
    """Main entry point for the esofix CLI."""
    app()


if __name__ == "__main__":
    main()
