#!/usr/bin/env python
"""Command-line interface for registry-creds.

This module provides the main CLI entry point, turning command-line
options and environment overrides into Settings and starting the
reconciliation loop.
"""

import os
import sys

import click
from icecream import ic

from registry_creds import __version__, console
from registry_creds.cluster import Cluster, load_client_config
from registry_creds.controller import Controller
from registry_creds.exceptions import ClusterConnectionError, ProviderError, RegistryCredsError
from registry_creds.models import Settings
from registry_creds.providers import EcrTokenProvider, GcrTokenProvider


def build_controller(settings: Settings) -> Controller:
    """Construct the cluster client, token providers and controller.

    Args:
        settings: Controller configuration.

    Returns:
        A Controller ready to run.

    Raises:
        ClusterConnectionError: If the Kubernetes client cannot be configured.
        ProviderError: If the ECR client cannot be created.

    """
    load_client_config(settings)

    return Controller(
        settings,
        Cluster(),
        gcr_provider=GcrTokenProvider(settings.gcr_url),
        ecr_provider=EcrTokenProvider(settings.aws_account_id, settings.aws_region),
    )


@click.command(help="Keep registry image-pull secrets fresh in every namespace")
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option(
    "--use-kubernetes-cluster-service/--no-use-kubernetes-cluster-service",
    default=True,
    show_default=True,
    help="use the in-cluster service account instead of a kubeconfig",
)
@click.option("--kubecfg-file", default="", help="location of the kubeconfig when not running in-cluster")
@click.option(
    "--kube-master-url",
    default="",
    help="URL of the Kubernetes API server when using a kubeconfig; env variables are expanded",
)
@click.option("--aws-secret-name", default="awsecr-cred", show_default=True, help="name of the ECR secret")
@click.option("--gcr-secret-name", default="gcr-secret", show_default=True, help="name of the GCR secret")
@click.option("--default-namespace", default="default", show_default=True, help="default namespace")
@click.option("--gcr-url", default="https://gcr.io", show_default=True, help="GCR registry URL")
@click.option(
    "--aws-region",
    default="us-east-1",
    show_default=True,
    help="AWS region; the awsregion env variable takes precedence",
)
@click.option(
    "--refresh-mins",
    type=click.IntRange(min=1),
    default=60,
    show_default=True,
    help="minutes to wait between refreshes",
)
@click.option("--aws-account", envvar="awsaccount", default="", hidden=True)
def cli(
    version: bool,
    debug: bool,
    use_kubernetes_cluster_service: bool,
    kubecfg_file: str,
    kube_master_url: str,
    aws_secret_name: str,
    gcr_secret_name: str,
    default_namespace: str,
    gcr_url: str,
    aws_region: str,
    refresh_mins: int,
    aws_account: str,
) -> None:
    """Process CLI arguments and run the controller.

    The ECR account id is read from the ``awsaccount`` environment variable
    and ``awsregion`` overrides ``--aws-region`` when set.

    """
    if not debug:
        ic.disable()

    if version:
        click.echo(__version__)
        return

    console.action("Starting up...")

    if not aws_account:
        console.warning("Missing awsaccount env variable, assuming GCR usage")

    # The environment wins over the flag, even when the flag is given
    aws_region = os.environ.get("awsregion") or aws_region

    settings = Settings(
        use_cluster_service=use_kubernetes_cluster_service,
        kubecfg_file=kubecfg_file,
        kube_master_url=kube_master_url,
        aws_secret_name=aws_secret_name,
        gcr_secret_name=gcr_secret_name,
        default_namespace=default_namespace,
        gcr_url=gcr_url,
        aws_account_id=aws_account,
        aws_region=aws_region,
        refresh_minutes=refresh_mins,
    )
    ic(settings)

    console.info(f"Using AWS Account: {console.highlight(settings.aws_account_id)}")
    console.info(f"Using AWS Region: {console.highlight(settings.aws_region)}")
    console.info(f"Refresh Interval (minutes): {console.highlight(str(settings.refresh_minutes))}")

    try:
        controller = build_controller(settings)
    except (ClusterConnectionError, ProviderError) as e:
        console.fatal(str(e))
        sys.exit(1)

    try:
        controller.run_forever()
    except RegistryCredsError as e:
        console.fatal(f"Failed to refresh registry credentials: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.warning("Interrupted, shutting down")


if __name__ == "__main__":
    cli()
