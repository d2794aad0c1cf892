"""Command line entry point: vaultsync sync | rotate."""

import argparse
import logging
import sys
from typing import List, Optional

from vaultsync import __version__
from vaultsync.backend import VaultBackendClient
from vaultsync.core import Config, Settings, VaultSyncError
from vaultsync.pipeline import KIND_ORDER, SyncPipeline
from vaultsync.rotation import RotationJob

logger = logging.getLogger("vaultsync")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vaultsync",
        description="Declaratively reconcile Vault auth methods and secrets engines.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--settings", "-s",
        default=None,
        help="Path to a YAML settings file (optional)",
    )
    parser.add_argument(
        "--env", "-e",
        default=None,
        help="Environment overlay name (loads environments/<env>.yaml next to --settings)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from settings or INFO)",
    )

    subs = parser.add_subparsers(dest="command", help="Subcommand")

    # -- sync ----------------------------------------------------------------
    p_sync = subs.add_parser("sync", help="Reconcile the backend against the configuration tree")
    p_sync.add_argument("--config-path", "-c", default=None,
                        help="Root of the configuration tree")
    p_sync.add_argument("--secret-base-path", default=None,
                        help="Prefix of the per-resource secret namespace")
    p_sync.add_argument("--workers", "-w", type=int, default=None,
                        help="Size of the write worker pool")
    p_sync.add_argument("--kinds", nargs="+", choices=list(KIND_ORDER), default=None,
                        help="Only sync these resource kinds")
    p_sync.add_argument("--assume-no", action="store_true",
                        help="Decline every deletion without prompting")

    # -- rotate --------------------------------------------------------------
    subs.add_parser("rotate", help="Rotate root credentials of every aws/gcp mount")

    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings file + environment, then command line flags on top."""
    config = Config.load(args.settings, env=args.env)

    overrides = {
        "logging.level": args.log_level,
        "sync.configuration_path": getattr(args, "config_path", None),
        "sync.secret_base_path": getattr(args, "secret_base_path", None),
        "sync.workers": getattr(args, "workers", None),
    }
    for key, value in overrides.items():
        if value is not None:
            config.set(key, value)
    if getattr(args, "assume_no", False):
        config.set("sync.assume_no", True)

    return config.settings()


def build_client(settings: Settings) -> VaultBackendClient:
    return VaultBackendClient(
        url=settings.vault_addr,
        token=settings.vault_token,
        namespace=settings.vault_namespace,
        verify=settings.verify_tls,
        retries=settings.http_retries,
    )


def cmd_sync(settings: Settings, args: argparse.Namespace) -> int:
    client = build_client(settings)
    pipeline = SyncPipeline.from_settings(settings, client)
    report = pipeline.run(kinds=args.kinds or KIND_ORDER)
    if report.declined:
        logger.info(f"Left in place: {', '.join(report.declined)}")
    return 0


def cmd_rotate(settings: Settings, args: argparse.Namespace) -> int:
    report = RotationJob(build_client(settings)).run()
    return 1 if report.failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = load_settings(args)
    except VaultSyncError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(str(e))
        return 1

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    dispatch = {
        "sync": cmd_sync,
        "rotate": cmd_rotate,
    }

    try:
        return dispatch[args.command](settings, args)
    except VaultSyncError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
