"""Command-line access to the gateway over a local directory (and optionally Drive)."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Callable, Optional, Sequence

from docgateway.channel import GatewayBridge, MethodCall, MethodChannel
from docgateway.config import GatewayConfig
from docgateway.gateway import StorageAccessGateway
from docgateway.models import MethodResult
from docgateway.picker import FolderPicker, PromptFolderPicker, StaticFolderPicker
from docgateway.providers import LocalStorageProvider
from docgateway.providers.drive import (
    DRIVE_AUTHORITY,
    DriveAuth,
    DriveController,
    DriveDocumentProvider,
)
from docgateway.providers.drive.auth import DRIVE_READONLY_SCOPE, scopes_from_text
from docgateway.resolver import ContentResolver, PermissionStore
from docgateway.util.uri import build_tree_uri

DEFAULT_PERMISSIONS_FILE = os.path.join("~", ".docgateway", "permissions.json")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docgateway", description=__doc__)
    parser.add_argument("--root", default=".", help="directory exposed as the local storage volume")
    parser.add_argument("--volume", default="primary", help="volume name used in document ids")
    parser.add_argument(
        "--permissions",
        default=DEFAULT_PERMISSIONS_FILE,
        help="JSON file holding persisted grants",
    )
    parser.add_argument("--drive-client-secrets", help="OAuth client secrets JSON (enables Drive)")
    parser.add_argument("--drive-token", help="OAuth token JSON (enables Drive)")
    parser.add_argument(
        "--drive-scopes",
        default=DRIVE_READONLY_SCOPE,
        help="comma-separated OAuth scopes for Drive",
    )
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("persist", help="persist read access to a URI")
    p.add_argument("uri")

    p = sub.add_parser("read", help="read a document's bytes")
    p.add_argument("uri")
    p.add_argument("-o", "--output", help="write the bytes to this file")

    p = sub.add_parser("children", help="list the immediate children of a folder")
    p.add_argument("tree_uri")
    p.add_argument("parent_uri", nargs="?", help="defaults to the tree root")

    p = sub.add_parser("tree", help="list every file under a tree")
    p.add_argument("tree_uri")

    p = sub.add_parser("pick", help="pick a folder and persist access to it")
    p.add_argument("--drive-folder", help="pick this Drive folder id instead of prompting")

    sub.add_parser("grants", help="show persisted grants")
    return parser


def build_bridge(
    args: argparse.Namespace,
    *,
    prompt: Callable[[str], str] = input,
) -> tuple[GatewayBridge, ContentResolver]:
    permissions_file = os.path.expanduser(args.permissions)
    config = GatewayConfig(permissions_file=permissions_file)
    resolver = ContentResolver(PermissionStore(config.permissions_file))

    local = LocalStorageProvider(args.root, volume=args.volume)
    resolver.register_provider(local)

    drive_enabled = bool(args.drive_client_secrets and args.drive_token)
    if drive_enabled:
        auth = DriveAuth(
            client_secrets_file=args.drive_client_secrets,
            token_file=args.drive_token,
            scopes=tuple(scopes_from_text(args.drive_scopes)),
        )
        resolver.register_provider(DriveDocumentProvider(DriveController(auth)))

    picker: FolderPicker
    drive_folder = getattr(args, "drive_folder", None)
    if drive_folder:
        if not drive_enabled:
            raise SystemExit("--drive-folder requires --drive-client-secrets and --drive-token")
        picker = StaticFolderPicker(resolver, str(build_tree_uri(DRIVE_AUTHORITY, drive_folder)))
    else:
        picker = PromptFolderPicker(resolver, local, prompt=prompt)

    gateway = StorageAccessGateway(resolver, picker=picker, config=config)
    return GatewayBridge(gateway), resolver


def _call_for(args: argparse.Namespace, bridge: GatewayBridge) -> tuple[MethodChannel, MethodCall]:
    if args.command == "persist":
        return bridge.uri_access, MethodCall("persistUriPermission", {"uri": args.uri})
    if args.command == "read":
        return bridge.uri_access, MethodCall("openUriBytes", {"uri": args.uri})
    if args.command == "tree":
        return bridge.uri_access, MethodCall("listTreeDocumentsRecursively", {"treeUri": args.tree_uri})
    if args.command == "children":
        parent = args.parent_uri or args.tree_uri
        return bridge.document_browser, MethodCall(
            "listDocumentChildren",
            {"treeUri": args.tree_uri, "parentUri": parent},
        )
    if args.command == "pick":
        return bridge.document_browser, MethodCall("pickDocumentTree")
    raise ValueError(f"Unknown command: {args.command}")


def _emit(result: MethodResult, args: argparse.Namespace) -> int:
    if result.status == "not_implemented":
        print("error: operation not implemented", file=sys.stderr)
        return 2
    if result.status == "error":
        print(f"error: {result.error_code}: {result.error_message}", file=sys.stderr)
        return 2

    value = result.value
    if isinstance(value, bytes):
        if args.output:
            with open(args.output, "wb") as f:
                f.write(value)
        value = {"uri": args.uri, "size": len(value), "output": args.output}

    print(json.dumps(value, indent=2, ensure_ascii=False))
    return 1 if value is None or value is False else 0


async def _run(args: argparse.Namespace, prompt: Callable[[str], str]) -> int:
    bridge, resolver = build_bridge(args, prompt=prompt)
    if args.command == "grants":
        grants = [g.to_dict() for g in resolver.get_persisted_uri_permissions()]
        print(json.dumps(grants, indent=2))
        return 0

    channel, call = _call_for(args, bridge)
    result = await channel.invoke_async(call)
    return _emit(result, args)


def main(argv: Optional[Sequence[str]] = None, *, prompt: Callable[[str], str] = input) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args, prompt))

