"""CLI entry point: ``codenote annotate``, ``publish`` and ``serve``."""

from __future__ import annotations

# Phase 1: Singleton logging, before any transitive litellm imports
from codenote.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import json  # noqa: E402
import os  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

import httpx  # noqa: E402

from codenote import __version__  # noqa: E402
from codenote.annotation.schemas import AnnotationRequest  # noqa: E402
from codenote.annotation.service import AnnotationService  # noqa: E402
from codenote.config import Settings, detect_language  # noqa: E402
from codenote.constants import PublishOutcome, Verbosity  # noqa: E402
from codenote.errors import AnnotationError  # noqa: E402
from codenote.generation.capability import build_capability  # noqa: E402
from codenote.logging_config import (  # noqa: E402
    apply_log_level,
    cleanup_third_party_handlers,
)
from codenote.publishing.github import (  # noqa: E402
    GitHubContentStore,
    RemoteStoreError,
)
from codenote.publishing.publisher import RemoteFilePublisher  # noqa: E402
from codenote.publishing.schemas import PublishResult  # noqa: E402

# Phase 2: Clear litellm's duplicate handlers after all imports
cleanup_third_party_handlers()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"codenote {__version__}")
        return

    if args.command == "annotate":
        _run_annotate(args)
    elif args.command == "publish":
        _run_publish(args)
    elif args.command == "serve":
        _run_serve(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="codenote",
        description=(
            "Annotate source code with a generation service "
            "and publish the reviewed result to GitHub."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    annotate = sub.add_parser("annotate", help="Annotate a source file")
    annotate.add_argument("file", type=str, help="Source file to annotate")
    annotate.add_argument(
        "--language",
        "-l",
        default=None,
        help="Language hint (default: from file extension)",
    )
    annotate.add_argument(
        "--verbosity",
        "-v",
        choices=[v.value for v in Verbosity],
        default=Verbosity.CONCISE.value,
        help="Comment density (default: concise)",
    )
    annotate.add_argument(
        "--json",
        action="store_true",
        help="Print the full annotation record as JSON",
    )

    publish = sub.add_parser(
        "publish",
        help="Publish a file to GitHub (token from GITHUB_TOKEN)",
    )
    publish.add_argument("file", type=str, help="Local file to publish")
    publish.add_argument("--repo", "-r", required=True, help="Repository name")
    publish.add_argument(
        "--path",
        "-p",
        default=None,
        help="Path in the repository (default: the file's name)",
    )
    publish.add_argument(
        "--owner",
        "-o",
        default=None,
        help="Repository owner (default: the token's user)",
    )
    publish.add_argument(
        "--branch",
        "-b",
        default=None,
        help="Branch (default: DEFAULT_BRANCH setting, main)",
    )

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument(
        "--port", type=int, default=3000, help="Port (default: 3000)"
    )

    return parser


def _read_source(path_arg: str) -> Path:
    path = Path(path_arg)
    if not path.is_file():
        print(f"Error: {path} does not exist", file=sys.stderr)
        sys.exit(1)
    return path


def _run_annotate(args: argparse.Namespace) -> None:
    """Execute the annotate command."""
    path = _read_source(args.file)
    settings = Settings()
    apply_log_level(settings.log_level)
    service = AnnotationService(
        build_capability(settings), max_code_chars=settings.max_code_chars
    )
    request = AnnotationRequest(
        source_code=path.read_text(encoding="utf-8"),
        language_hint=args.language or detect_language(path.name),
        verbosity_level=args.verbosity,
    )

    try:
        record = asyncio.run(service.annotate(request))
    except AnnotationError as exc:
        print(f"Error ({exc.kind}): {exc.message}", file=sys.stderr)
        if "snippet" in exc.detail and exc.detail["snippet"]:
            print(exc.detail["snippet"], file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(record.model_dump(mode="json", by_alias=True), indent=2))
    else:
        print(record.annotated_code)


async def _publish(
    settings: Settings,
    token: str,
    owner: str | None,
    repo: str,
    path: str,
    branch: str,
    content: bytes,
) -> PublishResult:
    async with httpx.AsyncClient(
        timeout=settings.github_timeout_seconds
    ) as client:
        store = GitHubContentStore(client, settings.github_api_url)
        if not owner:
            owner = await store.get_authenticated_login(token)
        return await RemoteFilePublisher(store).publish(
            owner, repo, path, branch, content, token
        )


def _run_publish(args: argparse.Namespace) -> None:
    """Execute the publish command."""
    path = _read_source(args.file)
    token = os.environ.get("GITHUB_TOKEN", "")
    if not token:
        print("Error: set GITHUB_TOKEN to publish", file=sys.stderr)
        sys.exit(1)

    settings = Settings()
    apply_log_level(settings.log_level)
    try:
        result = asyncio.run(
            _publish(
                settings,
                token,
                args.owner,
                args.repo,
                args.path or path.name,
                args.branch or settings.default_branch,
                path.read_bytes(),
            )
        )
    except RemoteStoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    stream = sys.stdout if result.ok else sys.stderr
    print(f"[{result.outcome}] {result.message}", file=stream)
    if not result.ok:
        sys.exit(2 if result.outcome is PublishOutcome.CONFLICT else 1)


def _run_serve(args: argparse.Namespace) -> None:
    """Execute the serve command."""
    import uvicorn

    uvicorn.run("codenote.main:app", host=args.host, port=args.port)
