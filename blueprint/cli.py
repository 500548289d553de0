"""Command-line entry point for ``blueprint``.

Usage::

    blueprint generate --name my_app --platforms mobile,web --state riverpod
    blueprint generate --from-manifest ./my_app/blueprint.yaml -o ./my_app_copy
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Sequence

from rich.markup import escape

from blueprint import __version__
from blueprint.config import MAX_CONCURRENCY, BlueprintConfig, GeneratorSettings
from blueprint.core.errors import BlueprintError, ProjectGenerationError
from blueprint.generator import GenerationResult, ProjectGenerator
from blueprint.manifest import load_config
from blueprint.utils import Reporter, console, print_error, print_success, print_warning

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blueprint",
        description="blueprint -- Flutter project scaffolding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  blueprint generate --name my_app\n"
            "  blueprint generate --name my_app --platforms mobile,web --state bloc --ci github\n"
            "  blueprint generate --from-manifest my_app/blueprint.yaml -o ./copy --force\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate", help="Generate a new project")
    gen.add_argument("--name", "-n", default=None, help="Application name (Dart package name)")
    gen.add_argument(
        "--platforms", "-p",
        default="mobile",
        help="Comma-separated platforms: mobile, web, desktop or 'all' (default: mobile)",
    )
    gen.add_argument(
        "--state", "-s",
        default="provider",
        help="State management: provider, riverpod or bloc (default: provider)",
    )
    gen.add_argument(
        "--ci",
        default="none",
        help="CI provider: none, github, gitlab or azure (default: none)",
    )
    gen.add_argument("--no-theme", action="store_true", help="Skip theme scaffolding")
    gen.add_argument("--localization", action="store_true", help="Include localization")
    gen.add_argument("--env", action="store_true", help="Include environment configuration")
    gen.add_argument("--api", action="store_true", help="Include an HTTP API client")
    gen.add_argument("--no-tests", action="store_true", help="Skip test scaffolding")
    gen.add_argument("--hive", action="store_true", help="Include Hive offline caching")
    gen.add_argument(
        "--output", "-o",
        default=None,
        help="Target directory (default: ./<name>)",
    )
    gen.add_argument(
        "--concurrency", "-c",
        type=int,
        default=None,
        help=f"Maximum parallel file writes (1-{MAX_CONCURRENCY})",
    )
    gen.add_argument("--force", "-f", action="store_true", help="Generate into a non-empty directory")
    gen.add_argument("--no-manifest", action="store_true", help="Do not write blueprint.yaml")
    gen.add_argument(
        "--flutter-setup",
        action="store_true",
        help="Run 'flutter create .' and 'flutter pub get' afterwards",
    )
    gen.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    gen.add_argument(
        "--from-manifest",
        default=None,
        metavar="FILE",
        help="Regenerate from an existing blueprint.yaml",
    )
    return parser


def _config_from_args(args: argparse.Namespace) -> BlueprintConfig:
    if args.from_manifest:
        return load_config(args.from_manifest)
    if not args.name:
        raise BlueprintError("--name is required unless --from-manifest is given")
    return BlueprintConfig(
        app_name=args.name,
        platforms=args.platforms,
        state_management=args.state,
        ci_provider=args.ci,
        include_theme=not args.no_theme,
        include_localization=args.localization,
        include_env=args.env,
        include_api=args.api,
        include_tests=not args.no_tests,
        include_hive=args.hive,
    )


def _settings_from_args(args: argparse.Namespace) -> GeneratorSettings:
    base = GeneratorSettings.from_env()
    overrides: dict[str, Any] = {}
    if args.concurrency is not None:
        overrides["concurrency"] = max(1, min(args.concurrency, MAX_CONCURRENCY))
    if args.force:
        overrides["overwrite_existing"] = True
    if args.no_manifest:
        overrides["write_manifest"] = False
    if args.flutter_setup:
        overrides["run_flutter_tools"] = True
    if args.verbose:
        overrides["verbose"] = True
    return GeneratorSettings(**{**base.model_dump(), **overrides})


def _on_success(result: GenerationResult) -> int:
    if result.files_failed:
        print_warning(
            f"Project generated with {result.files_failed} failed file(s) at {result.target_path}"
        )
        for path, message in sorted(result.failures.items()):
            console.print(f"  [red]x[/red] {escape(path)}: {escape(message)}")
    else:
        print_success(f"Project created successfully at {result.target_path}")
    if result.files_skipped:
        console.print(f"  {result.files_skipped} existing file(s) skipped")
    console.print()
    console.print("Next steps:")
    console.print(f"  cd {escape(result.target_path)}")
    console.print("  flutter run")
    return EXIT_OK


def _on_failure(error: ProjectGenerationError) -> int:
    print_error(f"Generation failed ({error.kind.value}): {error.message}")
    return EXIT_FAILURE


async def _generate(args: argparse.Namespace) -> int:
    try:
        config = _config_from_args(args)
        settings = _settings_from_args(args)
    except (BlueprintError, ValueError) as exc:
        print_error(f"Error: {exc.message if isinstance(exc, BlueprintError) else exc}")
        return EXIT_FAILURE

    target = Path(args.output) if args.output else Path.cwd() / config.app_name
    generator = ProjectGenerator(
        settings=settings, reporter=Reporter(verbose=settings.verbose)
    )
    result = await generator.generate(config, target)
    return result.when(success=_on_success, failure=_on_failure)


def run(argv: Sequence[str] | None = None) -> int:
    """Parse *argv*, run the command and return the process exit code."""
    args = build_parser().parse_args(argv)
    if args.command == "generate":
        return asyncio.run(_generate(args))
    return EXIT_FAILURE


def main() -> None:
    """Console-script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
