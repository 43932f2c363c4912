"""
CLI entry point: thin dispatcher only.

Parse args -> goi service -> in ket qua.
"""

import argparse
import json
import sys
from pathlib import Path

from context_bridge.utils import Colors

PLATFORM_CHOICES = ["kiro", "claude-code", "cursor"]


def main():
    try:
        _main()
    except KeyboardInterrupt:
        print(f"\n{Colors.YELLOW}Cancelled.{Colors.ENDC}")
        sys.exit(130)


def _main(argv=None):
    parser = argparse.ArgumentParser(
        description="Context Bridge - migrate AI IDE configuration between Kiro, Claude Code and Cursor"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show warnings while working")
    sub = parser.add_subparsers(dest="command", help="Command")

    # --- detect ---
    p_detect = sub.add_parser("detect", help="Detect which AI IDE configs a project has")
    p_detect.add_argument("--path", default=".", help="Project directory")
    p_detect.add_argument("--json", action="store_true", help="Output as JSON")

    # --- build ---
    p_build = sub.add_parser("build", help="Build a neutral context from a project")
    p_build.add_argument("platform", choices=PLATFORM_CHOICES)
    p_build.add_argument("--path", default=".", help="Project directory")
    p_build.add_argument("--output", "-o", default="", help="Context file to write")

    # --- convert ---
    p_convert = sub.add_parser("convert", help="Convert a context to another platform")
    p_convert.add_argument("--from", dest="source", choices=PLATFORM_CHOICES, help="Source platform")
    p_convert.add_argument("--to", dest="target", choices=PLATFORM_CHOICES, help="Target platform")
    p_convert.add_argument("--input", "-i", default="", help="Context file (default: build from --path)")
    p_convert.add_argument("--path", default=".", help="Project directory to build from")
    p_convert.add_argument("--output", "-o", default="", help="Converted context file to write")
    p_convert.add_argument("--deploy", action="store_true", help="Write the target platform files")
    p_convert.add_argument("--target-path", default=".", help="Where to deploy")
    p_convert.add_argument("--force", "-f", action="store_true", help="Convert even when incompatible; overwrite existing files on --deploy")
    p_convert.add_argument("--backup", action="store_true", help="Keep <file>.bak copies of overwritten files")
    p_convert.add_argument("--no-interactive", action="store_true", help="Disable TUI")

    # --- deploy ---
    p_deploy = sub.add_parser("deploy", help="Write a context's platform files to disk")
    p_deploy.add_argument("--input", "-i", required=True, help="Context file")
    p_deploy.add_argument("--platform", choices=PLATFORM_CHOICES, help="Platform to deploy (default: context source)")
    p_deploy.add_argument("--target-path", default=".", help="Where to deploy")
    p_deploy.add_argument("--force", "-f", action="store_true", help="Do not ask; overwrite existing files")
    p_deploy.add_argument("--backup", action="store_true", help="Keep <file>.bak copies of overwritten files")
    p_deploy.add_argument("--dry-run", action="store_true", help="List the files without writing them")

    # --- list ---
    sub.add_parser("list", help="List available conversions")

    args = parser.parse_args(argv)

    if args.command == "detect":
        _handle_detect(args)
    elif args.command == "build":
        _handle_build(args)
    elif args.command == "convert":
        _handle_convert(args)
    elif args.command == "deploy":
        _handle_deploy(args)
    elif args.command == "list":
        _handle_list()
    else:
        parser.print_help()


def _fail(message: str):
    print(f"{Colors.RED}{message}{Colors.ENDC}")
    sys.exit(1)


def _handle_detect(args):
    from context_bridge.services.detector_service import PlatformDetector

    report = PlatformDetector().detect_all(args.path)
    if args.json:
        data = {
            "primary": report.primary.value if report.primary else None,
            "ambiguous": report.ambiguous,
            "detected": [
                {"platform": d.platform.value, "confidence": d.confidence, "indicators": d.indicators}
                for d in report.detected
            ],
        }
        print(json.dumps(data, indent=2))
        return

    if not report.detected:
        print(f"{Colors.YELLOW}No AI IDE configuration found in {Path(args.path).resolve()}{Colors.ENDC}")
        return
    print(f"{Colors.HEADER}Detected platforms:{Colors.ENDC}")
    for d in report.detected:
        marker = "*" if d.platform == report.primary else " "
        print(f" {marker} {d.platform.display_name:<12} {d.confidence:>3}%  {', '.join(d.indicators)}")
    if report.ambiguous:
        print(f"\n{Colors.YELLOW}Detection is ambiguous; pass the platform explicitly.{Colors.ENDC}")


def _build_context(platform_name: str, path: str, verbose: bool):
    from context_bridge.core.errors import ContextValidationError, NotAPlatformProjectError
    from context_bridge.core.strategy import builder_registry

    builder = builder_registry.get(platform_name)
    builder.verbose = verbose
    try:
        return builder.build(path)
    except NotAPlatformProjectError as e:
        _fail(str(e))
    except ContextValidationError as e:
        for error in e.result.errors:
            print(f"  {Colors.RED}{error}{Colors.ENDC}")
        _fail("Build failed.")


def _handle_build(args):
    from context_bridge.core.config import load_config
    from context_bridge.core.types import AIPlatform
    from context_bridge.services.storage_service import default_context_path, save_context

    platform = AIPlatform.parse(args.platform)
    print(f"{Colors.HEADER}Building {platform.display_name} context...{Colors.ENDC}")
    context = _build_context(args.platform, args.path, args.verbose)
    output = args.output or default_context_path(load_config().output_dir, platform)
    written = save_context(context, output)
    print(f"{Colors.GREEN}Context written to {written}{Colors.ENDC}")


def _resolve_source(args):
    from context_bridge.core.types import AIPlatform
    from context_bridge.services.detector_service import PlatformDetector

    if args.source:
        return AIPlatform.parse(args.source)
    primary = PlatformDetector().detect_primary(args.path)
    if primary is None:
        _fail(f"No AI IDE configuration found in {Path(args.path).resolve()}; pass --from.")
    return primary


def _resolve_target(args, source):
    from context_bridge.core.config import load_config
    from context_bridge.core.types import AIPlatform

    if args.target:
        return AIPlatform.parse(args.target)
    default = load_config().default_target
    if default:
        return AIPlatform.parse(default)
    if args.no_interactive:
        _fail("No target platform given; pass --to.")

    from context_bridge.tui import select_target_platform

    target = select_target_platform(source)
    if target is None:
        print(f"{Colors.YELLOW}Cancelled.{Colors.ENDC}")
        sys.exit(130)
    return target


def _handle_convert(args):
    from context_bridge.core.config import load_config
    from context_bridge.core.context import get_source_platform
    from context_bridge.core.errors import ContextValidationError
    from context_bridge.core.types import DeployOptions, MergeStrategy, ReverseMappingOptions
    from context_bridge.services.convert_service import ContextConverterService, ConversionOptions
    from context_bridge.services.storage_service import load_context, save_context

    if args.input:
        try:
            context = load_context(args.input, verbose=args.verbose)
        except (FileNotFoundError, ContextValidationError) as e:
            _fail(str(e))
        source = get_source_platform(context)
        if source is None:
            _fail("Cannot determine the source platform of the context.")
    else:
        source = _resolve_source(args)
        context = _build_context(source.value, args.path, args.verbose)

    target = _resolve_target(args, source)
    print(f"{Colors.HEADER}Converting {source.display_name} -> {target.display_name}...{Colors.ENDC}")

    config = load_config()
    mapping_options = ReverseMappingOptions(
        merge_strategy=MergeStrategy(config.merge_strategy),
        validate_integrity=config.validate_integrity,
    )
    service = ContextConverterService(verbose=args.verbose)
    result = service.convert(context, target, ConversionOptions(force=args.force, mapping_options=mapping_options))
    if not result.success:
        for warning in result.warnings:
            print(f"  {Colors.YELLOW}Warning: {warning}{Colors.ENDC}")
        _fail(result.error or "Conversion failed.")

    for feature in result.unsupported_features:
        print(f"  {Colors.YELLOW}Unsupported: {feature}{Colors.ENDC}")
    for approx in result.approximations:
        print(f"  {Colors.CYAN}~ {approx.source_feature} -> {approx.target_feature} ({approx.confidence}){Colors.ENDC}")

    if args.output:
        written = save_context(result.context, args.output)
        print(f"{Colors.GREEN}Converted context written to {written}{Colors.ENDC}")

    if args.deploy:
        options = DeployOptions(overwrite=args.force, backup=args.backup)
        _deploy(result.context, target, args.target_path, options, confirm=False)
    elif not args.output:
        print(json.dumps(result.context, indent=2, ensure_ascii=False))


def _deploy(context, platform, target_path: str, options, confirm: bool):
    from context_bridge.core.strategy import converter_registry

    converter = converter_registry.for_target(platform)
    if converter is None:
        _fail(f"No deployer available for {platform.display_name}")
    if confirm and not options.dry_run:
        from context_bridge.tui import confirm_deploy

        if not confirm_deploy(platform, Path(target_path)):
            print(f"{Colors.YELLOW}Cancelled.{Colors.ENDC}")
            return

    result = converter.deploy(context, target_path, options)
    for rel in result.deployed_files:
        print(f"  {Colors.GREEN}✓ {rel}{Colors.ENDC}")
    for warning in result.warnings:
        print(f"  {Colors.YELLOW}{warning}{Colors.ENDC}")
    if not result.success:
        for error in result.errors:
            print(f"  {Colors.RED}{error}{Colors.ENDC}")
        _fail("Deploy failed; files listed above were written.")
    if options.dry_run:
        print(f"{Colors.CYAN}Dry run: {len(result.deployed_files)} file(s) would be written{Colors.ENDC}")
        return
    print(f"{Colors.GREEN}Deployed {len(result.deployed_files)} file(s) for {platform.display_name}{Colors.ENDC}")
    if result.skipped_files:
        print(f"{Colors.YELLOW}Kept {len(result.skipped_files)} existing file(s); use --force to overwrite{Colors.ENDC}")


def _handle_deploy(args):
    from context_bridge.core.context import get_source_platform
    from context_bridge.core.errors import ContextValidationError
    from context_bridge.core.types import AIPlatform, DeployOptions
    from context_bridge.services.storage_service import load_context

    try:
        context = load_context(args.input, verbose=args.verbose)
    except (FileNotFoundError, ContextValidationError) as e:
        _fail(str(e))
    platform = AIPlatform.parse(args.platform) if args.platform else get_source_platform(context)
    if platform is None:
        _fail("Cannot determine which platform to deploy; pass --platform.")
    options = DeployOptions(overwrite=args.force, backup=args.backup, dry_run=args.dry_run)
    _deploy(context, platform, args.target_path, options, confirm=not args.force)


def _handle_list():
    from context_bridge.mapping.reverse import get_reverse_mapping_service
    from context_bridge.services.convert_service import ContextConverterService

    print(f"{Colors.HEADER}Available conversions:{Colors.ENDC}")
    for source, target in ContextConverterService().get_available_conversions():
        print(f"  {source.display_name:<12} -> {target.display_name}")

    print(f"\n{Colors.HEADER}Reverse mappings:{Colors.ENDC}")
    for key, count in get_reverse_mapping_service().get_available_reverse_mappings().items():
        print(f"  {key:<24} {count} mapping(s)")


if __name__ == "__main__":
    main()
