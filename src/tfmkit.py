"""tfmkit - target framework monikers, NuGet version ranges and .nupkg archives.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys
from typing import Any, Dict, List

from args import parse_args
from cli_config import (
    ConfigError,
    apply_config_overrides,
    build_provider_from_config,
    load_config,
)
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from frameworks import (
    Framework,
    FrameworkError,
    NameProvider,
    parse_framework,
    parse_framework_strict,
)
from nupkg import (
    InvalidPackageArchiveError,
    PackageArchiveReader,
    PackageBuilder,
    PackageError,
    PackageValidationError,
)
from nuspec import NuspecError, read_nuspec
from versioning import NuGetVersion, VersionParseError, VersionRange
from versioning.formatter import format_range

logger = logging.getLogger(__name__)


def describe_framework(framework: Framework, provider: NameProvider) -> Dict[str, Any]:
    """JSON-ready description of a parsed framework."""
    short_name = None
    if framework.is_specific:
        try:
            short_name = framework.short_folder_name(provider)
        except FrameworkError as exc:
            logger.warning("No short folder name for %r: %s", framework, exc)
    return {
        "identifier": framework.identifier,
        "version": str(framework.version),
        "profile": framework.profile,
        "platform": framework.platform,
        "platform_version": str(framework.platform_version),
        "short_folder_name": short_name,
        "full_moniker": framework.full_moniker(provider),
        "is_specific": framework.is_specific,
    }


def run_framework(args, provider: NameProvider) -> int:
    results: List[Dict[str, Any]] = []
    for token in args.TOKENS:
        if args.STRICT:
            try:
                framework = parse_framework_strict(token, provider)
            except FrameworkError as exc:
                logging.error("Couldn't parse framework '%s': %s", token, exc)
                return ExitCodes.INVALID_INPUT.value
        else:
            framework = parse_framework(token, provider)
        entry = describe_framework(framework, provider)
        entry["token"] = token
        results.append(entry)
    print(json.dumps(results, indent=2))
    return ExitCodes.SUCCESS.value


def run_profile(args, provider: NameProvider) -> int:
    frameworks = []
    for token in args.TOKENS:
        try:
            frameworks.append(parse_framework_strict(token, provider))
        except FrameworkError as exc:
            logging.error("Couldn't parse framework '%s': %s", token, exc)
            return ExitCodes.INVALID_INPUT.value
    number = provider.get_portable_profile(frameworks)
    print(json.dumps({
        "frameworks": [f.short_folder_name(provider) for f in frameworks],
        "profile": f"Profile{number}" if number >= 0 else None,
        "profile_number": number,
    }, indent=2))
    return ExitCodes.SUCCESS.value


def run_range(args) -> int:
    try:
        version_range = VersionRange.parse(args.RANGE)
        versions = [NuGetVersion.parse(v) for v in args.VERSIONS]
    except VersionParseError as exc:
        logging.error("Invalid version input: %s", exc)
        return ExitCodes.INVALID_INPUT.value
    best = version_range.find_best_match(versions)
    print(json.dumps({
        "range": args.RANGE,
        "formatted": format_range(args.FORMAT, version_range),
        "pretty": version_range.pretty_print(),
        "satisfies": {str(v): version_range.satisfies(v) for v in versions},
        "best_match": str(best) if best is not None else None,
    }, indent=2))
    return ExitCodes.SUCCESS.value


def run_inspect(args, provider: NameProvider) -> int:
    try:
        with PackageArchiveReader(args.PACKAGE, provider) as reader:
            nuspec = reader.nuspec()
            info = reader.get_dependency_info()
            frameworks = reader.get_supported_frameworks()
            files = reader.get_files()
    except (InvalidPackageArchiveError, NuspecError) as exc:
        logging.error("Couldn't read package %s: %s", args.PACKAGE, exc)
        return ExitCodes.FILE_ERROR.value

    print(json.dumps({
        "id": nuspec.metadata.id,
        "version": nuspec.metadata.version,
        "dependency_groups": [
            {
                "target_framework": group.target_framework.full_moniker(provider),
                "dependencies": [
                    {
                        "id": dep.id,
                        "range": dep.version.to_normalized_string() if dep.version else None,
                    }
                    for dep in group.packages
                ],
            }
            for group in info.dependency_groups
        ],
        "supported_frameworks": [f.short_folder_name(provider) for f in frameworks],
        "files": files,
    }, indent=2))
    return ExitCodes.SUCCESS.value


def run_pack(args, provider: NameProvider) -> int:
    try:
        nuspec = read_nuspec(args.NUSPEC)
    except NuspecError as exc:
        logging.error("Couldn't read nuspec %s: %s", args.NUSPEC, exc)
        return ExitCodes.FILE_ERROR.value

    base_path = args.BASE_PATH or os.path.dirname(os.path.abspath(args.NUSPEC))
    builder = PackageBuilder(
        include_empty_directories=args.INCLUDE_EMPTY_DIRECTORIES,
        deterministic=args.DETERMINISTIC,
        provider=provider,
    )
    try:
        builder.populate_from_nuspec(nuspec)
        builder.populate_files(base_path, nuspec.files)
    except (PackageError, NuspecError, FrameworkError) as exc:
        logging.error("Couldn't prepare package: %s", exc)
        return ExitCodes.INVALID_INPUT.value

    output = args.OUTPUT or (
        f"{builder.id}.{builder.version.to_normalized_string() if builder.version else '0.0.0'}"
        f"{Constants.PACKAGE_EXTENSION}"
    )
    try:
        with open(output, "wb") as fh:
            builder.save(fh)
    except PackageValidationError as exc:
        for message in exc.messages:
            logging.error("%s", message)
        _remove_partial(output)
        return ExitCodes.INVALID_INPUT.value
    except PackageError as exc:
        logging.error("%s", exc)
        _remove_partial(output)
        return ExitCodes.INVALID_INPUT.value
    except OSError as exc:
        logging.error("Couldn't write package %s: %s", output, exc)
        return ExitCodes.FILE_ERROR.value

    logging.info("Created package %s", output)
    print(json.dumps({"package": output, "files": len(builder.files)}, indent=2))
    return ExitCodes.SUCCESS.value


def _remove_partial(path: str) -> None:
    try:
        os.remove(path)
    except OSError as exc:
        logger.debug("Couldn't remove partial package %s: %s", path, exc)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel/--logfile by passing them to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    if getattr(args, "LOG_FILE", None):
        os.environ[Constants.ENV_LOG_FILE] = args.LOG_FILE
    configure_logging()

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND),
        )

    try:
        cfg = load_config(args.CONFIG)
        apply_config_overrides(cfg)
        provider = build_provider_from_config(cfg)
    except ConfigError as exc:
        logging.error("%s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)

    if args.COMMAND == "framework":
        code = run_framework(args, provider)
    elif args.COMMAND == "profile":
        code = run_profile(args, provider)
    elif args.COMMAND == "range":
        code = run_range(args)
    elif args.COMMAND == "inspect":
        code = run_inspect(args, provider)
    else:
        code = run_pack(args, provider)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action=args.COMMAND,
                outcome="success" if code == ExitCodes.SUCCESS.value else "failure",
            ),
        )
    sys.exit(code)


if __name__ == "__main__":
    main()
