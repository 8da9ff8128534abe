"""packintake: validate a package submission from its repository URL.

Subcommands:
    validate   resolve the repository and run the validation chain
    normalize  print the canonical repository URL
    sort       order version records, most relevant first
"""

import json
import logging
import os
import sys

from args import parse_args
from analysis.repository_validator import RepositoryValidator
from analysis.violations import ViolationKind
from cli_config import apply_config, apply_env_overrides, build_name_policy, load_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from package_candidate import PackageCandidate
from repository.url_normalize import inspect_location
from versioning.models import VersionRecord
from versioning.sorter import sort_versions

logger = logging.getLogger(__name__)

_LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _setup_logging(args):
    """Configure logging from --loglevel and --logfile."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(_LOG_FILE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def export_json(candidate, violations, path):
    """Write the validation outcome to a JSON file.

    Args:
        candidate (PackageCandidate): The validated candidate.
        violations (list): Violations found, empty on acceptance.
        path (str): File path to export the JSON.
    """
    data = {
        "accepted": not violations,
        "package": candidate.to_dict(),
        "violations": [v.to_dict() for v in violations],
    }
    try:
        with open(path, "w", encoding="utf-8") as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def run_validate(args, policy):
    """Resolve and validate one repository, returning the exit code."""
    candidate = PackageCandidate.from_repository(args.URL, name=args.NAME or "")
    violations = candidate.validate(validator=RepositoryValidator(policy))

    if args.OUTPUT:
        export_json(candidate, violations, args.OUTPUT)

    if not violations:
        print(f"{candidate.name} {candidate.repository}")
        return ExitCodes.SUCCESS

    for violation in violations:
        print(f"{violation.path}: {violation.message}")
    if any(v.kind is ViolationKind.TRANSPORT_FAILURE for v in violations):
        return ExitCodes.CONNECTION_ERROR
    return ExitCodes.VALIDATION_FAILED


def run_normalize(args):
    location = inspect_location(args.URL)
    if location.problem is None:
        print(location.url)
    else:
        print(f"{location.url} ({location.problem.value})")
    return ExitCodes.SUCCESS


def load_version_records(path):
    """Load a JSON list of version records.

    Args:
        path (str): Path to the JSON file.

    Returns:
        list: VersionRecord instances, or None when the file is unusable.
    """
    try:
        with open(path, "r", encoding="utf-8") as file:
            data = json.load(file)
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        return None
    except (OSError, ValueError) as e:
        logging.error("Could not read version records: %s, aborting", e)
        return None
    if not isinstance(data, list):
        logging.error("Version file %s must hold a JSON list", path)
        return None
    try:
        return [VersionRecord.from_dict(item) for item in data]
    except (AttributeError, TypeError, ValueError) as e:
        logging.error("Invalid version record in %s: %s", path, e)
        return None


def run_sort(args):
    records = load_version_records(args.FILE)
    if records is None:
        return ExitCodes.FILE_ERROR
    for record in sort_versions(records):
        print(record.normalized_version)
    return ExitCodes.SUCCESS


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    cfg = load_config(getattr(args, "CONFIG", None))
    apply_config(cfg)
    apply_env_overrides()

    if args.action == "validate":
        code = run_validate(args, build_name_policy(cfg))
    elif args.action == "normalize":
        code = run_normalize(args)
    else:
        code = run_sort(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action=args.action,
                outcome=code.name.lower()
            )
        )
    sys.exit(code.value)


if __name__ == "__main__":
    main()
