"""Composition root for the groupsplit partitioner.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Splitter selection
- Split run and exit code mapping
"""

import json
import logging
import sys

from pydantic import ValidationError

from groupsplit.adapters.discovery.filesystem import FilesystemDiscovery
from groupsplit.adapters.loader.annotations import DependencyMarkerReader
from groupsplit.adapters.loader.modules import ModuleCache
from groupsplit.adapters.loader.pytest_ast import PytestModuleLoader, module_patterns
from groupsplit.adapters.writer.text_file import TextFileGroupWriter
from groupsplit.config import Settings, load_settings
from groupsplit.core.errors import ConfigurationError, DiscoveryError
from groupsplit.core.file_splitter import CapacityFileSplitter, RoundRobinFileSplitter
from groupsplit.core.models import SplitConfig, SplitResult
from groupsplit.core.ports import SplitterPort
from groupsplit.core.record_splitter import RecordSplitter
from groupsplit.core.split_service import SplitService

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


class JsonLogFormatter(logging.Formatter):
    """Formats each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    # Map string level to logging constant
    level = getattr(logging, log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    logging.basicConfig(level=level, handlers=[handler])


def build_splitter(settings: Settings, config: SplitConfig) -> SplitterPort:
    """Instantiate the splitter selected by ``settings.split_mode``.

    Raises:
        ConfigurationError: If the split mode is not recognized.
    """
    logger = logging.getLogger(__name__)
    discovery = FilesystemDiscovery()

    if settings.split_mode == "tests":
        # Loader and annotation reader share one cache so each module is parsed once.
        modules = ModuleCache(config.project_root)
        loader = PytestModuleLoader(
            project_root=config.project_root,
            discovery=discovery,
            exclude=config.exclude_path,
            patterns=module_patterns(config.file_patterns),
            modules=modules,
        )
        splitter: SplitterPort = RecordSplitter(
            loader=loader,
            annotation_reader=DependencyMarkerReader(config.project_root, modules=modules),
        )
    elif settings.split_mode == "files":
        splitter = CapacityFileSplitter(discovery)
    elif settings.split_mode == "files_round_robin":
        splitter = RoundRobinFileSplitter(discovery)
    else:
        raise ConfigurationError(f"Unknown split mode: {settings.split_mode}")

    logger.info(f"Splitter: {splitter.name}")
    return splitter


def run(settings: Settings) -> SplitResult:
    """Wire adapters for ``settings`` and perform one split."""
    config = settings.to_split_config()
    service = SplitService(
        splitter=build_splitter(settings, config),
        writer=TextFileGroupWriter(),
    )
    return service.run(config)


def main(argv: list[str] | None = None) -> int:
    """Application entry point.

    Loads configuration, wires adapters, runs the selected splitter
    and writes the group files.

    Exit codes:
        0: Group files written
        1: Discovery or I/O failure
        2: Invalid configuration
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        settings = load_settings(cli_args=sys.argv[1:] if argv is None else argv)
    except ValidationError as e:
        configure_logging("INFO", "text")
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level, settings.log_format)

    try:
        result = run(settings)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except DiscoveryError as e:
        logger.error(f"Discovery failed: {e}")
        return EXIT_GENERAL_ERROR
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (SIGINT)")
        return EXIT_INTERRUPTED
    except OSError as e:
        logger.error(f"Failed to write group files: {e}", exc_info=True)
        return EXIT_GENERAL_ERROR

    if not result.written:
        logger.warning("No tests found; no group files written")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
