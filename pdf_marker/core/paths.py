import argparse
import logging
import os
from pathlib import Path
from typing import List, Optional

from pdf_marker.core.style import DEFAULT_FONT_SIZE, DEFAULT_LABEL

logger = logging.getLogger(__name__)

# Limits and filters
MAX_FILE_SIZE = 100 * 1024 * 1024  # 100MB
ALLOWED_EXTENSIONS = [".pdf"]

DEFAULT_SEARCH_DIRECTORIES = [
    os.path.expanduser("~/Downloads"),
    os.path.expanduser("~/Documents"),
    os.getcwd(),
]

# Actual configured directories (initialized at runtime)
SEARCH_DIRECTORIES: List[str] = []


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse CLI arguments: accessible directories, limits and marker text style."""
    parser = argparse.ArgumentParser(
        description="PDF Marker MCP Server: split a PDF into pages and stamp text markers onto them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "\nExamples:\n"
            "  python main.py ~/Downloads ~/Documents\n"
            "  python main.py --allow-dir ~/Work --font ~/fonts/Montserrat-Light.ttf\n"
            "  python main.py ~/Downloads --font-size 14 --label 'Checked' --log-level DEBUG\n"
        ),
    )

    parser.add_argument(
        "directories",
        nargs="*",
        help="Accessible directories for PDFs (space-separated); exports are written to the first one",
    )
    parser.add_argument(
        "--allow-dir",
        action="append",
        dest="allowed_dirs",
        help="Add an allowed directory (can be used multiple times)",
    )
    parser.add_argument(
        "--max-file-size",
        type=int,
        default=100 * 1024 * 1024,
        help="Maximum file size in bytes (default: 100MB)",
    )
    parser.add_argument(
        "--font",
        default=None,
        help="TrueType font used for marker text (default: built-in Helvetica)",
    )
    parser.add_argument(
        "--font-size",
        type=float,
        default=DEFAULT_FONT_SIZE,
        help=f"Marker text size in points (default: {DEFAULT_FONT_SIZE:g})",
    )
    parser.add_argument(
        "--label",
        default=DEFAULT_LABEL,
        help=f"Text stamped when a drop does not carry its own label (default: {DEFAULT_LABEL!r})",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def _is_within(base: str, target: str) -> bool:
    base = os.path.join(os.path.realpath(base), "")  # ensure trailing separator
    target = os.path.realpath(target)
    return target.startswith(base) or target == base[:-1]


def setup_search_directories(args) -> None:
    """Configure SEARCH_DIRECTORIES and MAX_FILE_SIZE from parsed args.
    Falls back to DEFAULT_SEARCH_DIRECTORIES when none are provided.
    """
    global MAX_FILE_SIZE

    MAX_FILE_SIZE = int(args.max_file_size)

    provided: List[str] = []
    if getattr(args, "directories", None):
        provided.extend(args.directories)
    if getattr(args, "allowed_dirs", None):
        provided.extend(args.allowed_dirs)

    validated: List[str] = []
    for d in provided:
        real_path = os.path.realpath(os.path.abspath(os.path.expanduser(d)))
        try:
            if not os.path.exists(real_path):
                logger.info(f"Creating directory: {real_path}")
                os.makedirs(real_path, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory '{d}': {e}")
            continue
        if not os.path.isdir(real_path):
            logger.warning(f"Not a directory, skipped: {d} -> {real_path}")
            continue
        if not os.access(real_path, os.R_OK):
            logger.warning(f"Unreadable directory, skipped: {d} -> {real_path}")
            continue
        validated.append(real_path)

    if not validated:
        if provided:
            logger.warning("No valid directories from arguments; falling back to defaults.")
        else:
            logger.info("Using default search directories.")
        validated = [os.path.realpath(os.path.abspath(d)) for d in DEFAULT_SEARCH_DIRECTORIES]

    # mutate in place so modules holding a reference see the update
    SEARCH_DIRECTORIES.clear()
    SEARCH_DIRECTORIES.extend(validated)


def validate_and_resolve_path(file_path: str) -> Optional[Path]:
    """Return an absolute Path if `file_path` is an allowed, readable PDF; otherwise None."""
    try:
        return _validate(file_path)
    except (OSError, ValueError) as e:
        logger.error(f"Error validating path {file_path!r}: {e}")
        return None


def _validate(file_path: str) -> Optional[Path]:
    expanded = os.path.expanduser(file_path)
    real_path = os.path.realpath(os.path.abspath(expanded))

    is_safe = any(_is_within(allowed, real_path) for allowed in SEARCH_DIRECTORIES)
    if not is_safe or ".." in Path(file_path).parts:
        logger.warning(f"Security risk detected (outside allowed directories): {file_path}")
        return None

    resolved = Path(real_path)
    if not resolved.is_file():
        return None
    if resolved.suffix.lower() not in ALLOWED_EXTENSIONS:
        logger.warning(f"Disallowed file extension: {file_path}")
        return None
    if resolved.stat().st_size > MAX_FILE_SIZE:
        logger.warning(f"File too large: {file_path}")
        return None
    return resolved


def find_file(file_name: str) -> Optional[Path]:
    """Resolve an absolute path, or look the name up inside the configured directories."""
    if os.path.isabs(file_name) or file_name.startswith("~"):
        return validate_and_resolve_path(file_name)

    for directory in SEARCH_DIRECTORIES:
        path = validate_and_resolve_path(str(Path(directory) / file_name))
        if path:
            return path

    logger.warning(f"File not found: {file_name}")
    return None


def resolve_output_path(file_name: str) -> Optional[Path]:
    """Where an exported PDF named `file_name` may be written, or None if not allowed.

    Bare names land in the first configured directory.
    """
    if not SEARCH_DIRECTORIES:
        return None
    try:
        return _output_path(file_name)
    except (OSError, ValueError) as e:
        logger.error(f"Error resolving output path {file_name!r}: {e}")
        return None


def _output_path(file_name: str) -> Optional[Path]:
    name = file_name if file_name.lower().endswith(".pdf") else f"{file_name}.pdf"
    if os.path.isabs(name) or name.startswith("~"):
        candidate = os.path.realpath(os.path.expanduser(name))
    else:
        candidate = os.path.realpath(os.path.join(SEARCH_DIRECTORIES[0], name))
    if ".." in Path(name).parts or not any(_is_within(d, candidate) for d in SEARCH_DIRECTORIES):
        logger.warning(f"Refusing to write outside allowed directories: {file_name}")
        return None
    if not os.path.isdir(os.path.dirname(candidate)):
        logger.warning(f"Output directory does not exist: {os.path.dirname(candidate)}")
        return None
    return Path(candidate)
