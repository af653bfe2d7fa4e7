"""
Directory precondition checks performed before any file is processed.
"""

import os
from pathlib import Path

from .config import SortConfig
from .exceptions import PreconditionError


def check_directory_access(path: Path, label: str, write: bool) -> None:
    """Require path to be an existing directory with read (and write) access."""
    if not path.exists():
        raise PreconditionError(f"{label} folder does not exist: {path}")
    if not path.is_dir():
        raise PreconditionError(f"{label} is not a directory: {path}")

    mode = os.R_OK | os.X_OK
    if write:
        mode |= os.W_OK
    if not os.access(path, mode):
        access = "write and/or read" if write else "read"
        raise PreconditionError(f"No {access} permission for {label.lower()} folder: {path}")


def check_output_directory(output_path: Path) -> None:
    check_directory_access(output_path, "Output", write=True)


def check_input_directory(input_path: Path, write: bool) -> None:
    check_directory_access(input_path, "Input", write=write)


def check_preconditions(config: SortConfig) -> None:
    """Validate every configured directory, raising PreconditionError on failure.

    Inputs must be writable when sources may be deleted. The output may not
    live inside an input, or it would be walked as a source, and an input may
    not live inside the output, where every file would match itself.
    """
    check_output_directory(config.output_path)

    needs_write = config.move_files or config.remove_duplicates
    for input_path in config.input_paths:
        check_input_directory(input_path, write=needs_write)

        if (input_path == config.output_path or input_path in config.output_path.parents
                or config.output_path in input_path.parents):
            raise PreconditionError(
                f"Output folder {config.output_path} overlaps input folder {input_path}")
