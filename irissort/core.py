"""
Core media sorting functionality.
"""

import os
import stat
from pathlib import Path
from typing import Iterator, Optional

from rich.progress import Progress
from rich.table import Table

from .collisions import CollisionAction, CollisionResolver
from .config import SortConfig
from .constants import HIDDEN_PREFIX, get_console, get_logger
from .exceptions import CollisionLimitError, DestinationDirectoryError
from .file_operations import FileOperations
from .permissions import check_preconditions
from .progress import ProgressContext
from .sniffer import ContentType, classify
from .stats import FileOutcome, StatsManager
from .timestamps import TimestampResolver


def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


class MediaSorter:
    """Walks input folders and places media files into the output layout."""

    def __init__(self, config: SortConfig):
        self.config = config
        self.console = get_console()
        self.logger = get_logger()
        self.stats_manager = StatsManager()
        self.file_ops = FileOperations()
        self.timestamp_resolver = TimestampResolver(config.timezone)
        self.collision_resolver = CollisionResolver(config.output_path,
                                                    remove_duplicates=config.remove_duplicates)

    def run(self, show_progress: bool = False) -> bool:
        """Process every input folder. Returns False if any folder was aborted.

        Raises PreconditionError before touching any file if a folder is
        missing or inaccessible.
        """
        check_preconditions(self.config)

        mode = "MOVE" if self.config.move_files else "COPY"
        self.logger.info(f"Starting session: {', '.join(map(str, self.config.input_paths))} "
                         f"-> {self.config.output_path} ({mode})")

        success = True
        if show_progress:
            with Progress(console=self.console, transient=True) as progress:
                task = progress.add_task("Processing files...", total=None)
                progress_ctx = ProgressContext(progress, task)
                for input_path in self.config.input_paths:
                    success &= self.walk_root(input_path, progress_ctx)
        else:
            progress_ctx = ProgressContext()
            for input_path in self.config.input_paths:
                success &= self.walk_root(input_path, progress_ctx)

        self.logger.info("Done!")
        return success

    def walk_root(self, root: Path, progress_ctx: Optional[ProgressContext] = None) -> bool:
        """Process all media files below root.

        A destination folder that cannot be created stops this root, since
        the following files would fail the same way.
        """
        if progress_ctx is None:
            progress_ctx = ProgressContext()
        self.logger.info(f"Processing folder: {root}")

        for file_path in self.find_source_files(root):
            try:
                outcome = self.process_file(file_path)
            except DestinationDirectoryError as e:
                self.logger.error(f"{e}; stopping processing of {root}")
                self.stats_manager.increment_errors()
                return False

            progress_ctx.update(f"{outcome.value}: {file_path.name}")
            progress_ctx.advance()

        return True

    def find_source_files(self, root: Path) -> Iterator[Path]:
        """Yield regular, non-hidden files below root, depth-first in name order."""
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._log_walk_error):
            # Prune hidden folders in place so os.walk does not descend into them
            dirnames[:] = sorted(d for d in dirnames if not is_hidden(d))

            for name in sorted(filenames):
                if is_hidden(name):
                    continue

                file_path = Path(dirpath) / name
                try:
                    is_regular = stat.S_ISREG(os.lstat(file_path).st_mode)
                except OSError as e:
                    self.logger.error(f"Could not stat {file_path}: {e}")
                    continue

                if not is_regular:
                    self.logger.debug(f"Skipping non-regular file: {file_path}")
                    continue

                yield file_path

    def _log_walk_error(self, error: OSError) -> None:
        self.logger.error(f"Could not read folder: {error}")

    def process_file(self, file_path: Path) -> FileOutcome:
        """Process a single file and record its outcome.

        I/O failures only skip this file. DestinationDirectoryError is raised
        to the caller.
        """
        try:
            outcome = self._process_single_file(file_path)
        except (OSError, CollisionLimitError) as e:
            self.logger.error(f"Error processing {file_path}: {e}")
            outcome = FileOutcome.SKIPPED_ERROR

        self.stats_manager.record_outcome(outcome)
        return outcome

    def _process_single_file(self, file_path: Path) -> FileOutcome:
        with open(file_path, 'rb') as fh:
            content_type = classify(fh)
            if content_type is ContentType.UNSUPPORTED:
                self.logger.warning(f"File is not a supported image or video: {file_path}")
                return FileOutcome.SKIPPED_UNSUPPORTED

            creation_time = self.timestamp_resolver.resolve(fh, content_type, file_path)
            if creation_time is None:
                self.logger.error(f"Could not determine media creation time: {file_path}")
                return FileOutcome.SKIPPED_UNDETERMINED

            resolution = self.collision_resolver.resolve(fh, creation_time, file_path.suffix)

            if resolution.action is CollisionAction.PLACE:
                self.file_ops.ensure_directory(resolution.path.parent)
                self.file_ops.copy_file(fh, file_path, resolution.path)
                file_size = os.fstat(fh.fileno()).st_size

        # The source handle is closed before any deletion
        if resolution.is_duplicate:
            removed = False
            if resolution.action is CollisionAction.SKIP_DUPLICATE_REMOVE_SOURCE:
                if self._is_same_file(file_path, resolution.path):
                    self.logger.error(f"Source is its own destination, not removing: {file_path}")
                else:
                    removed = self.file_ops.delete_safely(file_path)
            self.stats_manager.increment_duplicates(removed=removed)
            return FileOutcome.SKIPPED_DUPLICATE

        if self.config.move_files:
            self.file_ops.delete_safely(file_path)

        self.stats_manager.record_successful_file(content_type, file_size)
        return FileOutcome.PLACED

    @staticmethod
    def _is_same_file(source: Path, dest: Path) -> bool:
        try:
            return os.path.samefile(source, dest)
        except OSError:
            return False

    def print_summary(self) -> None:
        """Print processing summary."""
        table = Table(title="Processing Summary")
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="green")

        table.add_row("Photos", str(self.stats_manager.get_photos()))
        table.add_row("Videos", str(self.stats_manager.get_videos()))
        table.add_row("Duplicates Skipped", str(self.stats_manager.get_duplicates()))
        table.add_row("Duplicates Removed", str(self.stats_manager.get_removed_duplicates()))
        table.add_row("Unsupported", str(self.stats_manager.get_unsupported()))
        table.add_row("Undetermined", str(self.stats_manager.get_undetermined()))
        table.add_row("Errors", str(self.stats_manager.get_errors()))

        # Format total size
        size_mb = self.stats_manager.get_total_size_mb()
        if size_mb > 1024:
            size_str = f"{size_mb/1024:.1f} GB"
        else:
            size_str = f"{size_mb:.1f} MB"
        table.add_row("Total Size", size_str)

        self.console.print(table)
