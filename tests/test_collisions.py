"""
Test collision resolution, content hashing and safe copies.
"""

import hashlib
import io
from datetime import datetime

import pytest

from irissort.collisions import CollisionAction, CollisionResolver
from irissort.exceptions import CollisionLimitError
from irissort.file_operations import FileOperations

from conftest import jpeg_bytes


TIMESTAMP = datetime(2023, 7, 4, 10, 15, 30)


def place(output_dir, name, content):
    folder = output_dir / "2023-2"
    folder.mkdir(parents=True, exist_ok=True)
    (folder / name).write_bytes(content)
    return folder / name


class TestCollisionResolver:
    """Existing destinations are either verified duplicates or get a counter."""

    def test_free_path(self, output_dir):
        resolver = CollisionResolver(output_dir)
        resolution = resolver.resolve(io.BytesIO(jpeg_bytes()), TIMESTAMP, ".jpg")
        assert resolution.action is CollisionAction.PLACE
        assert resolution.path == output_dir / "2023-2" / "2023-07-04_10-15-30.jpg"
        assert resolution.counter == 0

    def test_identical_content_is_duplicate(self, output_dir):
        content = jpeg_bytes(b"same")
        existing = place(output_dir, "2023-07-04_10-15-30.jpg", content)
        resolver = CollisionResolver(output_dir)
        resolution = resolver.resolve(io.BytesIO(content), TIMESTAMP, ".jpg")
        assert resolution.action is CollisionAction.SKIP_DUPLICATE
        assert resolution.path == existing
        assert resolution.is_duplicate

    def test_duplicate_with_source_removal(self, output_dir):
        content = jpeg_bytes(b"same")
        place(output_dir, "2023-07-04_10-15-30.jpg", content)
        resolver = CollisionResolver(output_dir, remove_duplicates=True)
        resolution = resolver.resolve(io.BytesIO(content), TIMESTAMP, ".jpg")
        assert resolution.action is CollisionAction.SKIP_DUPLICATE_REMOVE_SOURCE

    def test_different_content_gets_counter(self, output_dir):
        place(output_dir, "2023-07-04_10-15-30.jpg", jpeg_bytes(b"first"))
        place(output_dir, "2023-07-04_10-15-30_1.jpg", jpeg_bytes(b"second"))
        resolver = CollisionResolver(output_dir)
        resolution = resolver.resolve(io.BytesIO(jpeg_bytes(b"third")), TIMESTAMP, ".jpg")
        assert resolution.action is CollisionAction.PLACE
        assert resolution.path.name == "2023-07-04_10-15-30_2.jpg"
        assert resolution.counter == 2

    def test_duplicate_found_behind_counter(self, output_dir):
        place(output_dir, "2023-07-04_10-15-30.jpg", jpeg_bytes(b"first"))
        place(output_dir, "2023-07-04_10-15-30_1.jpg", jpeg_bytes(b"second"))
        resolver = CollisionResolver(output_dir)
        resolution = resolver.resolve(io.BytesIO(jpeg_bytes(b"second")), TIMESTAMP, ".jpg")
        assert resolution.action is CollisionAction.SKIP_DUPLICATE
        assert resolution.path.name == "2023-07-04_10-15-30_1.jpg"

    def test_extension_case_distinguishes_paths(self, output_dir):
        place(output_dir, "2023-07-04_10-15-30.jpg", jpeg_bytes(b"first"))
        resolver = CollisionResolver(output_dir)
        resolution = resolver.resolve(io.BytesIO(jpeg_bytes(b"other")), TIMESTAMP, ".JPG")
        # Case-insensitive file systems see the lower-case file as taken
        assert resolution.path.name in ("2023-07-04_10-15-30.JPG", "2023-07-04_10-15-30_1.JPG")

    def test_source_position_unchanged(self, output_dir):
        place(output_dir, "2023-07-04_10-15-30.jpg", jpeg_bytes(b"first"))
        fh = io.BytesIO(jpeg_bytes(b"second"))
        fh.seek(9)
        CollisionResolver(output_dir).resolve(fh, TIMESTAMP, ".jpg")
        assert fh.tell() == 9

    def test_counter_limit(self, output_dir):
        place(output_dir, "2023-07-04_10-15-30.jpg", jpeg_bytes(b"a"))
        place(output_dir, "2023-07-04_10-15-30_1.jpg", jpeg_bytes(b"b"))
        resolver = CollisionResolver(output_dir, max_counter=1)
        with pytest.raises(CollisionLimitError):
            resolver.resolve(io.BytesIO(jpeg_bytes(b"c")), TIMESTAMP, ".jpg")


class TestFileOperations:
    """Hashing and copying work on the full file regardless of cursor position."""

    def test_hash_file_reads_whole_content(self):
        content = jpeg_bytes(b"x" * 5000)
        fh = io.BytesIO(content)
        fh.seek(512)
        assert FileOperations.hash_file(fh) == hashlib.sha256(content).hexdigest()
        assert fh.tell() == 512

    def test_hash_path(self, tmp_path):
        target = tmp_path / "a.bin"
        target.write_bytes(b"abc")
        assert FileOperations.hash_path(target) == hashlib.sha256(b"abc").hexdigest()

    def test_copy_file_copies_from_start(self, tmp_path):
        source = tmp_path / "source.jpg"
        content = jpeg_bytes(b"copy me")
        source.write_bytes(content)
        dest = tmp_path / "dest.jpg"

        with open(source, "rb") as fh:
            fh.read(100)
            FileOperations().copy_file(fh, source, dest)
            assert fh.tell() == 100

        assert dest.read_bytes() == content

    def test_copy_file_never_overwrites(self, tmp_path):
        source = tmp_path / "source.jpg"
        source.write_bytes(jpeg_bytes(b"new"))
        dest = tmp_path / "dest.jpg"
        dest.write_bytes(b"existing")

        with open(source, "rb") as fh:
            with pytest.raises(FileExistsError):
                FileOperations().copy_file(fh, source, dest)

        assert dest.read_bytes() == b"existing"

    def test_copy_file_removes_partial_destination(self, tmp_path, monkeypatch):
        source = tmp_path / "source.jpg"
        source.write_bytes(jpeg_bytes())
        dest = tmp_path / "dest.jpg"

        def failing_copy(src, dst, length=0):
            dst.write(b"partial")
            raise OSError("disk full")

        monkeypatch.setattr("irissort.file_operations.shutil.copyfileobj", failing_copy)
        with open(source, "rb") as fh:
            with pytest.raises(OSError):
                FileOperations().copy_file(fh, source, dest)

        assert not dest.exists()

    def test_delete_safely(self, tmp_path):
        target = tmp_path / "a.jpg"
        target.write_bytes(b"a")
        file_ops = FileOperations()
        assert file_ops.delete_safely(target, None, tmp_path / "missing.jpg")
        assert not target.exists()
