"""
Unit tests for image ingestion.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from CS_Libs.ImageLib.ingestion import ImageIngestor, is_supported_extension, read_upload
from CS_Libs.errors import CapacityExceededError, UnsupportedFormatError, ValidationError


class TestCheckCapacity:
    """Tests for ImageIngestor.check_capacity."""

    def test_allows_up_to_cap(self):
        ImageIngestor().check_capacity(59, 1)
        ImageIngestor().check_capacity(0, 60)

    def test_rejects_over_cap(self):
        with pytest.raises(CapacityExceededError):
            ImageIngestor().check_capacity(59, 2)

    def test_custom_cap(self):
        with pytest.raises(ValidationError):
            ImageIngestor(max_images=2).check_capacity(0, 3)


class TestSubmit:
    """Tests for ImageIngestor.submit."""

    def test_png_resolves_to_record(self, make_image_bytes):
        data = make_image_bytes((200, 40, 40, 255))

        future = ImageIngestor().submit("red.png", data)
        record = future.result()

        assert future.done()
        assert record.name == "red.png"
        assert record.color == (192, 32, 32)
        assert record.weight == 3
        assert record.source == data
        assert record.is_loaded
        assert record.size == (10, 10)

    def test_jpeg_is_accepted(self, make_image_bytes):
        record = ImageIngestor().submit("photo.jpg", make_image_bytes((10, 10, 200), fmt="JPEG")).result()

        assert record.raster.mode == "RGBA"

    @pytest.mark.parametrize("fmt", ["GIF", "BMP"])
    def test_other_encodings_rejected(self, make_image_bytes, fmt):
        with pytest.raises(UnsupportedFormatError):
            ImageIngestor().submit("image.bin", make_image_bytes((1, 2, 3), fmt=fmt))

    def test_garbage_rejected(self):
        with pytest.raises(UnsupportedFormatError, match="notes.png"):
            ImageIngestor().submit("notes.png", b"hello world")

    def test_ids_are_unique(self, make_image_bytes):
        data = make_image_bytes((1, 2, 3))
        ingestor = ImageIngestor()

        ids = {ingestor.submit("same.png", data).result().id for _ in range(20)}

        assert len(ids) == 20

    def test_executor_returns_pending_future(self, make_image_bytes):
        data = make_image_bytes((0, 200, 0))

        with ThreadPoolExecutor(max_workers=1) as executor:
            future = ImageIngestor(executor=executor).submit("green.png", data)
            record = future.result(timeout=10)

        assert record.color == (0, 192, 0)


class TestReadUpload:
    """Tests for read_upload and is_supported_extension."""

    def test_reads_file(self, tmp_path, make_image_bytes):
        path = tmp_path / "pic.png"
        path.write_bytes(make_image_bytes((1, 2, 3)))

        name, data = read_upload(path)

        assert name == "pic.png"
        assert data == path.read_bytes()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_upload(tmp_path / "missing.png")

    def test_directory(self, tmp_path):
        with pytest.raises(ValueError):
            read_upload(tmp_path)

    def test_supported_extensions(self):
        assert is_supported_extension(Path("a.PNG"))
        assert is_supported_extension(Path("a.jpeg"))
        assert not is_supported_extension(Path("a.gif"))
