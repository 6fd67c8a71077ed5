import asyncio
import base64

import pytest

from report_engine.errors import FileIngestionError
from report_engine.file_reader import FileReader, RawUpload, decode_data_url, split_data_url, to_data_url
from report_engine.schemas import PreviewCategory


class BrokenUpload:
    filename = "broken.bin"
    content_type = "application/octet-stream"

    async def read(self):
        raise OSError("disk went away")


@pytest.fixture
def reader(blob_store):
    return FileReader(blob_store)


def test_text_file_is_decoded(reader, text_upload):
    record = asyncio.run(reader.read(text_upload))
    assert record.name == "report.txt"
    assert record.size == 19
    assert record.type == "text/plain"
    assert record.preview_type == PreviewCategory.TEXT
    assert record.content == "Q3 outlook positive"
    assert record.preview_url is None
    assert record.blob_url is None


def test_image_gets_data_url_preview(reader, png_upload):
    record = asyncio.run(reader.read(png_upload))
    assert record.preview_type == PreviewCategory.IMAGE
    assert record.content.startswith("data:image/png;base64,")
    assert record.preview_url == record.content
    assert decode_data_url(record.content) == png_upload.data


def test_pdf_gets_live_blob_reference(reader, pdf_upload, blob_store):
    record = asyncio.run(reader.read(pdf_upload))
    assert record.preview_type == PreviewCategory.PDF
    assert record.content.startswith("data:application/pdf;base64,")
    assert record.blob_url.startswith("blob:")
    assert blob_store.is_live(record.blob_url)
    with open(blob_store.resolve(record.blob_url), "rb") as f:
        assert f.read() == pdf_upload.data


def test_missing_type_defaults_to_octet_stream(reader):
    record = asyncio.run(reader.read(RawUpload("blob.dat", None, b"\x00\x01")))
    assert record.type == "application/octet-stream"
    assert record.preview_type == PreviewCategory.UNSUPPORTED


def test_text_suffix_without_declared_type(reader):
    record = asyncio.run(reader.read(RawUpload("notes.md", "", b"# Heading")))
    assert record.preview_type == PreviewCategory.TEXT
    assert record.content == "# Heading"


def test_empty_file_is_accepted(reader):
    record = asyncio.run(reader.read(RawUpload("empty.txt", "text/plain", b"")))
    assert record.size == 0
    assert record.content == ""


def test_invalid_utf8_text_fails(reader):
    with pytest.raises(FileIngestionError) as exc:
        asyncio.run(reader.read(RawUpload("bad.txt", "text/plain", b"\xff\xfe\xfa")))
    assert exc.value.name == "bad.txt"


def test_oversized_file_fails(blob_store):
    reader = FileReader(blob_store, max_bytes=4)
    with pytest.raises(FileIngestionError):
        asyncio.run(reader.read(RawUpload("big.txt", "text/plain", b"12345")))


def test_ids_are_unique(reader, text_upload):
    first = asyncio.run(reader.read(text_upload))
    second = asyncio.run(reader.read(text_upload))
    assert first.id != second.id


def test_batch_isolates_failures(reader, text_upload, png_upload):
    uploads = [text_upload, BrokenUpload(), png_upload]
    records, failures = asyncio.run(reader.read_batch(uploads))
    assert [r.name for r in records] == ["report.txt", "chart.png"]
    assert len(failures) == 1
    assert failures[0].name == "broken.bin"
    assert "disk went away" in failures[0].reason


def test_data_url_helpers():
    url = to_data_url(b"abc", "image/gif")
    assert url == "data:image/gif;base64," + base64.b64encode(b"abc").decode()
    assert split_data_url(url) == ("image/gif", base64.b64encode(b"abc").decode())
    assert split_data_url("plain text") is None
    assert decode_data_url(None) is None
