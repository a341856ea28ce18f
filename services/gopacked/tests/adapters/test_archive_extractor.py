import io
import tarfile

import pytest

from gopacked.adapters.archive.extractor import ArchiveExtractor
from gopacked.adapters.errors import ArchiveError


def test_expands_zip(tmp_path, make_zip):
    archive = tmp_path / "a.zip"
    archive.write_bytes(make_zip({"config/x.cfg": b"x"}))
    ArchiveExtractor().expand(archive, tmp_path / "out")
    assert (tmp_path / "out" / "config" / "x.cfg").read_bytes() == b"x"


def test_rejects_zip_member_escaping_target(tmp_path, make_zip):
    archive = tmp_path / "evil.zip"
    archive.write_bytes(make_zip({"../escape.txt": b"x"}))
    with pytest.raises(ArchiveError):
        ArchiveExtractor().expand(archive, tmp_path / "out")
    assert not (tmp_path / "escape.txt").exists()


def test_expands_tar_gz_by_suffix(tmp_path):
    archive = tmp_path / "a.tar.gz"
    with tarfile.open(archive, "w:gz") as tf:
        data = b"hello"
        info = tarfile.TarInfo("readme.txt")
        info.size = len(data)
        tf.addfile(info, io.BytesIO(data))
    ArchiveExtractor().expand(archive, tmp_path / "out")
    assert (tmp_path / "out" / "readme.txt").read_bytes() == b"hello"


def test_corrupt_archive_raises_archive_error(tmp_path):
    archive = tmp_path / "bad.zip"
    archive.write_bytes(b"garbage")
    with pytest.raises(ArchiveError) as excinfo:
        ArchiveExtractor().expand(archive, tmp_path / "out")
    assert excinfo.value.cause is not None
