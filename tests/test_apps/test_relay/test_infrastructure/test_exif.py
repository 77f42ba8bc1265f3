"""Tests for EXIF sanitizing."""

import piexif
import pytest

from server.apps.relay.exceptions import MetadataReadError, MetadataSaveError
from server.apps.relay.infrastructure.exif import copy_exif_tags


@pytest.fixture
def source(tmp_path, photo_jpeg):
    """Original photo with orientation and GPS on disk."""
    path = tmp_path / 'source.jpg'
    path.write_bytes(photo_jpeg)
    return path


def test_copies_orientation_and_strips_gps(tmp_path, source, gps_exif, jpeg_factory):
    """Test derived file gets orientation but loses GPS."""
    # Derived file carrying its own GPS and a different orientation
    target = tmp_path / 'target.jpg'
    target_exif = {
        '0th': {piexif.ImageIFD.Orientation: 1},
        'GPS': gps_exif['GPS'],
    }
    target.write_bytes(jpeg_factory(target_exif))

    copy_exif_tags(source, target)

    result = piexif.load(str(target))
    assert result['GPS'] == {}
    assert piexif.ImageIFD.GPSTag not in result['0th']
    assert result['0th'][piexif.ImageIFD.Orientation] == 6


def test_leaves_other_tags_alone(tmp_path, source, jpeg_factory):
    """Test tags other than orientation are not copied from source."""
    target = tmp_path / 'target.jpg'
    target.write_bytes(jpeg_factory())

    copy_exif_tags(source, target)

    result = piexif.load(str(target))
    assert piexif.ImageIFD.Make not in result['0th']


def test_removes_orientation_when_source_has_none(tmp_path, jpeg_factory):
    """Test missing source orientation clears it on the target."""
    plain = tmp_path / 'plain.jpg'
    plain.write_bytes(jpeg_factory())
    target = tmp_path / 'target.jpg'
    target.write_bytes(jpeg_factory({'0th': {piexif.ImageIFD.Orientation: 3}}))

    copy_exif_tags(plain, target)

    result = piexif.load(str(target))
    assert piexif.ImageIFD.Orientation not in result['0th']


def test_pixels_are_not_reencoded(tmp_path, source, jpeg_factory):
    """Test only the EXIF segment of the target changes."""
    target = tmp_path / 'target.jpg'
    target.write_bytes(jpeg_factory())
    before = target.read_bytes()

    copy_exif_tags(source, target)

    after = target.read_bytes()
    # Scan data and trailer are untouched
    assert after.endswith(before[-200:])


def test_missing_target_is_read_error(tmp_path, source):
    """Test a nonexistent derived file fails as a read error."""
    with pytest.raises(MetadataReadError):
        copy_exif_tags(source, tmp_path / 'missing.jpg')


def test_non_image_source_is_read_error(tmp_path, jpeg_factory):
    """Test a source that is not an image fails as a read error."""
    source = tmp_path / 'source.jpg'
    source.write_bytes(b'0123456789')
    target = tmp_path / 'target.jpg'
    target.write_bytes(jpeg_factory())

    with pytest.raises(MetadataReadError):
        copy_exif_tags(source, target)


def test_save_failure_is_save_error(tmp_path, source, jpeg_factory, monkeypatch):
    """Test a failing write is reported distinctly from a read."""
    target = tmp_path / 'target.jpg'
    target.write_bytes(jpeg_factory())

    def fail_insert(exif_bytes, filename):
        raise OSError('disk full')

    monkeypatch.setattr(piexif, 'insert', fail_insert)

    with pytest.raises(MetadataSaveError, match='disk full'):
        copy_exif_tags(source, target)
