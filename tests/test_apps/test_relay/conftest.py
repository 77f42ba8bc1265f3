"""Shared fixtures for relay app tests."""

import copy
import io

import boto3
import piexif
import pytest
from moto import mock_aws
from PIL import Image

# EXIF orientation "rotate 90 CW"
ORIENTATION_ROTATED = 6

TEST_BUCKET = 'media-relay-test'


@pytest.fixture
def relay_settings(settings, tmp_path):
    """Configure relay settings with a throwaway cache root.

    Returns:
        pytest-django settings wrapper.
    """
    settings.RELAY_API_SECRET = 'test-secret'
    settings.RELAY_BASE_URL = 'https://media.example.com/'
    settings.RELAY_CACHE_PATH = str(tmp_path / 'cache')
    settings.AWS_STORAGE_BUCKET_NAME = TEST_BUCKET
    return settings


@pytest.fixture
def mock_s3(settings):
    """Mock S3 service with the relay bucket.

    Yields:
        boto3 S3 resource with the relay bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket=TEST_BUCKET)

        # Rebuild default storage so its boto3 client lives inside the mock
        storages = copy.deepcopy(settings.STORAGES)
        storages['default']['OPTIONS']['bucket_name'] = TEST_BUCKET
        settings.AWS_STORAGE_BUCKET_NAME = TEST_BUCKET
        settings.STORAGES = storages

        yield conn


@pytest.fixture
def bucket(mock_s3, settings):
    """Relay bucket inside the mocked S3.

    Returns:
        boto3 Bucket resource.
    """
    return mock_s3.Bucket(settings.AWS_STORAGE_BUCKET_NAME)


def _make_jpeg(exif_dict=None, size=(64, 48)):
    """Encode a small gradient JPEG, optionally carrying EXIF.

    Args:
        exif_dict: piexif-style dict to embed.
        size: Width and height in pixels.

    Returns:
        JPEG bytes.
    """
    image = Image.new('RGB', size)
    image.putdata([
        (x * 4 % 256, y * 5 % 256, (x + y) % 256)
        for y in range(size[1])
        for x in range(size[0])
    ])
    buffer = io.BytesIO()
    save_kwargs = {'format': 'JPEG', 'quality': 95}
    if exif_dict is not None:
        save_kwargs['exif'] = piexif.dump(exif_dict)
    image.save(buffer, **save_kwargs)
    return buffer.getvalue()


@pytest.fixture
def gps_exif():
    """EXIF with an orientation and a GPS position.

    Returns:
        piexif-style EXIF dict.
    """
    return {
        '0th': {
            piexif.ImageIFD.Orientation: ORIENTATION_ROTATED,
            piexif.ImageIFD.Make: b'TestCam',
        },
        'GPS': {
            piexif.GPSIFD.GPSLatitudeRef: b'N',
            piexif.GPSIFD.GPSLatitude: ((52, 1), (13, 1), (30, 1)),
            piexif.GPSIFD.GPSLongitudeRef: b'E',
            piexif.GPSIFD.GPSLongitude: ((21, 1), (0, 1), (45, 1)),
        },
    }


@pytest.fixture
def photo_jpeg(gps_exif):
    """JPEG photo with orientation and GPS EXIF.

    Returns:
        JPEG bytes.
    """
    return _make_jpeg(gps_exif)


@pytest.fixture
def jpeg_factory():
    """Factory building JPEG bytes with optional EXIF.

    Returns:
        Callable taking an optional piexif dict and size.
    """
    return _make_jpeg
