"""EXIF sanitizing for derived images.

Only the orientation is carried from the original to the derived
file, and location data is always removed from the derived one.
"""

import logging
import struct
from pathlib import Path
from typing import Final

import piexif

from server.apps.relay.exceptions import MetadataReadError, MetadataSaveError

logger = logging.getLogger(__name__)

# Errors piexif raises on unreadable or malformed EXIF data
_EXIF_ERRORS: Final = (OSError, ValueError, KeyError, struct.error)


def copy_exif_tags(source: Path, target: Path) -> None:
    """Copy safe/required EXIF tags from source to target in place.

    Currently this is just the orientation. GPS data is stripped from
    the target unconditionally, every other tag is left as the encoder
    wrote it.

    Args:
        source: Path to the original image.
        target: Path to the derived image, rewritten in place.

    Raises:
        MetadataReadError: If EXIF cannot be read from either file.
        MetadataSaveError: If EXIF cannot be written back to target.
    """
    try:
        source_exif = piexif.load(str(source))
        target_exif = piexif.load(str(target))
    except _EXIF_ERRORS as error:
        raise MetadataReadError(
            f'Failed to read EXIF from {source} or {target}: {error}',
        ) from error

    # Make very sure there is no GPS data left
    target_exif['GPS'] = {}
    target_exif['0th'].pop(piexif.ImageIFD.GPSTag, None)

    orientation = source_exif['0th'].get(piexif.ImageIFD.Orientation)
    if orientation is None:
        target_exif['0th'].pop(piexif.ImageIFD.Orientation, None)
    else:
        target_exif['0th'][piexif.ImageIFD.Orientation] = orientation

    try:
        piexif.insert(piexif.dump(target_exif), str(target))
    except _EXIF_ERRORS as error:
        raise MetadataSaveError(
            f'Failed to save EXIF to {target}: {error}',
        ) from error

    logger.debug(
        'Sanitized EXIF of %s (orientation=%s)',
        target,
        orientation,
    )
