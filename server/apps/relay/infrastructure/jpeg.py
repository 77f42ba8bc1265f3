"""JPEG optimization.

Re-encodes with Pillow at a fixed quality as a progressive JPEG with
optimized Huffman tables. It's slow compared to serving the original,
but the result is cached, so it only happens once per asset.

The codec runs in a separate short-lived process: a decoder that
aborts on malformed input takes down that process only, and the
failure comes back as a TranscodeError.
"""

import logging
import multiprocessing
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from pathlib import Path
from typing import Any, Final

from PIL import Image

from server.apps.relay.exceptions import TranscodeError
from server.apps.relay.infrastructure.exif import copy_exif_tags

logger = logging.getLogger(__name__)

# Pillow's libjpeg has no trellis quantization, only these fixed
# quality, progressive and Huffman settings are applied
JPEG_QUALITY: Final = 80

# Never fork a threaded server process
_MP_CONTEXT: Final = multiprocessing.get_context('spawn')


def encode_jpeg(source: str, target: str) -> None:
    """Decode a JPEG to full-resolution pixels and re-encode it.

    Runs inside the isolated worker process.

    Args:
        source: Path of the original JPEG.
        target: Path the optimized JPEG is written to.
    """
    with Image.open(source) as image:
        pixels = image.convert('RGB')
    pixels.save(
        target,
        format='JPEG',
        quality=JPEG_QUALITY,
        progressive=True,
        optimize=True,
    )


def run_isolated(func: Callable[..., Any], *args: Any) -> Any:
    """Run a picklable callable in a fresh single-worker process.

    Args:
        func: Module-level callable to run.
        args: Picklable positional arguments.

    Returns:
        Whatever the callable returns.

    Raises:
        TranscodeError: If the callable raises or the process dies.
    """
    with ProcessPoolExecutor(max_workers=1, mp_context=_MP_CONTEXT) as pool:
        future = pool.submit(func, *args)
        try:
            return future.result()
        except BrokenProcessPool as error:
            raise TranscodeError(
                'Encoder process terminated abnormally',
            ) from error
        except Exception as error:
            raise TranscodeError(f'Encoder failed: {error}') from error


def optimize_jpeg(source: Path, target: Path) -> None:
    """Optimize a JPEG and save it to target, then sanitize its EXIF.

    Metadata is only touched after a successful encode, so a failed
    encode is reported as is.

    Args:
        source: Path to the non-optimized JPEG.
        target: Output path for the optimized JPEG.

    Raises:
        TranscodeError: If decoding or encoding fails.
        MetadataError: If EXIF sanitizing fails.
    """
    logger.info('Optimizing JPEG: %s -> %s', source, target)
    run_isolated(encode_jpeg, str(source), str(target))
    copy_exif_tags(source, target)
    logger.info(
        'Optimized JPEG %s: %d -> %d bytes',
        source.name,
        source.stat().st_size,
        target.stat().st_size,
    )
