"""HTTP views for uploading and downloading assets."""

import logging
import secrets

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile
from django.http import (
    FileResponse,
    HttpRequest,
    HttpResponse,
    HttpResponseBadRequest,
    HttpResponseNotFound,
    HttpResponseServerError,
)
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from server.apps.relay.exceptions import (
    InvalidExtensionError,
    RelayError,
    StoreError,
)
from server.apps.relay.infrastructure.metadata import (
    detect_content_type,
    sanitize_filename,
)
from server.apps.relay.logic.cache_operations import resolve_servable
from server.apps.relay.logic.upload_operations import (
    build_asset_url,
    upload_asset,
)

logger = logging.getLogger(__name__)

_TEXT_PLAIN = 'text/plain; charset=utf-8'


def _is_authorized(request: HttpRequest) -> bool:
    """Check the shared secret sent in the `Authorization` header."""
    provided = request.headers.get('Authorization')
    if provided is None or not settings.RELAY_API_SECRET:
        return False
    return secrets.compare_digest(
        provided.encode(),
        settings.RELAY_API_SECRET.encode(),
    )


@csrf_exempt
@require_POST
def upload(request: HttpRequest) -> HttpResponse:
    """Store the first uploaded file and return its public URL.

    Args:
        request: Multipart POST request with one file part.

    Returns:
        Plain text response with the asset URL.
    """
    if not _is_authorized(request):
        logger.warning('Rejected upload with invalid credentials')
        return HttpResponse('Invalid auth', status=401, content_type=_TEXT_PLAIN)

    upload_file: UploadedFile | None = next(iter(request.FILES.values()), None)
    if upload_file is None:
        return HttpResponse('OK', content_type=_TEXT_PLAIN)

    if upload_file.size > settings.RELAY_MAX_UPLOAD_SIZE:
        logger.warning(
            'Rejected upload of %s: %d bytes',
            upload_file.name,
            upload_file.size,
        )
        return HttpResponse(
            'File too large',
            status=413,
            content_type=_TEXT_PLAIN,
        )

    try:
        identity = upload_asset(upload_file, upload_file.name or '')
    except InvalidExtensionError as error:
        logger.warning('Rejected upload: %s', error)
        return HttpResponseBadRequest(
            'Unsupported file type',
            content_type=_TEXT_PLAIN,
        )
    except StoreError:
        logger.exception('Failed to upload %s', upload_file.name)
        return HttpResponseServerError(
            'Failed to upload',
            content_type=_TEXT_PLAIN,
        )

    return HttpResponse(build_asset_url(identity), content_type=_TEXT_PLAIN)


@require_GET
def download(request: HttpRequest, filename: str) -> HttpResponse:
    """Stream an asset, optimized when possible, with its content type.

    Args:
        request: GET request.
        filename: Client-supplied identity path segment.

    Returns:
        Streaming file response, or 404 on any pipeline failure.
    """
    identity = sanitize_filename(filename)
    try:
        path = resolve_servable(identity)
        stream = path.open('rb')
    except (RelayError, OSError) as error:
        logger.warning('Failed to serve %r: %s', identity, error)
        return HttpResponseNotFound('Not found.', content_type=_TEXT_PLAIN)

    return FileResponse(stream, content_type=detect_content_type(identity))
