#!/usr/bin/env python3
# Library providing the network and image file handling for gmaps_image

import io
import logging
import os

import requests
from PIL import Image

from .errors import DecodeError, RemoteResponseError

logger = logging.getLogger(__name__)

# Seconds to wait for the server before giving up
TIMEOUT = 30

# Output formats understood by save, encode and send
JPEG = "JPEG"
PNG = "PNG"
GIF = "GIF"

# Response content types that can be decoded, and the decoder used for each
DECODERS = {
    "image/png": PNG,
    "image/gif": GIF,
    "image/jpeg": JPEG,
}

CONTENT_TYPES = dict((decoder, mime_type)
                     for mime_type, decoder in DECODERS.items())

def fetch(url, timeout = TIMEOUT):
    """ Download a URL

    Args:
        url: A string containing the URL to be requested.
        timeout: Seconds to wait for the server.

    Returns:
        A (content, mime_type) tuple. mime_type is the lower-cased content
        type without parameters, or an empty string if the server sent none.

    Raises:
        requests.RequestException: The request failed or the server answered
            with an error status.
    """

    logger.debug("Requesting %s", url)
    response = requests.get(url, timeout = timeout)
    response.raise_for_status()

    content_type = response.headers.get("Content-Type", "")
    mime_type = content_type.split(";")[0].strip().lower()
    return response.content, mime_type

def decode(content, mime_type):
    """ Decode image data using the decoder matching its content type

    Args:
        content: The bytes of the image.
        mime_type: The content type reported by the server.

    Returns:
        A fully loaded PIL.Image.Image.

    Raises:
        RemoteResponseError: The data is not an image or its type is not one
            of DECODERS.
        DecodeError: The data could not be decoded as the reported type.
    """

    if (not content) or (not mime_type.startswith("image/")):
        logger.warning("Rejecting response of type %r (%d bytes)",
                       mime_type, len(content or b""))
        raise RemoteResponseError("not an image")

    if (mime_type not in DECODERS):
        logger.warning("Rejecting response of type %s", mime_type)
        raise RemoteResponseError("unsupported format: %s" % mime_type)

    try:
        image = Image.open(io.BytesIO(content), formats = [DECODERS[mime_type]])
        image.load()
    except (OSError, SyntaxError, ValueError,
            Image.DecompressionBombError) as err:
        raise DecodeError("decode failed") from err

    logger.debug("Decoded %s image of %dx%d", image.format, *image.size)
    return image

def _save_options(image_format, quality):
    options = {}
    if (quality is None):
        return options

    if (image_format == JPEG):
        options["quality"] = max(0, min(100, int(quality)))
    elif (image_format == PNG):
        options["compress_level"] = max(0, min(9, int(quality)))

    return options

def _prepare(image, image_format):
    # JPEG stores neither palettes nor transparency
    if (image_format == JPEG) and (image.mode not in ("RGB", "L", "CMYK")):
        return image.convert("RGB")
    return image

def save(image, destination, quality = None, image_format = None):
    """ Save an image to a file

    Args:
        image: A PIL.Image.Image.
        destination: A path or a writable binary file object.
        quality: 0..100. Used as the JPEG quality, or clamped to 0..9 and
            used as the PNG compression level. Ignored for GIF.
        image_format: JPEG, PNG or GIF. If None, Pillow picks the format from
            the file extension.

    Returns:
        True once the image has been written.
    """

    if (image_format is None) and (isinstance(destination, (str, os.PathLike))):
        extension = os.path.splitext(os.fspath(destination))[1].lower()
        image_format = Image.registered_extensions().get(extension)

    _prepare(image, image_format).save(
        destination, format = image_format,
        **_save_options(image_format, quality)
    )
    return True

def encode(image, image_format = JPEG, quality = None):
    buffer = io.BytesIO()
    save(image, buffer, quality, image_format)
    return buffer.getvalue()

def send(image, image_format = JPEG, quality = None, stream = None):
    """ Encode an image as an HTTP response body

    Args:
        image: A PIL.Image.Image.
        image_format: JPEG, PNG or GIF.
        quality: See save.
        stream: An optional writable binary file object, such as a WSGI
            output stream, that the body is written to.

    Returns:
        The encoded bytes. Use content_type(image_format) for the matching
        Content-Type header.
    """

    body = encode(image, image_format, quality)
    if (stream is not None):
        stream.write(body)
    return body

def content_type(image_format):
    return CONTENT_TYPES[image_format]
