# -*- coding: utf-8 -*-

"""
ossout.utils
------------

Utility functions.
"""

from email.utils import formatdate

import logging
import os.path
import mimetypes
import socket
import hashlib
import base64
import errno

import crcmod

from .compat import to_string, to_bytes
from .exceptions import InconsistentError
from .headers import CONTENT_TYPE

logger = logging.getLogger(__name__)

_EXTRA_TYPES_MAP = {
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".json": "application/json",
    ".jsonld": "application/ld+json",
    ".csv": "text/csv",
    ".txt": "text/plain",
    ".xml": "text/xml",
    ".yml": "application/x-yaml",
    ".yaml": "application/x-yaml",
    ".gz": "application/gzip",
    ".bz2": "application/x-bzip2",
    ".7z": "application/x-7z-compressed",
    ".rar": "application/vnd.rar",
    ".webp": "image/webp",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".otf": "font/otf",
    ".ttf": "font/ttf",
    ".opus": "audio/opus",
    ".weba": "audio/webm",
    ".webm": "video/webm",
    ".epub": "application/epub+zip",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xltx": "application/vnd.openxmlformats-officedocument.spreadsheetml.template",
    ".potx": "application/vnd.openxmlformats-officedocument.presentationml.template",
    ".ppsx": "application/vnd.openxmlformats-officedocument.presentationml.slideshow",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".sldx": "application/vnd.openxmlformats-officedocument.presentationml.slide",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".dotx": "application/vnd.openxmlformats-officedocument.wordprocessingml.template",
    ".xlam": "application/vnd.ms-excel.addin.macroEnabled.12",
    ".xlsb": "application/vnd.ms-excel.sheet.binary.macroEnabled.12",
    ".odp": "application/vnd.oasis.opendocument.presentation",
    ".ods": "application/vnd.oasis.opendocument.spreadsheet",
    ".odt": "application/vnd.oasis.opendocument.text",
    ".apk": "application/vnd.android.package-archive"
}


def b64encode_as_string(data):
    return to_string(base64.b64encode(to_bytes(data)))


def md5_string(data):
    """Return the MD5 of `data` as 32 lowercase hex characters."""
    return hashlib.md5(to_bytes(data)).hexdigest()


def _file_extension(name):
    name = name.rsplit('/', 1)[-1]
    ext = os.path.splitext(name)[1].lower()
    if ext == '.':
        return ''
    return ext


def content_type_by_name(name):
    """Return the Content-Type of a key from its file extension, or None."""
    ext = _file_extension(name)
    if not ext:
        return None

    if ext in _EXTRA_TYPES_MAP:
        return _EXTRA_TYPES_MAP[ext]

    return mimetypes.guess_type(name.rsplit('/', 1)[-1])[0]


class ContentTypeResolver(object):
    """Resolves the Content-Type of an object from its key."""
    def resolve(self, key):
        raise NotImplementedError


class DefaultContentTypeResolver(ContentTypeResolver):
    """Looks the extension of the last path segment up in a table of common types,
    then falls back to :mod:`mimetypes`.
    """
    def resolve(self, key):
        return content_type_by_name(key)


class NoContentTypeResolver(ContentTypeResolver):
    def resolve(self, key):
        return None


def set_content_type(headers, name, resolver=None):
    """Set Content-Type in headers from the name, unless headers already carry one."""
    if headers is None:
        headers = {}

    if CONTENT_TYPE in headers:
        return headers

    resolver = resolver or DefaultContentTypeResolver()

    content_type = resolver.resolve(name)
    if content_type:
        headers[CONTENT_TYPE] = content_type

    return headers


def is_ip_or_localhost(netloc):
    """Tell whether the network location is an IP address or localhost."""
    is_ipv6 = False
    right_bracket_index = netloc.find(']')
    if netloc[0] == '[' and right_bracket_index > 0:
        loc = netloc[1:right_bracket_index]
        is_ipv6 = True
    else:
        loc = netloc.split(':')[0]

    if loc == 'localhost':
        return True

    try:
        if is_ipv6:
            socket.inet_pton(socket.AF_INET6, loc)  # IPv6
        else:
            socket.inet_aton(loc)  # Only IPv4
    except socket.error:
        return False

    return True


_ALPHA_NUM = 'abcdefghijklmnopqrstuvwxyz0123456789'
_HYPHEN = '-'
_BUCKET_NAME_CHARS = set(_ALPHA_NUM + _HYPHEN)


def is_valid_bucket_name(name):
    """Tell whether name is a valid bucket name."""
    if len(name) < 3 or len(name) > 63:
        return False

    if name[-1] == _HYPHEN:
        return False

    if name[0] not in _ALPHA_NUM:
        return False

    return set(name) <= _BUCKET_NAME_CHARS


def http_date(timeval=None):
    """Return the GMT time string of the HTTP standard, "%a, %d %b %Y %H:%M:%S GMT" in strftime terms.
    strftime is not used because its result depends on the locale.
    """
    return formatdate(timeval, usegmt=True)


def makedir_p(dirpath):
    try:
        os.makedirs(dirpath)
    except os.error as e:
        if e.errno != errno.EEXIST:
            raise


class Crc64(object):

    _POLY = 0x142F0E1EBA9EA3693
    _XOROUT = 0XFFFFFFFFFFFFFFFF

    def __init__(self, init_crc=0):
        self.crc64 = crcmod.Crc(self._POLY, initCrc=init_crc, rev=True, xorOut=self._XOROUT)

    def __call__(self, data):
        self.update(data)

    def update(self, data):
        self.crc64.update(data)

    @property
    def crc(self):
        return self.crc64.crcValue


def check_crc(operation, client_crc, oss_crc, request_id):
    if client_crc is not None and oss_crc is not None and client_crc != oss_crc:
        e = InconsistentError("req_id: {0}, operation: {1}, CRC checksum of client: {2} is mismatch "
                              "with oss: {3}".format(request_id, operation, client_crc, oss_crc), request_id)
        logger.error("Exception: {0}".format(e))
        raise e
