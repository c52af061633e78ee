# -*- coding: utf-8 -*-

"""
ossout.exceptions
~~~~~~~~~~~~~~~~~

Exception classes.
"""

import re

import xml.etree.ElementTree as ElementTree
from xml.parsers import expat


from .compat import to_string


_OSS_ERROR_TO_EXCEPTION = {} # populated at end of module


OSS_CLIENT_ERROR_STATUS = -1
OSS_REQUEST_ERROR_STATUS = -2
OSS_INCONSISTENT_ERROR_STATUS = -3


class OssError(Exception):
    def __init__(self, status, headers, body, details):
        #: HTTP status code
        self.status = status

        #: Request ID of the failed request, empty for local errors
        self.request_id = headers.get('x-oss-request-id', '')

        #: HTTP response body (partial)
        self.body = body

        #: Error details as a string to string dict
        self.details = details

        #: Error code returned by the service
        self.code = self.details.get('Code', '')

        #: Error message returned by the service
        self.message = self.details.get('Message', '')

    def __str__(self):
        return str(self.details)


class ClientError(OssError):
    def __init__(self, message):
        OssError.__init__(self, OSS_CLIENT_ERROR_STATUS, {}, 'ClientError: ' + message, {})

    def __str__(self):
        return self.body


class InvalidArgument(ClientError):
    """Malformed arguments of a stream call. The stream stays usable."""
    pass


class UploadInterrupted(ClientError):
    """The upload thread was torn down before it drained the upload queue."""
    def __init__(self, message, exception=None):
        ClientError.__init__(self, message)
        self.exception = exception


class RequestError(OssError):
    def __init__(self, e):
        OssError.__init__(self, OSS_REQUEST_ERROR_STATUS, {}, 'RequestError: ' + str(e), {})
        self.exception = e

    def __str__(self):
        return self.body


class InconsistentError(OssError):
    def __init__(self, message, request_id=''):
        OssError.__init__(self, OSS_INCONSISTENT_ERROR_STATUS, {'x-oss-request-id': request_id},
                          'InconsistentError: ' + message, {})

    def __str__(self):
        return self.body


class ServerError(OssError):
    pass


class NotFound(ServerError):
    status = 404
    code = ''


class MalformedXml(ServerError):
    status = 400
    code = 'MalformedXML'


class InvalidPart(ServerError):
    status = 400
    code = 'InvalidPart'


class InvalidPartOrder(ServerError):
    status = 400
    code = 'InvalidPartOrder'


class EntityTooSmall(ServerError):
    status = 400
    code = 'EntityTooSmall'


class NoSuchBucket(NotFound):
    status = 404
    code = 'NoSuchBucket'


class NoSuchKey(NotFound):
    status = 404
    code = 'NoSuchKey'


class NoSuchUpload(NotFound):
    status = 404
    code = 'NoSuchUpload'


class Conflict(ServerError):
    status = 409
    code = ''


class AccessDenied(ServerError):
    status = 403
    code = 'AccessDenied'


def make_exception(resp):
    status = resp.status
    headers = resp.headers
    body = resp.read(4096)
    details = _parse_error_body(body)
    code = details.get('Code', '')

    try:
        klass = _OSS_ERROR_TO_EXCEPTION[(status, code)]
        return klass(status, headers, body, details)
    except KeyError:
        return ServerError(status, headers, body, details)


def _walk_subclasses(klass):
    for sub in klass.__subclasses__():
        yield sub
        for subsub in _walk_subclasses(sub):
            yield subsub


for klass in _walk_subclasses(ServerError):
    status = getattr(klass, 'status', None)
    code = getattr(klass, 'code', None)

    if status is not None and code is not None:
        _OSS_ERROR_TO_EXCEPTION[(status, code)] = klass


ElementTreeParseError = (ElementTree.ParseError, expat.ExpatError)


def _parse_error_body(body):
    try:
        root = ElementTree.fromstring(body)
        if root.tag != 'Error':
            return {}

        details = {}
        for child in root:
            details[child.tag] = child.text
        return details
    except ElementTreeParseError:
        return _guess_error_details(body)


def _guess_error_details(body):
    details = {}
    body = to_string(body)

    if '<Error>' not in body or '</Error>' not in body:
        return details

    m = re.search('<Code>(.*)</Code>', body)
    if m:
        details['Code'] = m.group(1)

    m = re.search('<Message>(.*)</Message>', body)
    if m:
        details['Message'] = m.group(1)

    return details
