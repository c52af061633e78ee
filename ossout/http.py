# -*- coding: utf-8 -*-

"""
ossout.http
~~~~~~~~~~~

HTTP layer of :class:`OssMultipartUploadClient <ossout.api.OssMultipartUploadClient>`, built on requests.

An output stream issues its backend calls from two threads: the caller's thread creates, completes and aborts
the upload while the upload thread sends the parts. Both share one :class:`Session`, whose connection pool is
sized by `defaults.connection_pool_size`.
"""

import platform

import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict

from . import __version__
from . import defaults
from .compat import to_bytes
from .exceptions import RequestError
from .headers import OSS_REQUEST_ID


_USER_AGENT = 'ossout-python/{0}({1}/{2}/{3};{4})'.format(
    __version__, platform.system(), platform.release(), platform.machine(), platform.python_version())


class Session(object):
    """Requests of one Session share a connection pool and reuse HTTP connections when possible.

    :param int pool_size: connections kept per host, `defaults.connection_pool_size` if not specified
    """
    def __init__(self, pool_size=None):
        pool_size = defaults.get(pool_size, defaults.connection_pool_size)

        self.session = requests.Session()
        self.session.mount('http://', HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size))
        self.session.mount('https://', HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size))

    def do_request(self, req, timeout):
        try:
            return Response(self.session.request(req.method, req.url,
                                                 data=req.data,
                                                 params=req.params,
                                                 headers=req.headers,
                                                 stream=True,
                                                 timeout=timeout))
        except requests.RequestException as e:
            raise RequestError(e)


class Request(object):
    """One signed call of the multipart protocol.

    `data` is a whole request body held in memory: a part, or the XML body of the complete call.
    Bytes-like parts are copied to bytes so requests sends them with a Content-Length.
    """
    def __init__(self, method, url,
                 data=None,
                 params=None,
                 headers=None,
                 app_name=''):
        self.method = method
        self.url = url
        self.data = _to_body(data)
        self.params = params or {}

        if not isinstance(headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(headers)
        else:
            self.headers = headers

        # tell requests not to add 'Accept-Encoding: gzip, deflate' by default
        if 'Accept-Encoding' not in self.headers:
            self.headers['Accept-Encoding'] = None

        if 'User-Agent' not in self.headers:
            if app_name:
                self.headers['User-Agent'] = _USER_AGENT + '/' + app_name
            else:
                self.headers['User-Agent'] = _USER_AGENT


_CHUNK_SIZE = 8 * 1024


class Response(object):
    def __init__(self, response):
        self.response = response
        self.status = response.status_code
        self.headers = response.headers
        self.request_id = response.headers.get(OSS_REQUEST_ID, '')

    def read(self, amt=None):
        if amt is None:
            return b''.join(self.response.iter_content(_CHUNK_SIZE))

        try:
            return next(self.response.iter_content(amt))
        except StopIteration:
            return b''

    def __iter__(self):
        return self.response.iter_content(_CHUNK_SIZE)


def _to_body(data):
    data = to_bytes(data)

    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)

    return data
