# -*- coding: utf-8 -*-

"""
Backends of an output stream
----------------------------
:class:`OssOutputStream <ossout.stream.OssOutputStream>` never talks to a service itself. It drives a
:class:`MultipartUploadClient`, which offers the four steps of a multipart upload:
    - :func:`create_multipart_upload <MultipartUploadClient.create_multipart_upload>` returns a new upload id;
    - :func:`upload_part <MultipartUploadClient.upload_part>` uploads one numbered part and returns its
      :class:`PartInfo <ossout.models.PartInfo>`;
    - :func:`complete_multipart_upload <MultipartUploadClient.complete_multipart_upload>` assembles the object;
    - :func:`abort_multipart_upload <MultipartUploadClient.abort_multipart_upload>` drops the uploaded parts.

:class:`OssMultipartUploadClient` implements them over HTTP against OSS or any service speaking the same protocol.
:class:`FileMultipartUploadClient <ossout.file_client.FileMultipartUploadClient>` implements them on the local file
system, for tests.

Exceptions
----------
Backends raise :class:`OssError <ossout.exceptions.OssError>` and its subclasses:
    - :class:`ClientError <ossout.exceptions.ClientError>` : wrong arguments;
    - :class:`ServerError <ossout.exceptions.ServerError>` and subclasses: the service answered with 4xx or 5xx;
    - :class:`RequestError <ossout.exceptions.RequestError>` : errors of the underlying requests library, such as
      DNS failures or timeouts.
Retrying is left to the caller of the backend; a backend call is made exactly once.
"""

import abc
import logging

from . import defaults
from . import exceptions
from . import http
from . import utils
from . import xml_utils
from .compat import to_string, urlparse, urlquote
from .models import (PartInfo, InitMultipartUploadResult, CompleteMultipartUploadResult, PutObjectResult,
                     RequestResult, _hget)

logger = logging.getLogger(__name__)


class MultipartUploadClient(metaclass=abc.ABCMeta):
    """The backend operations an output stream relies on."""

    @abc.abstractmethod
    def create_multipart_upload(self, request):
        """Create a multipart upload.

        :param request: :class:`MultipartUploadRequest <ossout.models.MultipartUploadRequest>`
        :return: the upload id, a str
        """

    @abc.abstractmethod
    def upload_part(self, bucket_name, key, upload_id, part_number, data):
        """Upload one part.

        :param str bucket_name: bucket name
        :param str key: object key, the same as the one of the creation request
        :param str upload_id: upload id returned by :func:`create_multipart_upload`
        :param int part_number: part number, starting from 1
        :param bytes data: content of the part
        :return: :class:`PartInfo <ossout.models.PartInfo>`
        """

    @abc.abstractmethod
    def complete_multipart_upload(self, bucket_name, key, upload_id, parts):
        """Complete the upload and create the object from `parts`, a list of
        :class:`PartInfo <ossout.models.PartInfo>`.
        """

    @abc.abstractmethod
    def abort_multipart_upload(self, bucket_name, key, upload_id):
        """Abort the upload and drop its uploaded parts."""


class OssMultipartUploadClient(MultipartUploadClient):
    """Multipart uploads over the OSS HTTP protocol.

    Usage ::

        >>> import ossout
        >>> auth = ossout.Auth('your-access-key-id', 'your-access-key-secret')
        >>> client = ossout.OssMultipartUploadClient(auth, 'http://oss-cn-hangzhou.aliyuncs.com')
        >>> with ossout.OssOutputStream(client, 'your-bucket', 'logs/today.csv', auto_complete=True) as f:
        ...     f.write(b'a,b,c\\n')

    :param auth: an :class:`Auth <ossout.Auth>` object, or :class:`AnonymousAuth <ossout.AnonymousAuth>`
    :param str endpoint: endpoint of the service, or a CNAME
    :param bool is_cname: True if `endpoint` is a CNAME
    :param session: :class:`Session <ossout.Session>` to reuse, None to open a new one
    :param float connect_timeout: connection timeout in seconds
    :param str app_name: appended to the User-Agent when not empty
    :param bool enable_crc: check the CRC64 of every uploaded part
    :param content_type_resolver: resolves the Content-Type from the key when the metadata has none,
        :class:`DefaultContentTypeResolver <ossout.utils.DefaultContentTypeResolver>` by default
    """
    def __init__(self, auth, endpoint,
                 is_cname=False,
                 session=None,
                 connect_timeout=None,
                 app_name='',
                 enable_crc=True,
                 content_type_resolver=None):
        logger.debug("Init multipart upload client, endpoint: {0}, isCname: {1}, connect_timeout: {2}, "
                     "app_name: {3}, enabled_crc: {4}".format(endpoint, is_cname, connect_timeout, app_name,
                                                             enable_crc))
        self.auth = auth
        self.endpoint = _normalize_endpoint(endpoint.strip())
        self.session = session or http.Session()
        self.timeout = defaults.get(connect_timeout, defaults.connect_timeout)
        self.app_name = app_name
        self.enable_crc = enable_crc
        self.content_type_resolver = content_type_resolver or utils.DefaultContentTypeResolver()

        self._make_url = _UrlMaker(self.endpoint, is_cname)

    def create_multipart_upload(self, request):
        """Initiate a multipart upload (`POST /<key>?uploads`).

        The metadata of the request is applied first; the Content-Type resolved from the key is only used when
        the metadata does not carry one.

        :return: the upload id
        """
        headers = http.CaseInsensitiveDict()
        if request.object_metadata is not None:
            request.object_metadata.apply(headers)
        headers = utils.set_content_type(headers, request.key, self.content_type_resolver)

        logger.debug("Start to init multipart upload, bucket: {0}, key: {1}, headers: {2}".format(
            request.bucket_name, to_string(request.key), headers))
        resp = self._do('POST', request.bucket_name, request.key, params={'uploads': ''}, headers=headers)
        logger.debug("Init multipart upload done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))

        result = self._parse_result(resp, xml_utils.parse_init_multipart_upload, InitMultipartUploadResult)
        return result.upload_id

    def upload_part(self, bucket_name, key, upload_id, part_number, data):
        """Upload one part (`PUT /<key>?partNumber=N&uploadId=ID`).

        :return: :class:`PartInfo <ossout.models.PartInfo>` holding the ETag returned by the service
        """
        logger.debug("Start to upload multipart, bucket: {0}, key: {1}, upload_id: {2}, part_number: {3}, "
                     "size: {4}".format(bucket_name, to_string(key), upload_id, part_number, len(data)))
        resp = self._do('PUT', bucket_name, key,
                        params={'uploadId': upload_id, 'partNumber': str(part_number)},
                        data=data)
        logger.debug("Upload multipart done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        result = PutObjectResult(resp)

        part_crc = None
        if self.enable_crc:
            crc = utils.Crc64()
            crc.update(data)
            part_crc = crc.crc
            utils.check_crc('upload part', part_crc, result.crc, result.request_id)

        return PartInfo(part_number, result.etag, size=len(data), part_crc=part_crc)

    def complete_multipart_upload(self, bucket_name, key, upload_id, parts):
        """Complete the multipart upload (`POST /<key>?uploadId=ID`).

        :return: :class:`CompleteMultipartUploadResult <ossout.models.CompleteMultipartUploadResult>`
        """
        parts = sorted(parts, key=lambda p: p.part_number)
        data = xml_utils.to_complete_upload_request(parts)

        logger.debug("Start to complete multipart upload, bucket: {0}, key: {1}, upload_id: {2}, parts: {3}".format(
            bucket_name, to_string(key), upload_id, data))
        resp = self._do('POST', bucket_name, key,
                        params={'uploadId': upload_id},
                        data=data)
        logger.debug(
            "Complete multipart upload done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))

        return self._parse_result(resp, xml_utils.parse_complete_multipart_upload, CompleteMultipartUploadResult)

    def abort_multipart_upload(self, bucket_name, key, upload_id):
        """Abort the multipart upload (`DELETE /<key>?uploadId=ID`).

        :return: :class:`RequestResult <ossout.models.RequestResult>`
        """
        logger.debug("Start to abort multipart upload, bucket: {0}, key: {1}, upload_id: {2}".format(
            bucket_name, to_string(key), upload_id))
        resp = self._do('DELETE', bucket_name, key,
                        params={'uploadId': upload_id})
        logger.debug("Abort multipart done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return RequestResult(resp)

    def _do(self, method, bucket_name, key, **kwargs):
        key = to_string(key)
        req = http.Request(method, self._make_url(bucket_name, key),
                           app_name=self.app_name,
                           **kwargs)
        self.auth._sign_request(req, bucket_name, key)

        resp = self.session.do_request(req, timeout=self.timeout)
        if resp.status // 100 != 2:
            e = exceptions.make_exception(resp)
            logger.error("Exception: {0}".format(e))
            raise e

        # Note that connections are only released back to the pool for reuse once all body data has been read;
        # be sure to either set stream to False or read the content property of the Response object.
        content_length = _hget(resp.headers, 'content-length', int)
        if content_length is not None and content_length == 0:
            resp.read()

        return resp

    def _parse_result(self, resp, parse_func, klass):
        result = klass(resp)
        if _hget(resp.headers, 'content-length', int) != 0:
            parse_func(result, resp.read())
        return result


def _normalize_endpoint(endpoint):
    if not endpoint.startswith('http://') and not endpoint.startswith('https://'):
        return 'http://' + endpoint
    else:
        return endpoint


_ENDPOINT_TYPE_ALIYUN = 0
_ENDPOINT_TYPE_CNAME = 1
_ENDPOINT_TYPE_IP = 2


def _determine_endpoint_type(netloc, is_cname, bucket_name):
    if utils.is_ip_or_localhost(netloc):
        return _ENDPOINT_TYPE_IP

    if is_cname:
        return _ENDPOINT_TYPE_CNAME

    if utils.is_valid_bucket_name(bucket_name):
        return _ENDPOINT_TYPE_ALIYUN
    else:
        return _ENDPOINT_TYPE_IP


class _UrlMaker(object):
    def __init__(self, endpoint, is_cname):
        p = urlparse(endpoint)

        self.scheme = p.scheme
        self.netloc = p.netloc
        self.is_cname = is_cname

    def __call__(self, bucket_name, key):
        url_type = _determine_endpoint_type(self.netloc, self.is_cname, bucket_name)

        key = urlquote(key, '')

        if url_type == _ENDPOINT_TYPE_CNAME:
            return '{0}://{1}/{2}'.format(self.scheme, self.netloc, key)

        if url_type == _ENDPOINT_TYPE_IP:
            return '{0}://{1}/{2}/{3}'.format(self.scheme, self.netloc, bucket_name, key)

        return '{0}://{1}.{2}/{3}'.format(self.scheme, bucket_name, self.netloc, key)
