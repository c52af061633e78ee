# -*- coding: utf-8 -*-

"""
ossout.models
~~~~~~~~~~~~~

Input parameters and return values of the multipart upload API.
"""

from requests.structures import CaseInsensitiveDict

from .exceptions import ClientError
from .headers import *
from .utils import http_date


class PartInfo(object):
    """An uploaded part.

    Returned by :func:`upload_part <ossout.api.MultipartUploadClient.upload_part>` and
    passed back to :func:`complete_multipart_upload <ossout.api.MultipartUploadClient.complete_multipart_upload>`.

    :param int part_number: part number, starting from 1
    :param str etag: ETag of the part, the token naming the part on completion
    :param int size: size of the part in bytes
    :param int part_crc: CRC64 of the part
    """
    def __init__(self, part_number, etag, size=None, part_crc=None):
        self.part_number = part_number
        self.etag = etag
        self.size = size
        self.part_crc = part_crc

    def __eq__(self, other):
        if not isinstance(other, PartInfo):
            return NotImplemented
        return (self.part_number, self.etag, self.size) == (other.part_number, other.etag, other.size)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return 'PartInfo(part_number={0}, etag={1!r}, size={2})'.format(self.part_number, self.etag, self.size)


class ObjectMetadata(object):
    """Metadata applied as is to the object when its multipart upload is created.

    Usage ::

        >>> meta = ossout.ObjectMetadata(content_type='text/csv',
        ...                              storage_class='IA',
        ...                              metadata={'author': 'ocean'})
        >>> meta.to_headers()['x-oss-meta-author']
        'ocean'

    :param str acl: object ACL, e.g. 'private', 'public-read'
    :param str cache_control: Cache-Control header
    :param str content_disposition: Content-Disposition header
    :param str content_encoding: Content-Encoding header
    :param str content_language: Content-Language header
    :param str content_type: Content-Type header. When set, it wins over the type resolved from the key.
    :param expires: Expires header, either a string or a unix time
    :param dict metadata: user metadata, sent as `x-oss-meta-<name>` headers
    :param str server_side_encryption: e.g. 'AES256' or 'KMS'
    :param str server_side_encryption_key_id: KMS key id
    :param str storage_class: e.g. 'Standard', 'IA', 'Archive'
    :param str tagging: URL encoded tags, e.g. 'k1=v1&k2=v2'
    :param bool forbid_overwrite: refuse to overwrite an existing object of the same key
    :param dict headers: extra headers, applied after the fields above
    :param customizer: callable invoked last with the header dict, for anything the fields do not cover
    """
    def __init__(self, acl=None,
                 cache_control=None,
                 content_disposition=None,
                 content_encoding=None,
                 content_language=None,
                 content_type=None,
                 expires=None,
                 metadata=None,
                 server_side_encryption=None,
                 server_side_encryption_key_id=None,
                 storage_class=None,
                 tagging=None,
                 forbid_overwrite=None,
                 headers=None,
                 customizer=None):
        self.acl = acl
        self.cache_control = cache_control
        self.content_disposition = content_disposition
        self.content_encoding = content_encoding
        self.content_language = content_language
        self.content_type = content_type
        self.expires = expires
        self.metadata = dict(metadata or {})
        self.server_side_encryption = server_side_encryption
        self.server_side_encryption_key_id = server_side_encryption_key_id
        self.storage_class = storage_class
        self.tagging = tagging
        self.forbid_overwrite = forbid_overwrite
        self.headers = dict(headers or {})
        self.customizer = customizer

    def apply(self, headers):
        """Write the metadata into `headers` and return it."""
        _hset(headers, OSS_OBJECT_ACL, self.acl)
        _hset(headers, CACHE_CONTROL, self.cache_control)
        _hset(headers, CONTENT_DISPOSITION, self.content_disposition)
        _hset(headers, CONTENT_ENCODING, self.content_encoding)
        _hset(headers, CONTENT_LANGUAGE, self.content_language)
        _hset(headers, CONTENT_TYPE, self.content_type)
        _hset(headers, OSS_SERVER_SIDE_ENCRYPTION, self.server_side_encryption)
        _hset(headers, OSS_SERVER_SIDE_ENCRYPTION_KEY_ID, self.server_side_encryption_key_id)
        _hset(headers, OSS_STORAGE_CLASS, self.storage_class)
        _hset(headers, OSS_OBJECT_TAGGING, self.tagging)

        if self.expires is not None:
            if isinstance(self.expires, (int, float)):
                headers[EXPIRES] = http_date(self.expires)
            else:
                headers[EXPIRES] = self.expires

        if self.forbid_overwrite is not None:
            headers[OSS_FORBID_OVERWRITE] = str(bool(self.forbid_overwrite)).lower()

        for k, v in self.metadata.items():
            headers[OSS_USER_METADATA_PREFIX + k] = v

        for k, v in self.headers.items():
            headers[k] = v

        if self.customizer is not None:
            self.customizer(headers)

        return headers

    def to_headers(self):
        return self.apply(CaseInsensitiveDict())

    def __eq__(self, other):
        if not isinstance(other, ObjectMetadata):
            return NotImplemented
        return self.__dict__ == other.__dict__

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result


class MultipartUploadRequest(object):
    """Everything needed to create a multipart upload.

    :param str bucket_name: bucket name, required
    :param str key: object key, required
    :param object_metadata: :class:`ObjectMetadata`, optional
    """
    def __init__(self, bucket_name, key, object_metadata=None):
        if bucket_name is None:
            raise ClientError('bucket_name is required')
        if key is None:
            raise ClientError('key is required')

        self.bucket_name = bucket_name
        self.key = key
        self.object_metadata = object_metadata

    def __eq__(self, other):
        if not isinstance(other, MultipartUploadRequest):
            return NotImplemented
        return (self.bucket_name, self.key, self.object_metadata) == \
               (other.bucket_name, other.key, other.object_metadata)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return 'MultipartUploadRequest(bucket_name={0!r}, key={1!r})'.format(self.bucket_name, self.key)


def _hset(headers, key, value):
    if value is not None:
        headers[key] = value


def _hget(headers, key, converter=lambda x: x):
    if key in headers:
        return converter(headers[key])
    else:
        return None


def _get_etag(headers):
    return _hget(headers, 'etag', lambda x: x.strip('"'))


class RequestResult(object):
    def __init__(self, resp):
        #: HTTP response
        self.resp = resp

        #: HTTP status code
        self.status = resp.status

        #: HTTP headers
        self.headers = resp.headers

        #: Request ID, handy when tracking a request with the service
        self.request_id = resp.request_id


class InitMultipartUploadResult(RequestResult):
    def __init__(self, resp):
        super(InitMultipartUploadResult, self).__init__(resp)

        #: The new Upload ID
        self.upload_id = None


class PutObjectResult(RequestResult):
    def __init__(self, resp):
        super(PutObjectResult, self).__init__(resp)

        #: HTTP ETag
        self.etag = _get_etag(self.headers)

        #: CRC64 of the stored data
        self.crc = _hget(resp.headers, OSS_HASH_CRC64_ECMA, int)


class CompleteMultipartUploadResult(PutObjectResult):
    def __init__(self, resp):
        super(CompleteMultipartUploadResult, self).__init__(resp)

        #: URL of the new object
        self.location = None

        #: Bucket and key of the new object
        self.bucket = None
        self.key = None
