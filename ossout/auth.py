# -*- coding: utf-8 -*-

"""
ossout.auth
~~~~~~~~~~~

Request signing of the OSS protocol, signature version 1::

    Authorization: OSS <AccessKeyId>:base64(hmac-sha1(AccessKeySecret, string_to_sign))

where `string_to_sign` joins, one per line, the method, Content-MD5, Content-Type, Date, the canonical
`x-oss-` headers and the canonical resource `/<bucket>/<key>[?<sub resources>]`.
"""

import hmac
import hashlib
import logging

from . import utils
from .compat import to_bytes
from .headers import OSS_SECURITY_TOKEN
from .credentials import StaticCredentialsProvider

logger = logging.getLogger(__name__)

#: Query parameters of the multipart calls taking part in the signature.
SUBRESOURCES = frozenset(['uploads', 'uploadId', 'partNumber', 'security-token', 'acl', 'tagging', 'sequential'])


def string_to_sign(req, bucket_name, key):
    """Return the bytes signed for `req`, once its Date header is set."""
    date = req.headers.get('x-oss-date') or req.headers.get('date') or ''
    lines = [req.method,
             req.headers.get('content-md5') or '',
             req.headers.get('content-type') or '',
             date]

    return b'\n'.join(to_bytes(line) for line in lines) + b'\n' + \
        _canonical_headers(req.headers) + to_bytes(_canonical_resource(req.params, bucket_name, key))


def _canonical_headers(headers):
    oss_headers = sorted((k.lower(), v) for k, v in headers.items() if k.lower().startswith('x-oss-'))
    return b''.join(to_bytes(k) + b':' + to_bytes(v) + b'\n' for k, v in oss_headers)


def _canonical_resource(params, bucket_name, key):
    if bucket_name:
        resource = '/{0}/{1}'.format(bucket_name, key)
    else:
        resource = '/'

    subresources = sorted((k, v) for k, v in (params or {}).items() if k in SUBRESOURCES)
    if not subresources:
        return resource

    return resource + '?' + '&'.join(k + '=' + v if v else k for k, v in subresources)


class AuthBase(object):
    """Signs requests with the credentials of `credentials_provider`."""
    def __init__(self, credentials_provider):
        self.credentials_provider = credentials_provider


class ProviderAuth(AuthBase):
    """Signature version 1, asking `credentials_provider` for credentials before every request."""
    def _sign_request(self, req, bucket_name, key):
        credentials = self.credentials_provider.get_credentials()
        if credentials.get_security_token():
            req.headers[OSS_SECURITY_TOKEN] = credentials.get_security_token()

        req.headers['date'] = utils.http_date()

        data = string_to_sign(req, bucket_name, key)
        logger.debug('Make signature: string to be signed = {0}'.format(data))

        h = hmac.new(to_bytes(credentials.get_access_key_secret()), data, hashlib.sha1)
        req.headers['authorization'] = "OSS {0}:{1}".format(credentials.get_access_key_id(),
                                                            utils.b64encode_as_string(h.digest()))


class Auth(ProviderAuth):
    """Signature version 1 with a fixed AccessKeyId and AccessKeySecret."""
    def __init__(self, access_key_id, access_key_secret):
        logger.debug("Init Auth v1: access_key_id: {0}, access_key_secret: ******".format(access_key_id))
        credentials_provider = StaticCredentialsProvider(access_key_id.strip(), access_key_secret.strip())
        super(Auth, self).__init__(credentials_provider)


class StsAuth(ProviderAuth):
    """Signature version 1 with temporary STS credentials.

    :param str access_key_id: temporary AccessKeyId
    :param str access_key_secret: temporary AccessKeySecret
    :param str security_token: temporary security token
    """
    def __init__(self, access_key_id, access_key_secret, security_token):
        logger.debug("Init StsAuth: access_key_id: {0}, access_key_secret: ******, security_token: ******".format(
            access_key_id))
        credentials_provider = StaticCredentialsProvider(access_key_id, access_key_secret, security_token)
        super(StsAuth, self).__init__(credentials_provider)


class AnonymousAuth(object):
    """Anonymous access. Requests are sent unsigned, e.g. to a bucket open for public writes or a local emulator."""
    def _sign_request(self, req, bucket_name, key):
        pass
