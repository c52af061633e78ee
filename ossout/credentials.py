# -*- coding: utf-8 -*-

"""
ossout.credentials
~~~~~~~~~~~~~~~~~~

Credentials signing the requests of :class:`OssMultipartUploadClient <ossout.api.OssMultipartUploadClient>`.
"""


class Credentials(object):
    """AccessKeyId, AccessKeySecret and, for temporary STS credentials, the security token."""
    def __init__(self, access_key_id="", access_key_secret="", security_token=""):
        self.access_key_id = access_key_id
        self.access_key_secret = access_key_secret
        self.security_token = security_token

    def get_access_key_id(self):
        return self.access_key_id

    def get_access_key_secret(self):
        return self.access_key_secret

    def get_security_token(self):
        return self.security_token


class CredentialsProvider(object):
    """Asked for credentials before every request is signed, so rotating credentials are picked up."""
    def get_credentials(self):
        raise NotImplementedError


class StaticCredentialsProvider(CredentialsProvider):
    def __init__(self, access_key_id="", access_key_secret="", security_token=""):
        self.credentials = Credentials(access_key_id, access_key_secret, security_token)

    def get_credentials(self):
        return self.credentials
