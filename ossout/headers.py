# -*- coding: utf-8 -*-
"""
ossout.headers
~~~~~~~~~~~~~~
Header names used by the multipart upload requests.
"""
OSS_USER_METADATA_PREFIX = "x-oss-meta-"

OSS_OBJECT_ACL = "x-oss-object-acl"

OSS_REQUEST_ID = "x-oss-request-id"

OSS_SECURITY_TOKEN = "x-oss-security-token"

OSS_HASH_CRC64_ECMA = "x-oss-hash-crc64ecma"

OSS_SERVER_SIDE_ENCRYPTION = "x-oss-server-side-encryption"
OSS_SERVER_SIDE_ENCRYPTION_KEY_ID = "x-oss-server-side-encryption-key-id"

OSS_STORAGE_CLASS = "x-oss-storage-class"

OSS_OBJECT_TAGGING = "x-oss-tagging"

OSS_FORBID_OVERWRITE = "x-oss-forbid-overwrite"

CACHE_CONTROL = "Cache-Control"
CONTENT_DISPOSITION = "Content-Disposition"
CONTENT_ENCODING = "Content-Encoding"
CONTENT_LANGUAGE = "Content-Language"
CONTENT_TYPE = "Content-Type"
EXPIRES = "Expires"
