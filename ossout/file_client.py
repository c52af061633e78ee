# -*- coding: utf-8 -*-

"""
ossout.file_client
~~~~~~~~~~~~~~~~~~

A :class:`MultipartUploadClient <ossout.api.MultipartUploadClient>` storing objects on the local file system.
Only meant for tests.
"""

import logging
import os
import threading
import uuid

from . import utils
from .api import MultipartUploadClient
from .exceptions import ClientError, NoSuchUpload
from .models import PartInfo

logger = logging.getLogger(__name__)


class MultipartUploadState(object):
    """Pending upload kept by :class:`FileMultipartUploadClient`."""
    def __init__(self, request):
        self.upload_id = uuid.uuid4().hex
        self.bucket_name = request.bucket_name
        self.key = request.key
        self.request = request
        self.parts = []
        self.etags = []

    def check_target(self, bucket_name, key):
        if self.bucket_name != bucket_name:
            raise ClientError('Incorrect bucket: {0} : {1}'.format(bucket_name, self.bucket_name))
        if self.key != key:
            raise ClientError('Incorrect key: {0} : {1}'.format(key, self.key))


class FileMultipartUploadClient(MultipartUploadClient):
    """Completed objects land in `<root>/<bucket_name>/<key>`.

    :param str root: directory holding one sub directory per bucket
    """
    def __init__(self, root):
        if root is None:
            raise ClientError('root is required')

        self.root = root

        # protect self.__uploads and self.__requests
        self.__lock = threading.Lock()
        self.__uploads = {}
        self.__requests = []

    @property
    def uploads(self):
        """Pending uploads, a dict from upload id to :class:`MultipartUploadState`."""
        with self.__lock:
            return dict(self.__uploads)

    @property
    def requests(self):
        """Every :class:`MultipartUploadRequest <ossout.models.MultipartUploadRequest>` received, in order."""
        with self.__lock:
            return list(self.__requests)

    def object_path(self, bucket_name, key):
        return os.path.join(self.root, bucket_name, *key.split('/'))

    def create_multipart_upload(self, request):
        state = MultipartUploadState(request)
        with self.__lock:
            self.__uploads[state.upload_id] = state
            self.__requests.append(request)

        logger.debug("Init file multipart upload, bucket: {0}, key: {1}, upload_id: {2}".format(
            request.bucket_name, request.key, state.upload_id))
        return state.upload_id

    def upload_part(self, bucket_name, key, upload_id, part_number, data):
        state = self.__get_state(upload_id)
        state.check_target(bucket_name, key)

        expected = len(state.parts) + 1
        if part_number != expected:
            raise ClientError('Incorrect part number: {0} : {1}'.format(part_number, expected))

        data = bytes(data)
        etag = utils.md5_string(data)
        state.parts.append(data)
        state.etags.append(etag)

        logger.debug("Upload file part, upload_id: {0}, part_number: {1}, size: {2}".format(
            upload_id, part_number, len(data)))
        return PartInfo(part_number, etag, size=len(data))

    def complete_multipart_upload(self, bucket_name, key, upload_id, parts):
        state = self.__get_state(upload_id)
        state.check_target(bucket_name, key)

        numbers = [p.part_number for p in parts]
        if numbers != list(range(1, len(state.parts) + 1)):
            raise ClientError('Incorrect parts: {0} : {1} parts uploaded'.format(numbers, len(state.parts)))
        for p in parts:
            if p.etag != state.etags[p.part_number - 1]:
                raise ClientError('Incorrect etag of part {0}: {1}'.format(p.part_number, p.etag))

        with self.__lock:
            self.__uploads.pop(upload_id, None)

        path = self.object_path(bucket_name, key)
        utils.makedir_p(os.path.dirname(path))

        with open(path, 'wb') as f:
            for data in state.parts:
                f.write(data)

        logger.debug("Complete file multipart upload, upload_id: {0}, path: {1}".format(upload_id, path))

    def abort_multipart_upload(self, bucket_name, key, upload_id):
        with self.__lock:
            state = self.__uploads.get(upload_id)
            if state is None:
                logger.debug("Abort unknown upload, upload_id: {0}".format(upload_id))
                return

            state.check_target(bucket_name, key)
            del self.__uploads[upload_id]

        logger.debug("Abort file multipart upload, upload_id: {0}".format(upload_id))

    def __get_state(self, upload_id):
        with self.__lock:
            state = self.__uploads.get(upload_id)

        if state is None:
            raise NoSuchUpload(404, {}, b'', {'Code': 'NoSuchUpload',
                                             'Message': 'The specified upload does not exist: ' + str(upload_id)})
        return state
