# -*- coding: utf-8 -*-

"""
ossout.stream
~~~~~~~~~~~~~

A writable file-like object backed by a multipart upload.
"""

import logging

from . import defaults
from .buffer import PartBuffer
from .compat import to_bytes
from .exceptions import ClientError, InvalidArgument
from .models import MultipartUploadRequest
from .task_queue import TaskQueue

logger = logging.getLogger(__name__)

STATE_OPEN = 'open'
STATE_CLOSING = 'closing'
STATE_COMMITTED = 'committed'
STATE_DISCARDED = 'discarded'
STATE_FAILED = 'failed'


class OssOutputStream(object):
    """Uploads everything written to it as one object, part by part.

    Bytes are collected in a buffer of `part_size` bytes. Every full buffer is handed to a dedicated upload
    thread through a queue holding at most `upload_queue_size` buffers, so the caller keeps producing data
    while earlier parts are uploaded. When the queue is full, `write()` blocks until the upload thread catches up.

    The stream ends in one of two ways:
        - :func:`finish` uploads the last, possibly smaller, part and completes the upload;
        - :func:`discard` aborts the upload. Errors of the abort call are logged and swallowed.

    :func:`close` picks one of them from the completion intent. With `auto_complete=True` the stream behaves
    like a regular file and `close()` completes the upload. With `auto_complete=False`, `close()` aborts unless
    :func:`done` was called first, which suits code that closes the stream in a `finally` block ::

        >>> stream = ossout.OssOutputStream(client, 'bucket', 'backup.tar', auto_complete=False)
        >>> try:
        ...     shutil.copyfileobj(source, stream)
        ...     stream.done()
        ... finally:
        ...     stream.close()

    Used as a context manager, the upload is aborted whenever the block exits with an exception.

    A stream is written by one thread at a time.

    :param client: the backend, a :class:`MultipartUploadClient <ossout.api.MultipartUploadClient>`
    :param str bucket_name: bucket name
    :param str key: object key
    :param bool auto_complete: completion intent, True to complete on `close()`
    :param object_metadata: :class:`ObjectMetadata <ossout.models.ObjectMetadata>` applied when the upload is created
    :param int part_size: size of every part but the last, at least `defaults.min_part_size`.
        `defaults.part_size` if not specified.
    :param int upload_queue_size: number of full parts waiting for upload before `write()` blocks.
        `defaults.upload_queue_size` if not specified.
    :param progress_callback: called from the upload thread after every part. Check out :ref:`progress_callback`,
        `total_bytes` is always None.
    """
    def __init__(self, client, bucket_name, key, auto_complete,
                 object_metadata=None,
                 part_size=None,
                 upload_queue_size=None,
                 progress_callback=None):
        part_size = defaults.get(part_size, defaults.part_size)
        upload_queue_size = defaults.get(upload_queue_size, defaults.upload_queue_size)

        if part_size < defaults.min_part_size:
            raise InvalidArgument('part size must be at least {0}, got {1}'.format(defaults.min_part_size, part_size))
        if upload_queue_size < 1:
            raise InvalidArgument('upload queue size must be at least 1, got {0}'.format(upload_queue_size))

        self.client = client
        self.bucket_name = bucket_name
        self.key = key
        self.part_size = part_size

        self.__complete = bool(auto_complete)
        self.__state = STATE_OPEN
        self.__broken = False
        self.__size = 0
        self.__parts = None

        self.upload_id = client.create_multipart_upload(
            MultipartUploadRequest(bucket_name, key, object_metadata=object_metadata))
        logger.info("Init output stream, bucket: {0}, key: {1}, upload_id: {2}, part_size: {3}, "
                    "upload_queue_size: {4}".format(bucket_name, key, self.upload_id, part_size, upload_queue_size))

        self.__buffer = PartBuffer(part_size)
        self.__queue = TaskQueue(_PartUploader(client, bucket_name, key, self.upload_id, progress_callback),
                                 maxsize=upload_queue_size,
                                 name='ossout-upload-{0}'.format(self.upload_id))
        self.__queue.start()

    @property
    def state(self):
        """One of 'open', 'closing', 'committed', 'discarded', and 'failed' when the complete call failed."""
        return self.__state

    @property
    def closed(self):
        return self.__state != STATE_OPEN

    @property
    def parts(self):
        """Uploaded parts in part number order, once the upload thread has finished; None before."""
        return self.__parts

    def writable(self):
        return True

    def tell(self):
        """Number of bytes written so far."""
        return self.__size

    def flush(self):
        """Nothing to do: a part is only uploaded once full, or when the stream finishes."""
        pass

    def write(self, data, offset=0, length=None):
        """Write `length` bytes of `data` starting at `offset`.

        :param data: bytes-like object, or str which is encoded as UTF-8
        :param int offset: position of the first byte in `data`
        :param int length: number of bytes, up to the end of `data` if not specified

        :return: the number of bytes written
        :raises: :class:`InvalidArgument <ossout.exceptions.InvalidArgument>` if the range is not within `data`
        """
        if data is None:
            raise InvalidArgument('data must not be None')

        try:
            view = memoryview(to_bytes(data)).cast('B')
        except TypeError:
            raise InvalidArgument('data must be bytes-like or str, got {0}'.format(type(data).__name__))
        if length is None:
            length = len(view) - offset

        if offset < 0 or length < 0 or offset + length > len(view):
            raise InvalidArgument('offset {0} and length {1} out of range of {2} bytes'.format(
                offset, length, len(view)))

        self.__check_open()

        if length == 0:
            return 0

        view = view[offset:offset + length]
        while view:
            n = self.__buffer.put(view)
            view = view[n:]
            self.__size += n

            if self.__buffer.is_full():
                self.__cycle_buffer()

        return length

    def write_byte(self, value):
        """Write one byte, an int from 0 to 255."""
        if not isinstance(value, int) or not 0 <= value <= 255:
            raise InvalidArgument('byte must be in range(0, 256), got {0}'.format(value))

        self.__check_open()

        self.__buffer.put_byte(value)
        self.__size += 1

        if self.__buffer.is_full():
            self.__cycle_buffer()

    def done(self):
        """Mark the data complete: `close()` will complete the upload instead of aborting it."""
        self.__complete = True

    def close(self):
        """Finish or discard the upload, depending on the completion intent. Closing twice does nothing."""
        if self.closed:
            return

        if self.__complete and not self.__broken:
            self.finish()
        else:
            self.discard()

    def finish(self):
        """Upload the last part, wait for the upload thread and complete the upload.

        If the parts could not all be uploaded, the upload is aborted and the error re-raised.
        Errors of the complete call are raised as is.

        :return: whatever the backend's `complete_multipart_upload` returned
        """
        if self.__broken:
            self.discard()
            raise ClientError('output stream failed to hand a part to the upload thread, upload aborted: '
                              'bucket: {0}, key: {1}'.format(self.bucket_name, self.key))

        self.__check_open()
        self.__state = STATE_CLOSING

        try:
            # an empty stream still sends one empty part, the complete call needs at least one
            if not self.__buffer.is_empty() or self.__size == 0:
                self.__upload_buffer()
            self.__queue.put_end()
            self.__parts = self.__queue.join()
        except BaseException:
            logger.error("Failed to upload parts, aborting, bucket: {0}, key: {1}, upload_id: {2}".format(
                self.bucket_name, self.key, self.upload_id))
            self.__cancel_upload()
            raise

        logger.info("Complete output stream, bucket: {0}, key: {1}, upload_id: {2}, parts: {3}, size: {4}".format(
            self.bucket_name, self.key, self.upload_id, len(self.__parts), self.__size))
        try:
            result = self.client.complete_multipart_upload(self.bucket_name, self.key, self.upload_id, self.__parts)
        except BaseException:
            self.__state = STATE_FAILED
            raise

        self.__state = STATE_COMMITTED
        return result

    def discard(self):
        """Stop the upload thread and abort the upload. Bytes still in the part buffer are dropped."""
        if self.closed:
            raise ClientError('output stream is {0}: bucket: {1}, key: {2}'.format(
                self.__state, self.bucket_name, self.key))
        self.__state = STATE_CLOSING

        try:
            self.__queue.put_end()
            self.__parts = self.__queue.join()
        except Exception as e:
            logger.warning("Upload thread failed before abort, bucket: {0}, key: {1}, upload_id: {2}: {3}".format(
                self.bucket_name, self.key, self.upload_id, e))
        except BaseException:
            logger.error("Interrupted while discarding, bucket: {0}, key: {1}, upload_id: {2}".format(
                self.bucket_name, self.key, self.upload_id))
            self.__cancel_upload()
            raise

        self.__state = STATE_DISCARDED
        logger.info("Discard output stream, bucket: {0}, key: {1}, upload_id: {2}".format(
            self.bucket_name, self.key, self.upload_id))
        self.__abort()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        if exc_type is None:
            self.close()
        elif not self.closed:
            self.discard()

    def __check_open(self):
        if self.__state != STATE_OPEN:
            raise ClientError('output stream is {0}: bucket: {1}, key: {2}'.format(
                self.__state, self.bucket_name, self.key))
        if self.__broken:
            raise ClientError('output stream failed to hand a part to the upload thread: bucket: {0}, key: {1}'.format(
                self.bucket_name, self.key))

    def __upload_buffer(self):
        buf = self.__buffer
        buf.seal()
        logger.debug("Seal part buffer, upload_id: {0}, size: {1}".format(self.upload_id, len(buf)))

        try:
            self.__queue.put(buf)
        except BaseException as e:
            self.__broken = True
            # interrupted while blocked on a full queue: the session is over
            if not isinstance(e, Exception) and self.__state == STATE_OPEN:
                logger.error("Interrupted while handing a part to the upload thread, aborting, bucket: {0}, "
                             "key: {1}, upload_id: {2}".format(self.bucket_name, self.key, self.upload_id))
                self.__state = STATE_CLOSING
                self.__cancel_upload()
            raise

    def __cycle_buffer(self):
        self.__upload_buffer()
        self.__buffer = PartBuffer(self.part_size)

    def __cancel_upload(self):
        # parts still queued are dropped, the one being uploaded is waited for, then the upload is aborted
        self.__queue.cancel()
        try:
            self.__queue.join()
        except Exception as e:
            logger.warning("Upload thread failed before abort, bucket: {0}, key: {1}, upload_id: {2}: {3}".format(
                self.bucket_name, self.key, self.upload_id, e))
        except BaseException:
            self.__state = STATE_DISCARDED
            logger.error("Interrupted while waiting for the upload thread, upload not aborted, bucket: {0}, "
                         "key: {1}, upload_id: {2}".format(self.bucket_name, self.key, self.upload_id))
            raise

        self.__state = STATE_DISCARDED
        self.__abort()

    def __abort(self):
        try:
            self.client.abort_multipart_upload(self.bucket_name, self.key, self.upload_id)
        except Exception as e:
            logger.warning("An error occurred aborting multipart upload: {0}:{1}, upload_id: {2}: {3}".format(
                self.bucket_name, self.key, self.upload_id, e))


class _PartUploader(object):
    """Body of the upload thread. Owns the list of uploaded parts until it returns it."""
    def __init__(self, client, bucket_name, key, upload_id, progress_callback=None):
        self.client = client
        self.bucket_name = bucket_name
        self.key = key
        self.upload_id = upload_id
        self.progress_callback = progress_callback

    def __call__(self, q):
        parts = []
        uploaded_size = 0

        while True:
            buf = q.get()
            if buf is None or q.cancelled():
                return parts

            part_number = len(parts) + 1
            part = self.client.upload_part(self.bucket_name, self.key, self.upload_id, part_number, buf.data)
            uploaded_size += len(buf)
            buf.consume()
            parts.append(part)

            if self.progress_callback:
                self.progress_callback(uploaded_size, None)
