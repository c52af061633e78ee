# -*- coding: utf-8 -*-

import random
import string
import unittest
import tempfile
import threading
import io
import os
import functools
import re
import shutil

from xml.dom import minidom

import ossout

BUCKET_NAME = 'ming-oss-share'
ENDPOINT = 'http://oss-cn-hangzhou.aliyuncs.com'

REQUEST_ID = '566AB62EB06147681C283D73'
ETAG = '7AE1A589ED6B161CAD94ACDB98206DA6'
UPLOAD_ID = '97BD544A65DB46F9A8735C93917A960F'


def random_string(n):
    return ''.join(random.choice(string.ascii_lowercase) for i in range(n))


def random_bytes(n):
    return ossout.to_bytes(random_string(n))


def oss_client(**kwargs):
    return ossout.OssMultipartUploadClient(ossout.Auth('fake-access-key-id', 'fake-access-key-secret'),
                                           ENDPOINT, **kwargs)


class NonlocalObject(object):
    def __init__(self, value):
        self.var = value


class RecordingClient(ossout.MultipartUploadClient):
    """Keeps every call and every uploaded part in memory.

    :param fail_upload_at: part number whose upload raises `upload_error`
    :param upload_error: exception raised by the failing upload
    :param fail_complete: exception raised by complete_multipart_upload
    :param fail_abort: exception raised by abort_multipart_upload
    :param upload_gate: threading.Event every part upload waits for
    """
    def __init__(self, fail_upload_at=None, upload_error=None, fail_complete=None, fail_abort=None,
                 upload_gate=None):
        self.fail_upload_at = fail_upload_at
        self.upload_error = upload_error or RuntimeError('upload part failed')
        self.fail_complete = fail_complete
        self.fail_abort = fail_abort
        self.upload_gate = upload_gate

        self.lock = threading.Lock()
        self.calls = []
        self.requests = []
        self.uploaded = {}
        self.completed_parts = None
        self.part_started = threading.Event()

    def call_names(self):
        with self.lock:
            return [c[0] for c in self.calls]

    def content(self):
        with self.lock:
            return b''.join(self.uploaded[n] for n in sorted(self.uploaded))

    def create_multipart_upload(self, request):
        with self.lock:
            self.calls.append(('create', request.bucket_name, request.key))
            self.requests.append(request)
        return UPLOAD_ID

    def upload_part(self, bucket_name, key, upload_id, part_number, data):
        self.part_started.set()
        if self.upload_gate is not None:
            self.upload_gate.wait()

        with self.lock:
            self.calls.append(('upload', part_number, len(data)))

        if part_number == self.fail_upload_at:
            raise self.upload_error

        with self.lock:
            self.uploaded[part_number] = bytes(data)
        return ossout.PartInfo(part_number, ossout.utils.md5_string(data), size=len(data))

    def complete_multipart_upload(self, bucket_name, key, upload_id, parts):
        with self.lock:
            self.calls.append(('complete', upload_id, len(parts)))
            self.completed_parts = list(parts)

        if self.fail_complete is not None:
            raise self.fail_complete
        return 'completed'

    def abort_multipart_upload(self, bucket_name, key, upload_id):
        with self.lock:
            self.calls.append(('abort', upload_id))

        if self.fail_abort is not None:
            raise self.fail_abort


class RequestInfo(object):
    def __init__(self):
        self.req = None
        self.data = None
        self.size = None


def do4response(req, timeout, req_info=None, payload=None):
    if req_info:
        req_info.req = req

        if req.data is None:
            req_info.data = b''
        else:
            req_info.data = ossout.to_bytes(bytes(req.data))
        req_info.size = len(req_info.data)

    return MockResponse2(payload)


def mock_response(do_request, payload):
    req_info = RequestInfo()

    do_request.auto_spec = True
    do_request.side_effect = functools.partial(do4response, req_info=req_info, payload=payload)

    return req_info


def head_fields_to_headers(head_fields):
    headers = ossout.CaseInsensitiveDict()
    for header_kv in head_fields:
        kv = header_kv.split(':', 1)
        if len(kv) == 2:
            headers[kv[0].strip()] = kv[1].strip()
        else:
            headers[kv[0].strip()] = ''

    return headers


class MockResponse2(object):
    def __init__(self, response_text):
        if isinstance(response_text, bytes):
            fields = re.split(b'\n\n', response_text, 1)
        else:
            fields = re.split('\n\n', response_text, 1)
        head_fields = re.split('\n', ossout.to_string(fields[0]))
        response_line_fields = head_fields[0].split(' ', 2)

        self.status = int(response_line_fields[1])
        self.headers = head_fields_to_headers(head_fields[1:])
        self.request_id = self.headers.get('x-oss-request-id', '')

        if len(fields) == 2:
            self.body = ossout.to_bytes(fields[1])
        else:
            self.body = b''

        self.__io = io.BytesIO(self.body)

    def read(self, amt=None):
        return self.__io.read(amt)

    def __iter__(self):
        return self

    def __next__(self):
        return self.read(8192)


class OssTestCase(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(OssTestCase, self).__init__(*args, **kwargs)
        self.default_connect_timeout = ossout.defaults.connect_timeout
        self.default_min_part_size = ossout.defaults.min_part_size
        self.default_part_size = ossout.defaults.part_size
        self.default_upload_queue_size = ossout.defaults.upload_queue_size
        self.default_queue_poll_interval = ossout.defaults.queue_poll_interval

    def setUp(self):
        self.temp_dirs = []
        self.previous = -1

    def tearDown(self):
        ossout.defaults.connect_timeout = self.default_connect_timeout
        ossout.defaults.min_part_size = self.default_min_part_size
        ossout.defaults.part_size = self.default_part_size
        ossout.defaults.upload_queue_size = self.default_upload_queue_size
        ossout.defaults.queue_poll_interval = self.default_queue_poll_interval

        for temp_dir in self.temp_dirs:
            shutil.rmtree(temp_dir, ignore_errors=True)

    def small_parts(self, min_part_size=1):
        ossout.defaults.min_part_size = min_part_size
        ossout.defaults.queue_poll_interval = 0.05

    def tempdir(self):
        dirname = tempfile.mkdtemp(prefix='ossout-test-')
        self.temp_dirs.append(dirname)
        return dirname

    def read_object(self, client, bucket_name, key):
        with open(client.object_path(bucket_name, key), 'rb') as f:
            return f.read()

    def progress_callback(self, bytes_consumed, total_bytes):
        self.assertTrue(total_bytes is None)
        self.assertTrue(bytes_consumed > self.previous)

        self.previous = bytes_consumed

    def assertXmlEqual(self, a, b):
        normalized_a = minidom.parseString(ossout.to_bytes(a)).toxml(encoding='utf-8')
        normalized_b = minidom.parseString(ossout.to_bytes(b)).toxml(encoding='utf-8')

        self.assertEqual(normalized_a, normalized_b)

    def assertUrlWithKey(self, url, key):
        self.assertEqual('http://' + BUCKET_NAME + '.oss-cn-hangzhou.aliyuncs.com/' + key, url)
