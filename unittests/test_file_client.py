# -*- coding: utf-8 -*-

import ossout
from ossout.exceptions import ClientError, NoSuchUpload

from common import *


class TestFileClient(OssTestCase):
    def setUp(self):
        super(TestFileClient, self).setUp()
        self.client = ossout.FileMultipartUploadClient(self.tempdir())

    def create(self, key='a/b/c.txt'):
        return self.client.create_multipart_upload(ossout.MultipartUploadRequest(BUCKET_NAME, key))

    def test_upload_and_complete(self):
        upload_id = self.create()

        p1 = self.client.upload_part(BUCKET_NAME, 'a/b/c.txt', upload_id, 1, b'hello ')
        p2 = self.client.upload_part(BUCKET_NAME, 'a/b/c.txt', upload_id, 2, b'world')

        self.assertEqual(p1, ossout.PartInfo(1, ossout.utils.md5_string(b'hello '), size=6))
        self.assertEqual(p2.size, 5)
        self.assertTrue(upload_id in self.client.uploads)

        self.client.complete_multipart_upload(BUCKET_NAME, 'a/b/c.txt', upload_id, [p1, p2])

        self.assertEqual(self.read_object(self.client, BUCKET_NAME, 'a/b/c.txt'), b'hello world')
        self.assertEqual(self.client.uploads, {})

    def test_requests_recorded(self):
        meta = ossout.ObjectMetadata(storage_class='IA')
        request = ossout.MultipartUploadRequest(BUCKET_NAME, 'key', object_metadata=meta)
        self.client.create_multipart_upload(request)

        self.assertEqual(self.client.requests, [request])

    def test_upload_ids_unique(self):
        self.assertNotEqual(self.create(), self.create())

    def test_wrong_part_number(self):
        upload_id = self.create()

        self.assertRaises(ClientError, self.client.upload_part, BUCKET_NAME, 'a/b/c.txt', upload_id, 2, b'x')
        self.client.upload_part(BUCKET_NAME, 'a/b/c.txt', upload_id, 1, b'x')
        self.assertRaises(ClientError, self.client.upload_part, BUCKET_NAME, 'a/b/c.txt', upload_id, 1, b'x')

    def test_wrong_target(self):
        upload_id = self.create()

        self.assertRaises(ClientError, self.client.upload_part, 'other-bucket', 'a/b/c.txt', upload_id, 1, b'x')
        self.assertRaises(ClientError, self.client.upload_part, BUCKET_NAME, 'other-key', upload_id, 1, b'x')

    def test_wrong_parts_on_complete(self):
        upload_id = self.create()
        p1 = self.client.upload_part(BUCKET_NAME, 'a/b/c.txt', upload_id, 1, b'x')
        p2 = self.client.upload_part(BUCKET_NAME, 'a/b/c.txt', upload_id, 2, b'y')

        self.assertRaises(ClientError, self.client.complete_multipart_upload,
                          BUCKET_NAME, 'a/b/c.txt', upload_id, [p2, p1])
        self.assertRaises(ClientError, self.client.complete_multipart_upload,
                          BUCKET_NAME, 'a/b/c.txt', upload_id, [p1])
        self.assertRaises(ClientError, self.client.complete_multipart_upload,
                          BUCKET_NAME, 'a/b/c.txt', upload_id, [p1, ossout.PartInfo(2, 'bad-etag')])

    def test_unknown_upload(self):
        self.assertRaises(NoSuchUpload, self.client.upload_part, BUCKET_NAME, 'key', 'no-such-upload', 1, b'x')
        self.assertRaises(NoSuchUpload, self.client.complete_multipart_upload, BUCKET_NAME, 'key',
                          'no-such-upload', [])

        # aborting an unknown upload does nothing
        self.client.abort_multipart_upload(BUCKET_NAME, 'key', 'no-such-upload')

    def test_abort(self):
        upload_id = self.create()
        self.client.upload_part(BUCKET_NAME, 'a/b/c.txt', upload_id, 1, b'x')
        self.client.abort_multipart_upload(BUCKET_NAME, 'a/b/c.txt', upload_id)

        self.assertEqual(self.client.uploads, {})
        self.assertRaises(NoSuchUpload, self.client.upload_part, BUCKET_NAME, 'a/b/c.txt', upload_id, 2, b'y')
        self.assertFalse(os.path.exists(self.client.object_path(BUCKET_NAME, 'a/b/c.txt')))

    def test_root_required(self):
        self.assertRaises(ClientError, ossout.FileMultipartUploadClient, None)


if __name__ == '__main__':
    unittest.main()
