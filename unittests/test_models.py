# -*- coding: utf-8 -*-

import unittest

import ossout
from ossout.models import PartInfo, ObjectMetadata, MultipartUploadRequest
from ossout.exceptions import ClientError


class TestModels(unittest.TestCase):
    def test_object_metadata_headers(self):
        meta = ObjectMetadata(acl='public-read',
                              cache_control='no-cache',
                              content_disposition='attachment; filename="a.csv"',
                              content_encoding='gzip',
                              content_language='en',
                              content_type='text/csv',
                              expires=0,
                              metadata={'author': 'ocean', 'year': '2015'},
                              server_side_encryption='KMS',
                              server_side_encryption_key_id='key-id',
                              storage_class='IA',
                              tagging='k1=v1&k2=v2',
                              forbid_overwrite=True)
        headers = meta.to_headers()

        self.assertEqual(headers['x-oss-object-acl'], 'public-read')
        self.assertEqual(headers['Cache-Control'], 'no-cache')
        self.assertEqual(headers['Content-Disposition'], 'attachment; filename="a.csv"')
        self.assertEqual(headers['Content-Encoding'], 'gzip')
        self.assertEqual(headers['Content-Language'], 'en')
        self.assertEqual(headers['content-type'], 'text/csv')
        self.assertEqual(headers['Expires'], 'Thu, 01 Jan 1970 00:00:00 GMT')
        self.assertEqual(headers['x-oss-meta-author'], 'ocean')
        self.assertEqual(headers['x-oss-meta-year'], '2015')
        self.assertEqual(headers['x-oss-server-side-encryption'], 'KMS')
        self.assertEqual(headers['x-oss-server-side-encryption-key-id'], 'key-id')
        self.assertEqual(headers['x-oss-storage-class'], 'IA')
        self.assertEqual(headers['x-oss-tagging'], 'k1=v1&k2=v2')
        self.assertEqual(headers['x-oss-forbid-overwrite'], 'true')

    def test_empty_metadata(self):
        self.assertEqual(dict(ObjectMetadata().to_headers()), {})

    def test_expires_string(self):
        headers = ObjectMetadata(expires='Fri, 11 Dec 2015 13:01:41 GMT').to_headers()
        self.assertEqual(headers['Expires'], 'Fri, 11 Dec 2015 13:01:41 GMT')

    def test_forbid_overwrite_false(self):
        headers = ObjectMetadata(forbid_overwrite=False).to_headers()
        self.assertEqual(headers['x-oss-forbid-overwrite'], 'false')

    def test_extra_headers_and_customizer(self):
        def customizer(headers):
            headers['x-oss-meta-author'] = 'customized'
            del headers['x-oss-storage-class']

        meta = ObjectMetadata(storage_class='IA',
                              metadata={'author': 'ocean'},
                              headers={'x-oss-server-side-data-encryption': 'SM4'},
                              customizer=customizer)
        headers = meta.to_headers()

        self.assertEqual(headers['x-oss-server-side-data-encryption'], 'SM4')
        self.assertEqual(headers['x-oss-meta-author'], 'customized')
        self.assertTrue('x-oss-storage-class' not in headers)

    def test_apply_to_existing_headers(self):
        headers = ossout.CaseInsensitiveDict({'User-Agent': 'test'})
        result = ObjectMetadata(content_type='text/plain').apply(headers)

        self.assertTrue(result is headers)
        self.assertEqual(headers['User-Agent'], 'test')
        self.assertEqual(headers['Content-Type'], 'text/plain')

    def test_metadata_equality(self):
        self.assertEqual(ObjectMetadata(acl='private', metadata={'a': '1'}),
                         ObjectMetadata(acl='private', metadata={'a': '1'}))
        self.assertNotEqual(ObjectMetadata(acl='private'), ObjectMetadata(acl='public-read'))

    def test_metadata_copied(self):
        metadata = {'a': '1'}
        meta = ObjectMetadata(metadata=metadata)
        metadata['b'] = '2'

        self.assertEqual(meta.metadata, {'a': '1'})

    def test_request(self):
        meta = ObjectMetadata(acl='private')
        request = MultipartUploadRequest('bucket', 'key', object_metadata=meta)

        self.assertEqual(request.bucket_name, 'bucket')
        self.assertEqual(request.key, 'key')
        self.assertTrue(request.object_metadata is meta)
        self.assertEqual(request, MultipartUploadRequest('bucket', 'key', ObjectMetadata(acl='private')))
        self.assertNotEqual(request, MultipartUploadRequest('bucket', 'other-key', meta))

    def test_request_required_fields(self):
        self.assertRaises(ClientError, MultipartUploadRequest, None, 'key')
        self.assertRaises(ClientError, MultipartUploadRequest, 'bucket', None)

    def test_part_info(self):
        self.assertEqual(PartInfo(1, 'etag', size=3), PartInfo(1, 'etag', size=3, part_crc=10))
        self.assertNotEqual(PartInfo(1, 'etag'), PartInfo(2, 'etag'))
        self.assertNotEqual(PartInfo(1, 'etag'), PartInfo(1, 'other'))
        self.assertEqual(repr(PartInfo(1, 'etag', size=3)), "PartInfo(part_number=1, etag='etag', size=3)")


if __name__ == '__main__':
    unittest.main()
