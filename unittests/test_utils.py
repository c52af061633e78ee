# -*- coding: utf-8 -*-

import unittest

import ossout
from ossout.utils import (content_type_by_name, set_content_type, is_ip_or_localhost, is_valid_bucket_name,
                          http_date, md5_string, check_crc, DefaultContentTypeResolver, NoContentTypeResolver,
                          ContentTypeResolver)
from ossout.exceptions import InconsistentError


class TestUtils(unittest.TestCase):
    def test_content_type_by_name(self):
        self.assertEqual(content_type_by_name('a.js'), 'application/javascript')
        self.assertEqual(content_type_by_name('dir/report.CSV'), 'text/csv')
        self.assertEqual(content_type_by_name('logs/today.txt'), 'text/plain')
        self.assertEqual(content_type_by_name('config.yaml'), 'application/x-yaml')
        self.assertEqual(content_type_by_name('backup.tar.gz'), 'application/gzip')
        self.assertEqual(content_type_by_name('x.docx'),
                         'application/vnd.openxmlformats-officedocument.wordprocessingml.document')
        self.assertEqual(content_type_by_name('image.png'), 'image/png')
        self.assertEqual(content_type_by_name('page.html'), 'text/html')

    def test_content_type_without_extension(self):
        self.assertEqual(content_type_by_name('README'), None)
        self.assertEqual(content_type_by_name('dir.d/README'), None)
        self.assertEqual(content_type_by_name('trailing.'), None)
        self.assertEqual(content_type_by_name(''), None)
        self.assertEqual(content_type_by_name('a.unknownextension'), None)

    def test_resolvers(self):
        self.assertEqual(DefaultContentTypeResolver().resolve('a/b.json'), 'application/json')
        self.assertEqual(NoContentTypeResolver().resolve('a/b.json'), None)
        self.assertRaises(NotImplementedError, ContentTypeResolver().resolve, 'a.json')

    def test_set_content_type(self):
        headers = set_content_type({}, 'a.csv')
        self.assertEqual(headers['Content-Type'], 'text/csv')

        headers = set_content_type({'Content-Type': 'text/plain'}, 'a.csv')
        self.assertEqual(headers['Content-Type'], 'text/plain')

        headers = set_content_type(None, 'README')
        self.assertEqual(headers, {})

        headers = set_content_type({}, 'a.csv', NoContentTypeResolver())
        self.assertEqual(headers, {})

        headers = set_content_type(ossout.CaseInsensitiveDict({'content-type': 'text/plain'}), 'a.csv')
        self.assertEqual(headers['Content-Type'], 'text/plain')

    def test_is_ip(self):
        self.assertTrue(is_ip_or_localhost('1.2.3.4'))
        self.assertTrue(is_ip_or_localhost('1.2.3.4:80'))
        self.assertTrue(is_ip_or_localhost('localhost'))
        self.assertTrue(is_ip_or_localhost('localhost:8080'))
        self.assertTrue(is_ip_or_localhost('[::1]:8080'))

        self.assertFalse(is_ip_or_localhost('oss-cn-hangzhou.aliyuncs.com'))
        self.assertFalse(is_ip_or_localhost('oss-cn-hangzhou.aliyuncs.com:80'))

    def test_is_valid_bucket_name(self):
        self.assertTrue(is_valid_bucket_name('my-bucket-1'))

        self.assertFalse(is_valid_bucket_name('ab'))
        self.assertFalse(is_valid_bucket_name('a' * 64))
        self.assertFalse(is_valid_bucket_name('bucket-'))
        self.assertFalse(is_valid_bucket_name('-bucket'))
        self.assertFalse(is_valid_bucket_name('My_Bucket'))

    def test_http_date(self):
        self.assertEqual(http_date(0), 'Thu, 01 Jan 1970 00:00:00 GMT')
        self.assertEqual(http_date(1449838901), 'Fri, 11 Dec 2015 13:01:41 GMT')

    def test_md5_string(self):
        self.assertEqual(md5_string(b''), 'd41d8cd98f00b204e9800998ecf8427e')
        self.assertEqual(md5_string('abc'), '900150983cd24fb0d6963f7d28e17f72')

    def test_crc64(self):
        crc = ossout.utils.Crc64()
        crc.update(b'123456789')
        self.assertEqual(crc.crc, 0x995DC9BBDF1939FA)

    def test_check_crc(self):
        check_crc('upload part', 1, 1, 'request-id')
        check_crc('upload part', 1, None, 'request-id')
        check_crc('upload part', None, 2, 'request-id')

        try:
            check_crc('upload part', 1, 2, 'request-id')
        except InconsistentError as e:
            self.assertEqual(e.request_id, 'request-id')
            self.assertTrue('upload part' in str(e))
        else:
            self.fail('InconsistentError expected')


if __name__ == '__main__':
    unittest.main()
