# -*- coding: utf-8 -*-

import logging
import os
import shutil

import ossout


# The following code shows how to write an object through an output stream.


# First initialize AccessKeyId, AccessKeySecret, Endpoint and so on.
# Read them from environment variables, or replace values like "<your AccessKeyId>" with real ones.
#
# Taking the Hangzhou region as an example, the endpoint may be:
#   http://oss-cn-hangzhou.aliyuncs.com
#   https://oss-cn-hangzhou.aliyuncs.com
access_key_id = os.getenv('OSS_TEST_ACCESS_KEY_ID', '<your AccessKeyId>')
access_key_secret = os.getenv('OSS_TEST_ACCESS_KEY_SECRET', '<your AccessKeySecret>')
bucket_name = os.getenv('OSS_TEST_BUCKET', '<your Bucket>')
endpoint = os.getenv('OSS_TEST_ENDPOINT', '<your Endpoint>')


# Make sure every parameter above is filled in
for param in (access_key_id, access_key_secret, bucket_name, endpoint):
    assert '<' not in param, 'Please set the parameter: ' + param


ossout.set_stream_logger(level=logging.INFO)

client = ossout.OssMultipartUploadClient(ossout.Auth(access_key_id, access_key_secret), endpoint)


# Copy a local file. Leaving the with block normally completes the upload, an exception aborts it.
filename = 'stream-upload-example.bin'
with open(filename, 'wb') as f:
    f.write(os.urandom(12 * 1024 * 1024 + 1))

with ossout.OssOutputStream(client, bucket_name, 'streamed/' + filename, auto_complete=True,
                            upload_queue_size=2) as stream:
    with open(filename, 'rb') as source:
        shutil.copyfileobj(source, stream)

print('uploaded {0} parts'.format(len(stream.parts)))


# Produce a csv report row by row. In explicit mode the upload is only completed once done() was called,
# so closing the stream in a finally block never publishes a half written report.
meta = ossout.ObjectMetadata(metadata={'generator': 'stream-upload-example'}, forbid_overwrite=False)

stream = ossout.OssOutputStream(client, bucket_name, 'streamed/report.csv', auto_complete=False,
                                object_metadata=meta)
try:
    stream.write('id,square\n')
    for i in range(100000):
        stream.write('{0},{1}\n'.format(i, i * i))
    stream.done()
finally:
    stream.close()

print('report: ' + stream.state)

os.remove(filename)
