# -*- coding: utf-8 -*-

"""
ossout.xml_utils
~~~~~~~~~~~~~~~~

XML handling of the multipart upload requests and responses:
    - parse_ functions parse a response body into a result object;
    - to_ functions build a request body from Python objects.
"""

import xml.etree.ElementTree as ElementTree

from .compat import to_unicode, to_string


def _find_tag(parent, path):
    child = parent.find(path)
    if child is None:
        raise RuntimeError("parse xml: " + path + " could not be found under " + parent.tag)

    if child.text is None:
        return ''

    return to_string(child.text)


def _find_optional(parent, path):
    child = parent.find(path)
    if child is None or child.text is None:
        return ''

    return to_string(child.text)


def _node_to_string(root):
    return ElementTree.tostring(root, encoding='utf-8')


def _add_text_child(parent, tag, text):
    ElementTree.SubElement(parent, tag).text = to_unicode(text)


def parse_init_multipart_upload(result, body):
    root = ElementTree.fromstring(body)
    result.upload_id = _find_tag(root, 'UploadId')

    return result


def to_complete_upload_request(parts):
    root = ElementTree.Element('CompleteMultipartUpload')
    for p in parts:
        part_node = ElementTree.SubElement(root, "Part")
        _add_text_child(part_node, 'PartNumber', str(p.part_number))
        _add_text_child(part_node, 'ETag', '"{0}"'.format(p.etag))

    return _node_to_string(root)


def parse_complete_multipart_upload(result, body):
    if not body:
        return result

    root = ElementTree.fromstring(body)
    result.location = _find_optional(root, 'Location')
    result.bucket = _find_optional(root, 'Bucket')
    result.key = _find_optional(root, 'Key')
    if result.etag is None:
        result.etag = _find_optional(root, 'ETag').strip('"')

    return result
