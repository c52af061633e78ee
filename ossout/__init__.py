__version__ = '1.0.0'

from . import models, exceptions, defaults

from .api import MultipartUploadClient, OssMultipartUploadClient
from .auth import Auth, StsAuth, AnonymousAuth, ProviderAuth
from .http import Session, CaseInsensitiveDict
from .credentials import CredentialsProvider, StaticCredentialsProvider
from .file_client import FileMultipartUploadClient

from .stream import OssOutputStream
from .buffer import PartBuffer
from .task_queue import TaskQueue

from .compat import to_bytes, to_string, to_unicode

from .utils import content_type_by_name, ContentTypeResolver, DefaultContentTypeResolver, NoContentTypeResolver

from .models import PartInfo, ObjectMetadata, MultipartUploadRequest

import logging

logger = logging.getLogger('ossout')


def set_file_logger(file_path, name="ossout", level=logging.INFO, format_string=None):
    global logger
    if not format_string:
        format_string = "%(asctime)s %(name)s [%(levelname)s] %(thread)d : %(message)s"
    logger = logging.getLogger(name)
    logger.setLevel(level)
    fh = logging.FileHandler(file_path)
    fh.setLevel(level)
    formatter = logging.Formatter(format_string)
    fh.setFormatter(formatter)
    logger.addHandler(fh)


def set_stream_logger(name='ossout', level=logging.DEBUG, format_string=None):
    global logger
    if not format_string:
        format_string = "%(asctime)s %(name)s [%(levelname)s] %(thread)d : %(message)s"
    logger = logging.getLogger(name)
    logger.setLevel(level)
    fh = logging.StreamHandler()
    fh.setLevel(level)
    formatter = logging.Formatter(format_string)
    fh.setFormatter(formatter)
    logger.addHandler(fh)
