# -*- coding: utf-8 -*-

"""
ossout.defaults
~~~~~~~~~~~~~~~

Global Default variables.

"""

import logging


def get(value, default_value):
    if value is None:
        return default_value
    else:
        return value


#: connection timeout
connect_timeout = 60

#: Connections kept per host by a Session, the caller's thread and the upload thread each use one.
connection_pool_size = 2

#: Smallest part size the service accepts for every part except the last one.
min_part_size = 5 * 1024 * 1024

#: Default part size of an output stream.
part_size = 5 * 1024 * 1024

#: Number of sealed parts allowed to wait for upload before write() blocks.
upload_queue_size = 1

#: Seconds between liveness checks while blocked on the upload queue.
queue_poll_interval = 1

#: Default Logger
logger = logging.getLogger('ossout')


def get_logger():
    return logger
