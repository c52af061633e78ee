# -*- coding: utf-8 -*-

"""
ossout.buffer
~~~~~~~~~~~~~

The fixed size buffer collecting the bytes of one part.
"""

from .exceptions import ClientError

BUFFER_FILLING = 'filling'
BUFFER_SEALED = 'sealed'
BUFFER_CONSUMED = 'consumed'


class PartBuffer(object):
    """Collects written bytes until it holds `capacity` bytes or the stream ends.

    A buffer goes through three states:
        #. `filling`: :func:`put` and :func:`put_byte` append bytes;
        #. `sealed`: :func:`seal` took an immutable copy of the content, available as :attr:`data`;
        #. `consumed`: the part was uploaded and :func:`consume` released the copy.

    :param int capacity: size of a full part in bytes
    """
    def __init__(self, capacity):
        self.capacity = capacity
        self.state = BUFFER_FILLING

        self.__buf = bytearray(capacity)
        self.__position = 0
        self.__data = None

    def __len__(self):
        return self.__position

    @property
    def remaining(self):
        return self.capacity - self.__position

    def is_full(self):
        return self.__position == self.capacity

    def is_empty(self):
        return self.__position == 0

    @property
    def data(self):
        """Content of a sealed buffer, as bytes."""
        if self.state != BUFFER_SEALED:
            raise ClientError('buffer is {0}, not {1}'.format(self.state, BUFFER_SEALED))
        return self.__data

    def put(self, data):
        """Append as much of the bytes-like `data` as fits.

        :return: the number of bytes appended, which is less than len(data) when the buffer got full
        """
        self.__check_filling()

        n = min(len(data), self.remaining)
        self.__buf[self.__position:self.__position + n] = data[:n]
        self.__position += n
        return n

    def put_byte(self, value):
        self.__check_filling()

        if self.is_full():
            raise ClientError('buffer is full')

        self.__buf[self.__position] = value
        self.__position += 1

    def seal(self):
        """Freeze the content. Later writes to this buffer are refused.

        :return: the content, as bytes
        """
        self.__check_filling()

        if self.is_full():
            self.__data = bytes(self.__buf)
        else:
            self.__data = bytes(memoryview(self.__buf)[:self.__position])
        self.__buf = None
        self.state = BUFFER_SEALED
        return self.__data

    def consume(self):
        self.__data = None
        self.state = BUFFER_CONSUMED

    def __check_filling(self):
        if self.state != BUFFER_FILLING:
            raise ClientError('buffer is {0}, not {1}'.format(self.state, BUFFER_FILLING))
