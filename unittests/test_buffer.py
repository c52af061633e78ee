# -*- coding: utf-8 -*-

import unittest

from ossout.buffer import PartBuffer, BUFFER_FILLING, BUFFER_SEALED, BUFFER_CONSUMED
from ossout.exceptions import ClientError


class TestPartBuffer(unittest.TestCase):
    def test_put(self):
        buf = PartBuffer(5)
        self.assertTrue(buf.is_empty())
        self.assertEqual(buf.remaining, 5)

        self.assertEqual(buf.put(b'abc'), 3)
        self.assertEqual(len(buf), 3)
        self.assertFalse(buf.is_full())

        self.assertEqual(buf.put(memoryview(b'defgh')), 2)
        self.assertTrue(buf.is_full())
        self.assertEqual(buf.remaining, 0)
        self.assertEqual(buf.put(b'x'), 0)

        self.assertEqual(buf.seal(), b'abcde')

    def test_put_byte(self):
        buf = PartBuffer(2)
        buf.put_byte(0)
        buf.put_byte(255)

        self.assertRaises(ClientError, buf.put_byte, 1)
        self.assertEqual(buf.seal(), b'\x00\xff')

    def test_partial_seal(self):
        buf = PartBuffer(1024)
        buf.put(b'hello')

        self.assertEqual(buf.seal(), b'hello')
        self.assertEqual(buf.data, b'hello')
        self.assertEqual(len(buf), 5)

    def test_empty_seal(self):
        buf = PartBuffer(4)
        self.assertEqual(buf.seal(), b'')

    def test_states(self):
        buf = PartBuffer(4)
        self.assertEqual(buf.state, BUFFER_FILLING)
        self.assertRaises(ClientError, getattr, buf, 'data')

        buf.put(b'ab')
        data = buf.seal()
        self.assertEqual(buf.state, BUFFER_SEALED)
        self.assertTrue(isinstance(data, bytes))

        self.assertRaises(ClientError, buf.put, b'cd')
        self.assertRaises(ClientError, buf.put_byte, 1)
        self.assertRaises(ClientError, buf.seal)

        buf.consume()
        self.assertEqual(buf.state, BUFFER_CONSUMED)
        self.assertRaises(ClientError, getattr, buf, 'data')
        self.assertEqual(len(buf), 2)


if __name__ == '__main__':
    unittest.main()
