import os
import tempfile
import unittest

import numpy

from adschain.tools.stream_check import find_discontinuities, frame_words, main, split_frames

from tests.hdl import byte_sequence

class StreamCheckTest(unittest.TestCase):
    def test_continuous(self):
        data = numpy.frombuffer(byte_sequence(250, 600), dtype=numpy.uint8)
        self.assertEqual(len(find_discontinuities(data)), 0)

    def test_short(self):
        self.assertEqual(len(find_discontinuities([])), 0)
        self.assertEqual(len(find_discontinuities([7])), 0)

    def test_breaks(self):
        data = list(byte_sequence(0, 10)) + list(byte_sequence(20, 5)) + [24, 24, 25]
        # 20 after 9, the second 24, and the third 24.
        self.assertEqual(list(find_discontinuities(data)), [10, 15, 16])

    def test_split_frames(self):
        data = numpy.frombuffer(byte_sequence(0, 2 * 54 + 5), dtype=numpy.uint8)
        frames = split_frames(data, chain_length=2)
        self.assertEqual(frames.shape, (2, 2, 9, 3))
        self.assertEqual(frames[0, 0, 0].tolist(), [0, 1, 2])
        self.assertEqual(frames[0, 1, 0].tolist(), [27, 28, 29])
        self.assertEqual(frames[1, 0, 8].tolist(), [78, 79, 80])

    def test_frame_words(self):
        data = numpy.frombuffer(byte_sequence(0, 27), dtype=numpy.uint8)
        words = frame_words(data, chain_length=1)
        self.assertEqual(words.shape, (1, 1, 9))
        self.assertEqual(int(words[0, 0, 0]), 0x000102)
        self.assertEqual(int(words[0, 0, 8]), 0x18191a)

    def test_main(self):
        with tempfile.TemporaryDirectory() as directory:
            good = os.path.join(directory, "good.u8")
            bad = os.path.join(directory, "bad.u8")
            with open(good, "wb") as f:
                f.write(byte_sequence(0, 300))
            with open(bad, "wb") as f:
                f.write(byte_sequence(0, 10) + byte_sequence(40, 10))

            self.assertEqual(main([good, "--chain-length", "1"]), 0)
            with self.assertLogs("adschain.tools.stream_check", level="WARNING"):
                self.assertEqual(main([bad]), 1)
