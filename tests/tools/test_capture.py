import os
import tempfile
import unittest

import numpy

from adschain.gateware.config import SamplingConfiguration
from adschain.tools.capture import capture, main
from adschain.tools.stream_check import find_discontinuities

from tests.hdl import byte_sequence

class CaptureTest(unittest.TestCase):
    def test_full_frames(self):
        config = SamplingConfiguration(chain_length=1, data_rate=16000)
        data, errors = capture(config, frames=3)

        self.assertEqual(data.dtype, numpy.uint8)
        self.assertEqual(data.tobytes(), byte_sequence(0, 3 * config.frame_bytes))
        self.assertEqual(len(find_discontinuities(data)), 0)
        self.assertEqual(errors, [False, False, False])

    def test_short_frames(self):
        config = SamplingConfiguration(chain_length=1, data_rate=16000)
        with self.assertLogs("adschain.tools.capture", level="WARNING"):
            data, errors = capture(config, frames=2, bytes_per_frame=20)

        self.assertEqual(data.tobytes(), byte_sequence(0, 40))
        self.assertEqual(errors, [True, True])

    def test_main(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "capture.u8")
            status = main(["-n", "1", "-r", "16000", "-f", "2", "-o", path])
            self.assertEqual(status, 0)
            self.assertEqual(numpy.fromfile(path, dtype=numpy.uint8).tobytes(), byte_sequence(0, 54))

    def test_main_invalid(self):
        with self.assertRaises(SystemExit):
            main(["-n", "0"])
