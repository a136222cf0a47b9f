#!/usr/bin/env python3

#
# This file is part of adschain.
#
# Copyright (C) 2026 The adschain developers
# SPDX-License-Identifier: BSD-3-Clause

import argparse
import logging
import sys

import numpy

from adschain.gateware.common import BYTES_PER_WORD, WORDS_PER_DEVICE

logger = logging.getLogger(__name__)

def find_discontinuities(data) -> numpy.ndarray:
	"""
	Indices at which a byte stream stops counting up by one (modulo 256).
	"""
	d = numpy.asarray(data, dtype=numpy.uint8)
	if len(d) < 2:
		return numpy.zeros(0, dtype=numpy.intp)
	expected = d[:-1] + numpy.uint8(1)
	return numpy.flatnonzero(d[1:] != expected) + 1

def split_frames(data, chain_length: int) -> numpy.ndarray:
	"""
	Reshape a capture into (frame, device, word, byte), dropping any
	trailing partial frame.
	"""
	d = numpy.asarray(data, dtype=numpy.uint8)
	frame_bytes = chain_length * WORDS_PER_DEVICE * BYTES_PER_WORD
	d = d[:(len(d) // frame_bytes) * frame_bytes]
	return numpy.reshape(d, (-1, chain_length, WORDS_PER_DEVICE, BYTES_PER_WORD))

def frame_words(data, chain_length: int) -> numpy.ndarray:
	"""
	24-bit big-endian words of a capture, as (frame, device, word).
	"""
	f = split_frames(data, chain_length).astype(numpy.uint32)
	return (f[..., 0] << 16) | (f[..., 1] << 8) | f[..., 2]

def main(argv=None):
	parser = argparse.ArgumentParser(description="Check that a captured stream is a continuous byte counter.")
	parser.add_argument("path", help="raw uint8 capture")
	parser.add_argument("-n", "--chain-length", type=int, default=None,
		help="also report the number of complete frames for this chain length")
	parser.add_argument("-v", "--verbose", action="store_true")
	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	d = numpy.fromfile(args.path, dtype=numpy.uint8)
	logger.info(f"{len(d)} bytes")

	if args.chain_length is not None:
		logger.info(f"{len(split_frames(d, args.chain_length))} complete frames")

	breaks = find_discontinuities(d)
	for i in breaks:
		logger.warning(f"offset {i}: expected {(int(d[i - 1]) + 1) & 0xff}, got {d[i]}")

	return 1 if len(breaks) else 0

if __name__ == "__main__":
	sys.exit(main())
