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

from adschain.gateware.chain import AdsChain
from adschain.gateware.common import DEFAULT_CHAIN_LENGTH, DEFAULT_DATA_RATE
from adschain.gateware.config import ConfigurationError, SamplingConfiguration
from adschain.gateware.conversion import ConversionState
from adschain.sim.harness import DEFAULT_SCLK_FREQUENCY, ChainHarness, StepDriver, run

logger = logging.getLogger(__name__)

def capture(config: SamplingConfiguration, frames: int, bytes_per_frame=None,
		sclk_frequency=DEFAULT_SCLK_FREQUENCY, vcd=None):
	"""
	Simulate a host that waits for DRDY and reads `bytes_per_frame` bytes
	(default: one full frame) in each of `frames` sample periods.

	Returns the captured bytes and the error flag seen after each window.
	"""
	if bytes_per_frame is None:
		bytes_per_frame = config.frame_bytes

	harness = ChainHarness(AdsChain(config=config))
	driver = StepDriver(harness, sclk_frequency=sclk_frequency, realtime=True)

	data = bytearray()
	errors = []

	async def bench(ctx):
		driver.set_start(ctx, 1)
		await driver.clock(ctx)

		for n in range(frames):
			ticks = await driver.wait_ready(ctx, limit=config.settle_cycles + config.sample_cycles)
			logger.debug(f"frame {n}: ready after {ticks} ticks")

			ready_tick = driver.ticks
			data.extend(await driver.read_bytes(ctx, bytes_per_frame))
			if driver.ticks - ready_tick >= config.ready_cycles:
				logger.warning(f"frame {n}: read overran the DataReady window")

			if driver.state(ctx) == ConversionState.DATA_READY:
				await driver.wait_state(ctx, ConversionState.DATA_UPDATING, limit=config.sample_cycles)

			error = bool(ctx.get(harness.dut.error))
			if error:
				logger.warning(f"frame {n}: error flag set")
			errors.append(error)

	run(harness, bench, vcd=vcd)

	return numpy.frombuffer(bytes(data), dtype=numpy.uint8), errors

def main(argv=None):
	parser = argparse.ArgumentParser(description="Capture frames from a simulated ADS129x daisy chain.")
	parser.add_argument("-n", "--chain-length", type=int, default=DEFAULT_CHAIN_LENGTH)
	parser.add_argument("-r", "--data-rate", type=int, default=DEFAULT_DATA_RATE)
	parser.add_argument("-f", "--frames", type=int, default=4)
	parser.add_argument("-b", "--bytes-per-frame", type=int, default=None,
		help="bytes read in each window (default: one full frame)")
	parser.add_argument("-s", "--sclk-frequency", type=float, default=DEFAULT_SCLK_FREQUENCY)
	parser.add_argument("-o", "--output", default=None, help="write captured bytes as raw uint8")
	parser.add_argument("--vcd", default=None)
	parser.add_argument("-v", "--verbose", action="store_true")
	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	try:
		config = SamplingConfiguration(args.chain_length, args.data_rate)
	except ConfigurationError as e:
		parser.error(str(e))

	data, errors = capture(config, args.frames, args.bytes_per_frame, args.sclk_frequency, args.vcd)

	logger.info(f"{len(data)} bytes captured, {sum(errors)} of {len(errors)} windows flagged")

	if args.output is not None:
		data.tofile(args.output)

	return 1 if any(errors) else 0

if __name__ == "__main__":
	sys.exit(main())
