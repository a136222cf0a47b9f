#!/usr/bin/env python3

#
# This file is part of adschain.
#
# Copyright (C) 2026 The adschain developers
# SPDX-License-Identifier: BSD-3-Clause

# ADS129x master clock (fCLK), in Hz. One "tick" of the model is one
# period of this clock.
CLOCK_FREQUENCY = 2_048_000

# Each device shifts out a status word followed by eight channel words,
# all 24 bits wide.
WORDS_PER_DEVICE = 9
BYTES_PER_WORD = 3
BYTES_PER_DEVICE = WORDS_PER_DEVICE * BYTES_PER_WORD

BITS_PER_BYTE = 8

# Dead time between two DataReady windows, in ticks.
UPDATE_CYCLES = 4

# Settling after START lasts four sample periods plus this many ticks.
SETTLE_PERIODS = 4
SETTLE_EXTRA_CYCLES = 9

DEFAULT_CHAIN_LENGTH = 8
DEFAULT_DATA_RATE = 4000
