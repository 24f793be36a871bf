#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the bip32kit package."

from loguru import logger

name = "bip32kit"
__version__ = "2024.3.1"
__author__ = "The bip32kit developers"
__author_email__ = "devs@bip32kit.org"
__copyright__ = "Copyright (C) 2020-2024 The bip32kit developers"
__license__ = "MIT License"

# library code stays silent until the application calls logger.enable("bip32kit")
logger.disable(name)
