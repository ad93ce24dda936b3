# Copyright (c)
# SPDX-License-Identifier: MIT
"""Package version, kept import-light so the transport can read it."""

__version__ = "0.1.0"
