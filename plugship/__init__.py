# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
plugship: build-and-release orchestrator for a single plugin.

Drives an external build toolchain through version update, clean, restore,
build and publish, then verifies the packaged artifact.
"""

__version__ = "0.1.0"
