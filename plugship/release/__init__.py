# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Post-publish release tooling: artifact verification and the JSON build
report. Nothing here creates artifacts; the toolchain's publish targets do.
"""
