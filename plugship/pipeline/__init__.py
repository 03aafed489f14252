# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Stage sequencing: command assembly, process runners, fallback strategies,
and the orchestrator that ties them together.
"""
