# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Version resolution from the plugin descriptor.

The descriptor is an MSBuild-style markup file with a <PluginVersion>
element somewhere in its tree. Two strategies are tried in order:

  1. Structured: parse the file as XML and take the first PluginVersion
     element (local name, any namespace, any letter case) with non-blank text.
  2. Text: if the markup doesn't parse or has no usable element, search the
     raw text for <PluginVersion>...</PluginVersion> exactly as spelled.

The second strategy exists for descriptors with a bad encoding declaration or
a stray unclosed tag elsewhere in the file. Those still build with the
toolchain, and a release shouldn't stop over them.
"""

import re
import xml.etree.ElementTree as ET
from pathlib import Path

from plugship.logging.logger import get_logger
from plugship.pipeline.exceptions import DescriptorNotFound, VersionNotFound
from plugship.pipeline.strategies import Outcome, first_success

logger = get_logger(__name__)

VERSION_ELEMENT = "PluginVersion"

_VERSION_PATTERN = re.compile(r"<PluginVersion>([^<]*)</PluginVersion>")


def _local_name(tag: object) -> str:
    # Comments and processing instructions have callable tags.
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def version_from_markup(raw: bytes) -> Outcome[str]:
    """Structured strategy: parse the markup and look for the element."""
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as err:
        return Outcome.failure(f"markup did not parse: {err}")
    except LookupError as err:
        # expat hands unknown encoding declarations to the codec registry.
        return Outcome.failure(f"markup declares an unknown encoding: {err}")

    wanted = VERSION_ELEMENT.lower()
    found_empty = False
    for element in root.iter():
        if _local_name(element.tag).lower() != wanted:
            continue
        text = "".join(element.itertext()).strip()
        if text:
            return Outcome.success(text)
        found_empty = True

    if found_empty:
        return Outcome.failure(f"{VERSION_ELEMENT} element is empty")
    return Outcome.failure(f"no {VERSION_ELEMENT} element in markup")


def version_from_text(raw: bytes) -> Outcome[str]:
    """Text strategy: case-sensitive tag match on the decoded file."""
    text = raw.decode("utf-8-sig", errors="replace")
    for match in _VERSION_PATTERN.finditer(text):
        value = match.group(1).strip()
        if value:
            return Outcome.success(value)
    return Outcome.failure(f"no non-empty <{VERSION_ELEMENT}> tag in text")


def resolve_version(descriptor_path: Path) -> str:
    """
    Read the plugin version from a descriptor file.

    Args:
        descriptor_path: Path to the markup descriptor.

    Returns:
        The trimmed, non-empty version string.

    Raises:
        DescriptorNotFound: If the path does not exist.
        VersionNotFound: If neither strategy finds a version.
    """
    if not descriptor_path.is_file():
        raise DescriptorNotFound(descriptor_path)

    raw = descriptor_path.read_bytes()

    outcome = first_success([
        lambda: version_from_markup(raw),
        lambda: version_from_text(raw),
    ])
    if not outcome.ok or outcome.value is None:
        raise VersionNotFound(descriptor_path, outcome.reasons)

    logger.info(
        "Version resolved from descriptor",
        extra={"descriptor": str(descriptor_path), "version": outcome.value},
    )
    return outcome.value
