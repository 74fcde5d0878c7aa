# src/ps_app/modules/photosort/analysis/name.py
from __future__ import annotations

import logging
import re

log = logging.getLogger(__name__)

IMAGE_NAME = re.compile(
    r"^(?:(?:IMG|img|NO_?DATE|no_?date)|[-_])*(.*?)[-_]*?\.([A-Za-z0-9]+)$"
)
EXTENSION = re.compile(r"\.[A-Za-z0-9]+$")
NODATE_MARK = re.compile(r"(NO_?DATE|no_?date)")


def clean_image_name(name: str) -> str:
    """
    Strip leading IMG/NODATE markers and separators, trailing separators and the
    extension, then any NODATE marker left inside.

    >>> clean_image_name("IMG_20230101_holiday.jpg")
    '20230101_holiday'
    """
    m = IMAGE_NAME.match(name)
    base = m.group(1) if m else EXTENSION.sub("", name)
    result = NODATE_MARK.sub("", base)
    log.debug("Cleaned name: %r -> %r", name, result)
    return result
