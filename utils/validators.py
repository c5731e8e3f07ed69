import re

HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def is_valid_hhmm(value: str) -> bool:
    return bool(HHMM_RE.match(value))


def is_valid_color(value: str) -> bool:
    return bool(HEX_COLOR_RE.match(value))
