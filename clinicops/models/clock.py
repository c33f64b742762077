import re
from typing import Annotated

from pydantic import AfterValidator

# Accepts "9:00" as well as "09:00"; stored values are always zero-padded
# ASCII so that plain string comparison orders them chronologically.
_CLOCK_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$", re.ASCII)


def normalize_clock_time(value: str) -> str:
    match = _CLOCK_RE.match(value.strip())
    if not match:
        raise ValueError(f"invalid time {value!r}, expected HH:MM between 00:00 and 23:59")
    return f"{int(match.group(1)):02d}:{int(match.group(2)):02d}"


ClockTime = Annotated[str, AfterValidator(normalize_clock_time)]
