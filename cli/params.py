"""Custom click parameter types."""

import re

import click

_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}
_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")


def parse_duration(value: str) -> float:
    """Parse ``1h30m``, ``90s``, ``500ms`` or plain seconds into seconds."""
    text = value.strip().lower()
    if not text:
        raise ValueError("empty duration")
    try:
        return float(text)
    except ValueError:
        pass

    total = 0.0
    pos = 0
    for match in _PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise ValueError(f"invalid duration {value!r}")
    return total


class DurationParamType(click.ParamType):
    """Durations such as ``1h``, ``15m30s`` or ``45`` (seconds), as float seconds."""

    name = "duration"

    def convert(self, value, param, ctx):
        if isinstance(value, (int, float)):
            seconds = float(value)
        else:
            try:
                seconds = parse_duration(value)
            except ValueError as e:
                self.fail(str(e), param, ctx)
        if seconds <= 0:
            self.fail(f"duration must be positive, got {value!r}", param, ctx)
        return seconds


DURATION = DurationParamType()
