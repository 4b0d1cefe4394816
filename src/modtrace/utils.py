from typing import Tuple

from pydantic import ValidationError

from modtrace.models import Exercise, ExerciseAdapter


class ExerciseLoadError(RuntimeError):
    pass


def parse_int(value: str) -> int:
    """Parse a decimal or 0x-prefixed hexadecimal integer, allowing a sign."""
    text = value.strip().lower()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if not text[:1].isalnum():
        raise ValueError(f"invalid integer: {value!r}")
    if text.startswith("0x"):
        return sign * int(text, 16)
    return sign * int(text, 10)


def parse_share(value: str) -> Tuple[int, int]:
    """Parse a share given as "alpha:value" (a comma also works as separator)."""
    for sep in (":", ","):
        if sep in value:
            alpha, _, share_value = value.partition(sep)
            return parse_int(alpha), parse_int(share_value)
    raise ValueError(f'Share must look like "alpha:value", got "{value}"')


def load_exercise(file_path: str) -> Exercise:
    """Load and validate a JSON exercise file."""
    with open(file_path, "rb") as f:
        data = f.read()
    try:
        return ExerciseAdapter.validate_json(data)
    except ValidationError as e:
        raise ExerciseLoadError(f"Could not load exercise from {file_path}: {e}") from e
