from dataclasses import asdict, fields, is_dataclass
from enum import Enum
from typing import Any, Dict


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    return value


def step_payload(step: Any) -> Dict[str, Any]:
    """Tag a trace record with its type so consumers can dispatch on it."""
    return {"kind": type(step).__name__, **asdict(step)}


def result_payload(result: Any) -> Dict[str, Any]:
    """Numeric fields of a solver result plus its tagged trace."""
    payload = {f.name: _plain(getattr(result, f.name)) for f in fields(result) if f.name != "trace"}
    payload["trace"] = [step_payload(step) for step in result.trace]
    return payload


def error_payload(error: Exception) -> Dict[str, Any]:
    """Name, message and offending values of a solver failure."""
    values = {name: _plain(value) for name, value in vars(error).items()}
    return {"error": type(error).__name__, "message": str(error), "values": values}
