from typing import Any, Dict, List

from pydantic import BaseModel

from modtrace.models import (
    AdditiveElgamalExercise,
    AdditiveElgamalKeysExercise,
    CipollaExercise,
    MultiplicativeElgamalExercise,
    RsaExercise,
    ShamirExercise,
)

__all__ = [
    "AdditiveElgamalExercise",
    "AdditiveElgamalKeysExercise",
    "CipollaExercise",
    "MultiplicativeElgamalExercise",
    "RsaExercise",
    "ShamirExercise",
    "SolveResponse",
]


class SolveResponse(BaseModel):
    solver: str
    result: Dict[str, Any]
    trace: List[Dict[str, Any]]
