from contextlib import asynccontextmanager

from fastapi import FastAPI, APIRouter, HTTPException
import structlog

from modtrace.errors import SolverError
from modtrace.logs import configure_logging
from modtrace.serialize import error_payload, result_payload

from . import models

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """ JSON logs at info level, unless the CLI already configured logging. """
    if not structlog.is_configured():
        configure_logging("info", json=True)
    yield


# Create the FastAPI app
app = FastAPI(title="Cryptography Exercise Solver API", lifespan=lifespan)

# Create the router for API endpoints
router = APIRouter()


def solve(exercise) -> models.SolveResponse:
    """ Run the exercise and wrap its result; solver failures become 400s. """
    try:
        result = exercise.solve()
    except SolverError as e:
        log.warning("solver failed", kind=exercise.kind, error=type(e).__name__, detail=str(e))
        raise HTTPException(status_code=400, detail=error_payload(e))

    payload = result_payload(result)
    trace = payload.pop("trace")
    log.info("solved", kind=exercise.kind, steps=len(trace))
    return models.SolveResponse(solver=exercise.kind, result=payload, trace=trace)


@router.post("/rsa", response_model=models.SolveResponse)
def rsa(req: models.RsaExercise):
    """ Decrypt an RSA ciphertext with φ(N) or λ(N). """
    return solve(req)


@router.post("/elgamal/additive/decrypt", response_model=models.SolveResponse)
def elgamal_additive_decrypt(req: models.AdditiveElgamalExercise):
    """ Decrypt additive ElGamal through both the secret and the ephemeral key. """
    return solve(req)


@router.post("/elgamal/additive/encrypt", response_model=models.SolveResponse)
def elgamal_additive_encrypt(req: models.AdditiveElgamalKeysExercise):
    """ Encrypt with known keys, decrypt, and recover x from the public key. """
    return solve(req)


@router.post("/elgamal/multiplicative/decrypt", response_model=models.SolveResponse)
def elgamal_multiplicative_decrypt(req: models.MultiplicativeElgamalExercise):
    """ Decrypt multiplicative ElGamal by brute-force discrete log. """
    return solve(req)


@router.post("/shamir", response_model=models.SolveResponse)
def shamir(req: models.ShamirExercise):
    """ Reconstruct a degree-2 Shamir secret from three shares. """
    return solve(req)


@router.post("/cipolla", response_model=models.SolveResponse)
def cipolla(req: models.CipollaExercise):
    """ Square-root candidates by Cipolla's algorithm, checked against t. """
    return solve(req)


# Include the router in the app (after all routes are defined)
app.include_router(router, prefix="/api")
