import json
from typing import Callable, Tuple

import click
from rich.console import Console

from modtrace.cipolla import solve_cipolla
from modtrace.elgamal import solve_additive_elgamal, solve_additive_elgamal_keys, solve_multiplicative_elgamal
from modtrace.errors import SolverError
from modtrace.logs import LOG_LEVELS, configure_logging
from modtrace.rsa import TotientMethod, solve_rsa
from modtrace.serialize import result_payload
from modtrace.shamir import solve_shamir
from modtrace.ui import render
from modtrace.utils import ExerciseLoadError, load_exercise, parse_int, parse_share


class IntParamType(click.ParamType):
    """Decimal or 0x-prefixed hexadecimal integer."""

    name = "integer"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return parse_int(value)
        except ValueError:
            self.fail(f"{value!r} is not a valid integer", param, ctx)


class ShareParamType(click.ParamType):
    name = "alpha:value"

    def convert(self, value, param, ctx):
        if isinstance(value, tuple):
            return value
        try:
            return parse_share(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


INT = IntParamType()
SHARE = ShareParamType()

json_option = click.option("--json", "as_json", is_flag=True, help="Print the result as JSON instead of a rendered derivation.")


def run_solver(solve: Callable[[], object], as_json: bool) -> None:
    """Run a solver and print its result; solver failures become click errors."""
    try:
        result = solve()
    except SolverError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps(result_payload(result), indent=2))
    else:
        Console().print(render(result))


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS),
    default="warning",
    show_default=True,
    help="Minimum level of structured log events written to stderr.",
)
@click.option("--log-json", is_flag=True, help="Write log events as JSON.")
def cli(log_level: str, log_json: bool):
    """Solve textbook cryptography exercises and show every step."""
    configure_logging(log_level, json=log_json)


@cli.command()
@click.option("--modulus", "-n", required=True, type=INT, help="RSA modulus N.")
@click.option("--exponent", "-e", required=True, type=INT, help="Public exponent e.")
@click.option("--ciphertext", "-c", required=True, type=INT, help="Ciphertext c.")
@click.option(
    "--method",
    "-m",
    type=click.Choice([m.value for m in TotientMethod]),
    default=TotientMethod.LAMBDA.value,
    show_default=True,
    help="Reduce the private exponent modulo φ(N) or λ(N).",
)
@json_option
def rsa(modulus: int, exponent: int, ciphertext: int, method: str, as_json: bool):
    """Decrypt an RSA ciphertext by factoring N."""
    run_solver(lambda: solve_rsa(modulus, exponent, ciphertext, TotientMethod.parse(method)), as_json)


@cli.command("elgamal-add")
@click.option("-n", "n", required=True, type=INT, help="Modulus n of (ℤₙ, +).")
@click.option("-g", "g", required=True, type=INT, help="Generator g.")
@click.option("--public-key", "-h", "h", required=True, type=INT, help="Public key h.")
@click.option("--c1", required=True, type=INT)
@click.option("--c2", required=True, type=INT)
@json_option
def elgamal_add(n: int, g: int, h: int, c1: int, c2: int, as_json: bool):
    """Decrypt additive ElGamal (c₁, c₂) through both the secret and the ephemeral key."""
    run_solver(lambda: solve_additive_elgamal(n, g, h, c1, c2), as_json)


@cli.command("elgamal-add-keys")
@click.option("-n", "n", required=True, type=INT, help="Modulus n of (ℤₙ, +).")
@click.option("-g", "g", required=True, type=INT, help="Generator g.")
@click.option("-x", "x", required=True, type=INT, help="Secret key x.")
@click.option("-y", "y", required=True, type=INT, help="Ephemeral key y.")
@click.option("-m", "m", required=True, type=INT, help="Message m.")
@json_option
def elgamal_add_keys(n: int, g: int, x: int, y: int, m: int, as_json: bool):
    """Encrypt, decrypt, then recover x from the public key in additive ElGamal."""
    run_solver(lambda: solve_additive_elgamal_keys(n, g, x, y, m), as_json)


@cli.command("elgamal-mul")
@click.option("-p", "p", required=True, type=INT, help="Prime modulus p.")
@click.option("-g", "g", required=True, type=INT, help="Generator g of ℤₚ*.")
@click.option("--public-key", "-h", "h", required=True, type=INT, help="Public key h.")
@click.option("--c1", required=True, type=INT)
@click.option("--c2", required=True, type=INT)
@json_option
def elgamal_mul(p: int, g: int, h: int, c1: int, c2: int, as_json: bool):
    """Decrypt multiplicative ElGamal by brute-forcing both discrete logs."""
    run_solver(lambda: solve_multiplicative_elgamal(p, g, h, c1, c2), as_json)


@cli.command()
@click.option("-p", "p", required=True, type=INT, help="Prime modulus p.")
@click.option("--share", "-s", "shares", required=True, multiple=True, type=SHARE, help="Share as alpha:value (give three).")
@json_option
def shamir(p: int, shares: Tuple[Tuple[int, int], ...], as_json: bool):
    """Reconstruct the secret of a degree-2 Shamir sharing."""
    run_solver(lambda: solve_shamir(p, shares), as_json)


@cli.command()
@click.option("-p", "p", required=True, type=INT, help="Odd prime modulus p.")
@click.option("-n", "n", required=True, type=INT, help="Value tested with the Legendre symbol.")
@click.option("-a", "a", required=True, type=INT, help="Parameter a with a² − n a non-square.")
@click.option("-t", "t", required=True, type=INT, help="Target whose square roots are checked.")
@json_option
def cipolla(p: int, n: int, a: int, t: int, as_json: bool):
    """Find square-root candidates with Cipolla's algorithm."""
    run_solver(lambda: solve_cipolla(p, n, a, t), as_json)


@cli.command()
@click.option("--exercise-path", "-x", required=True, type=click.Path(exists=True, dir_okay=False))
@json_option
def solve(exercise_path: str, as_json: bool):
    """Solve an exercise described in a JSON file."""
    try:
        exercise = load_exercise(exercise_path)
    except ExerciseLoadError as e:
        raise click.ClickException(str(e)) from e
    run_solver(exercise.solve, as_json)


@cli.command("api")
@click.option("--host", default="127.0.0.1", help="Host to bind the server to")
@click.option("--port", default=8000, help="Port to bind the server to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def api(host: str, port: int, reload: bool):
    """Start the HTTP API exposing the solvers."""
    import uvicorn
    from solver_api.api import app

    click.echo(f"Starting solver API on http://{host}:{port}")
    click.echo("Available endpoints:")
    click.echo("  - POST /api/rsa")
    click.echo("  - POST /api/elgamal/additive/decrypt")
    click.echo("  - POST /api/elgamal/additive/encrypt")
    click.echo("  - POST /api/elgamal/multiplicative/decrypt")
    click.echo("  - POST /api/shamir")
    click.echo("  - POST /api/cipolla")
    click.echo("\nPress Ctrl+C to stop the server")

    if reload:
        uvicorn.run("solver_api.api:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(app, host=host, port=port, reload=False)


def main():
    cli(auto_envvar_prefix="MODTRACE")


if __name__ == "__main__":
    main()
