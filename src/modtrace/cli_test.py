import json

import pytest
import structlog
from click.testing import CliRunner

from modtrace.cli import cli


class TestCli:
    """Test suite for the command line"""

    @pytest.fixture(autouse=True)
    def reset_logging(self):
        yield
        structlog.reset_defaults()

    def invoke(self, *args: str):
        return CliRunner().invoke(cli, list(args))

    def test_rsa_json(self):
        """Test rsa --json prints the result payload"""
        result = self.invoke("rsa", "-n", "35", "-e", "5", "-c", "33", "--json")
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["private_exponent"] == 5
        assert payload["message"] == 3
        assert payload["method"] == "lambda"

    def test_rsa_hex_and_phi(self):
        """Test hex arguments and the phi method"""
        result = self.invoke("rsa", "-n", "0x7e5", "-e", "5", "-c", "6", "-m", "phi", "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["private_exponent"] == 773

    def test_rsa_rendered(self):
        """Test the rendered derivation mentions the factorisation and the message"""
        result = self.invoke("rsa", "-n", "35", "-e", "5", "-c", "33")
        assert result.exit_code == 0, result.output
        assert "35 = 5 · 7" in result.output
        assert "m = 3" in result.output

    def test_rsa_unknown_method(self):
        """Test click rejects a method outside phi and lambda"""
        result = self.invoke("rsa", "-n", "35", "-e", "5", "-c", "33", "-m", "euler")
        assert result.exit_code == 2

    def test_solver_error_is_reported(self):
        """Test solver failures exit with a message instead of a traceback"""
        result = self.invoke("elgamal-add", "-n", "1000", "-g", "10", "-h", "21", "--c1", "81", "--c2", "27")
        assert result.exit_code == 1
        assert "No inverse exists: gcd(10, 1000) = 10" in result.output

    def test_elgamal_add(self):
        """Test additive ElGamal decryption"""
        result = self.invoke("elgamal-add", "-n", "1000", "-g", "667", "-h", "21", "--c1", "81", "--c2", "27", "--json")
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["message"] == payload["message_via_ephemeral"] == 924

    def test_elgamal_add_keys(self):
        """Test encrypt-then-attack"""
        result = self.invoke("elgamal-add-keys", "-n", "1000", "-g", "667", "-x", "63", "-y", "243", "-m", "924", "--json")
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert (payload["c1"], payload["c2"], payload["recovered_secret_key"]) == (81, 27, 63)

    def test_elgamal_mul(self):
        """Test multiplicative ElGamal decryption"""
        result = self.invoke("elgamal-mul", "-p", "23", "-g", "5", "-h", "8", "--c1", "10", "--c2", "19", "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["message"] == 7

    def test_shamir(self):
        """Test shares given with --share"""
        result = self.invoke("shamir", "-p", "29", "-s", "1:15", "-s", "2:6", "-s", "3:7", "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["secret"] == 5

    def test_shamir_bad_share(self):
        """Test a malformed share is a usage error"""
        result = self.invoke("shamir", "-p", "29", "-s", "1-15")
        assert result.exit_code == 2

    def test_cipolla_rendered(self):
        """Test the rendered Cipolla derivation"""
        result = self.invoke("cipolla", "-p", "23", "-n", "2", "-a", "1", "-t", "2")
        assert result.exit_code == 0, result.output
        assert "r₁ = 5, r₂ = 18" in result.output

    def test_solve_from_file(self, tmp_path):
        """Test solving an exercise file"""
        path = tmp_path / "exercise.json"
        path.write_text(json.dumps({"kind": "cipolla", "p": 23, "n": 2, "a": 1, "t": 3}))
        result = self.invoke("--log-level", "error", "solve", "-x", str(path), "--json")
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["roots"] == [5, 18]
        assert payload["verified"] is False

    def test_solve_invalid_file(self, tmp_path):
        """Test an invalid exercise file"""
        path = tmp_path / "exercise.json"
        path.write_text(json.dumps({"kind": "rsa"}))
        result = self.invoke("solve", "-x", str(path))
        assert result.exit_code == 1
        assert "Could not load exercise" in result.output

    def test_env_prefix(self):
        """Test options can come from MODTRACE_ variables"""
        result = CliRunner().invoke(
            cli,
            ["rsa", "-e", "5", "-c", "33", "--json"],
            auto_envvar_prefix="MODTRACE",
            env={"MODTRACE_RSA_MODULUS": "35"},
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["message"] == 3

    def test_json_logs(self):
        """Test debug events are written as JSON without disturbing the result"""
        result = self.invoke("--log-level", "debug", "--log-json", "rsa", "-n", "35", "-e", "5", "-c", "33", "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["message"] == 3
        assert '"event": "rsa decrypted"' in result.stderr

    def test_api_starts_server(self, monkeypatch):
        """Test the api command hands host, port and reload to uvicorn"""
        import uvicorn

        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
        result = self.invoke("api", "--host", "0.0.0.0", "--port", "9000")
        assert result.exit_code == 0, result.output
        assert "POST /api/rsa" in result.output
        assert len(calls) == 1
        assert calls[0][1] == {"host": "0.0.0.0", "port": 9000, "reload": False}

        self.invoke("api", "--reload")
        assert calls[1] == ("solver_api.api:app", {"host": "127.0.0.1", "port": 8000, "reload": True})
