import json

from modtrace.cipolla import solve_cipolla
from modtrace.errors import NotInvertible
from modtrace.kernel import derive_inverse
from modtrace.rsa import solve_rsa
from modtrace.serialize import error_payload, result_payload, step_payload
from modtrace.trace import ValueStep


class TestSerialize:
    """Test suite for JSON-ready payloads"""

    def test_step_payload_is_tagged(self):
        """Test each record carries its type name"""
        assert step_payload(ValueStep(label="x", value=63)) == {"kind": "ValueStep", "label": "x", "value": 63}

    def test_rsa_payload(self):
        """Test numeric fields, the method token and the tagged trace"""
        payload = result_payload(solve_rsa(35, 5, 33, "lambda"))
        assert payload["method"] == "lambda"
        assert payload["factors"] == [5, 7]
        assert payload["message"] == 3
        assert [step["kind"] for step in payload["trace"]] == ["FactorStep", "TotientStep", "InverseStep", "PowerStep"]
        json.dumps(payload)

    def test_extension_elements_are_nested(self):
        """Test ℤₚ[√d] elements serialise as u, v objects"""
        payload = result_payload(solve_cipolla(23, 2, 1, 2))
        power = next(step for step in payload["trace"] if step["kind"] == "PowerStep")
        assert power["derivation"]["result"] == {"u": 5, "v": 0}
        assert payload["roots"] == [5, 18]
        json.dumps(payload)

    def test_error_payload(self):
        """Test the error name, message and offending values"""
        try:
            derive_inverse(6, 15)
        except NotInvertible as e:
            payload = error_payload(e)
        assert payload["error"] == "NotInvertible"
        assert payload["message"] == "No inverse exists: gcd(6, 15) = 3"
        assert payload["values"]["gcd"] == 3
        assert payload["values"]["steps"][0]["remainder"] == 15
        json.dumps(payload)
