"""Shared BDD step definitions for all feature files.

Step definitions live here (not in common_steps.py) because pytest-bdd
registers step fixtures in the caller module's locals. Only conftest.py
modules are auto-discovered by pytest, so steps MUST be defined here for
pytest-bdd to find them across all test files in this directory.

IMPORTANT: All parametric steps use parsers.parse(). Values written after
"set to" / "should equal" are JSON literals.
"""
from pytest_bdd import given, parsers, then, when

from payment_setup.errors import MissingFieldError, InvalidFieldError
from tests.fixtures.payloads import make_payment_setup_payload, remove_field, set_field
from tests.step_defs.common_steps import _decode, _literal


# ── Given ──────────────────────────────────────────────────────────────────────

@given("a valid payment setup payload")
def valid_payload(context):
    context["payload"] = make_payment_setup_payload()


@given(parsers.parse('the payload field "{path}" is removed'))
def remove_payload_field(path, context):
    context["payload"] = remove_field(context["payload"], path)


@given(parsers.parse('the payload field "{path}" is set to {value}'))
def set_payload_field(path, value, context):
    context["payload"] = set_field(context["payload"], path, _literal(value))


# ── When ───────────────────────────────────────────────────────────────────────

@when("I decode the payload")
def decode_payload(decoder, context):
    _decode(context, decoder)


# ── Then ───────────────────────────────────────────────────────────────────────

@then("the decode should succeed")
def check_success(context):
    assert context["result"] is not None, (
        f"Expected a payment setup, decode failed: {context.get('error')}"
    )


@then("the decode should fail")
def check_failure(context):
    assert context["result"] is None, f"Expected no result, got {context['result']!r}"


@then(parsers.parse('the decode error should name the field "{path}"'))
def check_error_field(path, context):
    error = context.get("error")
    assert isinstance(error, (MissingFieldError, InvalidFieldError)), (
        f"Expected a field error, got {error!r}"
    )
    assert error.path == path, f"Expected field {path!r}, got {error.path!r}"


@then(parsers.parse('the setup field "{attr}" should equal {value}'))
def check_setup_field(attr, value, context):
    actual = getattr(context["result"], attr)
    expected = _literal(value)
    assert actual == expected, f"Expected {attr}={expected!r}, got {actual!r}"


@then(parsers.parse('the setup field "{attr}" should be absent'))
def check_setup_field_absent(attr, context):
    actual = getattr(context["result"], attr)
    assert actual is None, f"Expected {attr} to be absent, got {actual!r}"


@then(parsers.parse('the setup field "{attr}" should be empty'))
def check_setup_field_empty(attr, context):
    actual = getattr(context["result"], attr)
    assert actual is not None, f"Expected {attr} to be present and empty, got None"
    assert len(actual) == 0, f"Expected {attr} to be empty, got {actual!r}"
