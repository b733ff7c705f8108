"""Tests for fragment validation."""

from __future__ import annotations

from apidocgen.openapi.validator import fragment_parts, is_valid_fragment, load_fragment, validate_fragment

VALID = """
paths:
  /users/{id}:
    get:
      parameters:
        - name: id
          in: path
          required: true
          schema:
            type: integer
      responses:
        200:
          description: A user
          content:
            application/json:
              schema:
                $ref: '#/components/schemas/User'
schemas:
  User:
    type: object
    properties:
      name:
        type: string
"""


def test_valid_fragment_has_no_errors() -> None:
    assert validate_fragment(VALID) == []
    assert is_valid_fragment(VALID)


def test_integer_status_codes_become_strings() -> None:
    data, errors = load_fragment(VALID)

    assert errors == []
    assert "200" in data["paths"]["/users/{id}"]["get"]["responses"]


def test_schemas_under_components_are_accepted() -> None:
    data, _ = load_fragment("components:\n  schemas:\n    Empty:\n      type: object\n")

    paths, schemas = fragment_parts(data)

    assert paths is None
    assert schemas == {"Empty": {"type": "object"}}
    assert validate_fragment("components:\n  schemas:\n    Empty:\n      type: object\n") == []


def test_broken_yaml_is_reported() -> None:
    errors = validate_fragment("paths:\n  /a: [\n")

    assert len(errors) == 1
    assert errors[0].startswith("Invalid YAML")


def test_non_mapping_and_empty_fragments_are_rejected() -> None:
    assert validate_fragment("- just\n- a list\n") == ["Fragment must be a YAML mapping"]
    assert validate_fragment("info:\n  title: x\n") == ["Fragment defines neither 'paths' nor 'schemas'"]
    assert validate_fragment("paths: [1, 2]\n") == ["'paths' must be a mapping"]


def test_operations_without_responses_fail_validation() -> None:
    fragment = "paths:\n  /a:\n    get:\n      summary: no responses\n"

    errors = validate_fragment(fragment)

    assert errors
    assert not is_valid_fragment(fragment)


DATED_EXAMPLE = """
schemas:
  Rates:
    type: object
    example:
      2024-01-01: 1.5
      created: 2024-01-02
"""


def test_date_keys_and_values_become_strings() -> None:
    data, errors = load_fragment(DATED_EXAMPLE)

    assert errors == []
    assert data["schemas"]["Rates"]["example"] == {"2024-01-01": 1.5, "created": "2024-01-02"}
    assert validate_fragment(DATED_EXAMPLE) == []
