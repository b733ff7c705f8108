"""Tests for merging per-controller fragments."""

from __future__ import annotations

import yaml

from apidocgen.openapi.merger import looks_like_openapi, merge_fragments

USERS = """
paths:
  /users:
    get:
      summary: List users
      responses:
        '200':
          description: ok
schemas:
  User:
    type: object
    description: first
"""

USERS_WRITE = """
paths:
  /users:
    post:
      summary: Create user
      responses:
        '201':
          description: created
    get:
      summary: List users again
      responses:
        '200':
          description: ok
schemas:
  User:
    type: object
    description: second
  Account:
    type: object
"""


def test_looks_like_openapi() -> None:
    assert looks_like_openapi("paths:\n  /a: {}\n")
    assert looks_like_openapi("  components:\n  schemas: {}\n")
    assert not looks_like_openapi("Here is the YAML:\npaths: {}\n")
    assert not looks_like_openapi("paths:\n# Heading\n")
    assert not looks_like_openapi("paths:\n```\n")


def test_merge_combines_methods_and_keeps_first_schema() -> None:
    merged = yaml.safe_load(merge_fragments([USERS, USERS_WRITE], "Shop", "2.0.0"))

    assert merged["openapi"] == "3.0.3"
    assert merged["info"] == {"title": "Shop", "version": "2.0.0"}
    users = merged["paths"]["/users"]
    assert set(users) == {"get", "post"}
    assert users["get"]["summary"] == "List users again"
    schemas = merged["components"]["schemas"]
    assert list(schemas) == ["Account", "User"]
    assert schemas["User"]["description"] == "first"


def test_paths_are_sorted() -> None:
    first = "paths:\n  /zeta:\n    get:\n      responses: {}\n"
    second = "paths:\n  /alpha:\n    get:\n      responses: {}\n"

    merged = yaml.safe_load(merge_fragments([first, second], "T", "1"))

    assert list(merged["paths"]) == ["/alpha", "/zeta"]


def test_non_yaml_fragments_are_skipped() -> None:
    merged = yaml.safe_load(
        merge_fragments(["Sure! Here is your spec", "paths:\n  /a: [\n", USERS], "T", "1")
    )

    assert list(merged["paths"]) == ["/users"]


def test_merge_of_nothing_is_an_empty_document() -> None:
    merged = yaml.safe_load(merge_fragments([], "Empty", "0.1.0"))

    assert merged["paths"] == {}
    assert merged["components"] == {"schemas": {}}


def test_fragments_with_date_keys_are_merged() -> None:
    dated = "schemas:\n  Rates:\n    type: object\n    example:\n      2024-01-01: x\n"

    merged = yaml.safe_load(merge_fragments([dated, USERS], "T", "1"))

    assert merged["components"]["schemas"]["Rates"]["example"] == {"2024-01-01": "x"}
    assert list(merged["paths"]) == ["/users"]
