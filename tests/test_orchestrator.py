"""End-to-end behaviour of the generation run with scripted model replies."""

from __future__ import annotations

import json

import pytest
import yaml

from apidocgen.config import load_config
from apidocgen.llm.base import LLMError
from apidocgen.llm.messages import ChatResponse
from apidocgen.orchestrator import Orchestrator, snake_case
from tests._fixtures.fake_runner import RoutingRunner, ScriptedRunner

ORDER_CONTROLLER = """
@RestController
class OrderController {
    @GetMapping("/orders")
    fun list() = listOf<String>()

    @PostMapping("/orders")
    fun create() = Unit
}
"""

USER_CONTROLLER = """
@RestController
class UserController {
    @GetMapping("/users")
    fun list() = listOf<String>()
}
"""

ORDER_FRAGMENT = """paths:
  /orders:
    get:
      responses:
        '200':
          description: Orders
schemas:
  Order:
    type: object
"""

USER_FRAGMENT = """paths:
  /users:
    get:
      responses:
        '200':
          description: Users
"""


def _runner(*generated: str) -> RoutingRunner:
    return RoutingRunner(
        collect=ScriptedRunner([ChatResponse(text="summary", stop_reason="end_turn")]),
        generate=ScriptedRunner([ChatResponse(text=text) for text in generated]),
    )


def _read_json(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_run_writes_fragments_merged_document_and_logs(source_tree) -> None:
    source_tree.write(
        {
            "src/OrderController.kt": ORDER_CONTROLLER,
            "src/UserController.kt": USER_CONTROLLER,
            "src/OrderService.kt": "class OrderService\n",
        }
    )
    runner = _runner(ORDER_FRAGMENT, USER_FRAGMENT)

    outcome = Orchestrator(runner, sleep=lambda _: None).run(source_tree.path())

    output = source_tree.path().resolve() / ".apidocgen"
    assert outcome.succeeded == 2
    assert outcome.failed == 0
    assert outcome.fragments == [
        output / "components" / "order_controller.yaml",
        output / "components" / "user_controller.yaml",
    ]
    assert outcome.fragments[0].read_text(encoding="utf-8") == ORDER_FRAGMENT.strip()

    assert outcome.merged_yaml == output / "openapi" / "openapi.yaml"
    merged = yaml.safe_load(outcome.merged_yaml.read_text(encoding="utf-8"))
    assert list(merged["paths"]) == ["/orders", "/users"]
    assert list(merged["components"]["schemas"]) == ["Order"]
    assert merged["info"] == {"title": "Generated API", "version": "1.0.0"}
    assert "/orders" in outcome.viewer_html.read_text(encoding="utf-8")

    commands = [entry["command"] for entry in _read_json(output / "logs" / "execution_log.json")]
    assert commands == ["scan", "generate", "merge"]
    assert not (output / "logs" / "error.json").exists()


def test_invalid_fragment_is_regenerated(source_tree) -> None:
    source_tree.write({"OrderController.kt": ORDER_CONTROLLER})
    runner = _runner("paths: [broken", ORDER_FRAGMENT)
    sleeps = []

    outcome = Orchestrator(runner, sleep=sleeps.append).run(source_tree.path())

    assert outcome.succeeded == 1
    assert runner.collect.calls == 2
    assert runner.generate.calls == 2
    assert sleeps == [1.0]


def test_exhausted_retries_record_a_failure(source_tree) -> None:
    source_tree.write({"OrderController.kt": ORDER_CONTROLLER})
    runner = _runner("paths: [1, 2]")
    sleeps = []

    outcome = Orchestrator(runner, sleep=sleeps.append).run(source_tree.path())

    output = source_tree.path().resolve() / ".apidocgen"
    assert outcome.succeeded == 0
    assert outcome.failed == 1
    assert runner.generate.calls == 3
    assert sleeps == [1.0, 1.0, 1.0]
    assert outcome.merged_yaml is None
    assert not (output / "openapi").exists()

    errors = _read_json(output / "logs" / "error.json")
    assert errors[0]["exception_type"] == "apidocgen.pipeline.generator.InvalidOpenApiError"
    assert errors[0]["message"].startswith("OrderController.kt: ")
    last = _read_json(output / "logs" / "execution_log.json")[-1]
    assert (last["command"], last["success"]) == ("merge", False)


def test_empty_output_fails_without_retry(source_tree) -> None:
    source_tree.write({"OrderController.kt": ORDER_CONTROLLER})
    runner = _runner("")

    outcome = Orchestrator(runner, sleep=lambda _: None).run(source_tree.path())

    assert outcome.failed == 1
    assert outcome.failures[0].reason == "No OpenAPI YAML generated."
    assert runner.generate.calls == 1


def test_model_errors_do_not_stop_the_batch(source_tree) -> None:
    source_tree.write(
        {"OrderController.kt": ORDER_CONTROLLER, "UserController.kt": USER_CONTROLLER}
    )
    runner = RoutingRunner(
        collect=ScriptedRunner([LLMError("rate limited"), ChatResponse(text="", stop_reason="end_turn")]),
        generate=ScriptedRunner([ChatResponse(text=USER_FRAGMENT)]),
    )

    outcome = Orchestrator(runner, sleep=lambda _: None).run(source_tree.path())

    assert (outcome.succeeded, outcome.failed) == (1, 1)
    assert outcome.failures[0].path.endswith("OrderController.kt")
    assert "rate limited" in outcome.failures[0].reason
    assert outcome.merged_yaml is not None


def test_include_limits_and_extends_selection(source_tree) -> None:
    source_tree.write(
        {
            "OrderController.kt": ORDER_CONTROLLER,
            "UserController.kt": USER_CONTROLLER,
            "handlers/Plain.kt": "class Plain\n",
        }
    )
    runner = _runner(USER_FRAGMENT)

    outcome = Orchestrator(runner, sleep=lambda _: None).run(
        source_tree.path(),
        include=["handlers/Plain.kt", "UserController.kt", "missing/Nope.kt"],
    )

    assert outcome.succeeded == 2
    names = [path.name for path in outcome.fragments]
    assert names == ["plain.yaml", "user_controller.yaml"]
    select = _read_json(source_tree.file(".apidocgen/logs/execution_log.json"))[1]
    assert select["command"] == "select"
    assert [path.rsplit("/", 1)[-1] for path in select["changed_files"]] == [
        "Plain.kt",
        "UserController.kt",
    ]


def test_same_file_names_get_distinct_fragments(source_tree) -> None:
    source_tree.write(
        {"a/OrderController.kt": ORDER_CONTROLLER, "b/OrderController.kt": ORDER_CONTROLLER}
    )

    outcome = Orchestrator(_runner(ORDER_FRAGMENT), sleep=lambda _: None).run(source_tree.path())

    assert [path.name for path in outcome.fragments] == [
        "order_controller.yaml",
        "order_controller_2.yaml",
    ]


def test_nothing_to_do_returns_empty_outcome(source_tree) -> None:
    source_tree.write({"Plain.kt": "class Plain\n"})
    runner = _runner(ORDER_FRAGMENT)

    outcome = Orchestrator(runner, sleep=lambda _: None).run(source_tree.path())

    assert outcome.total == 0
    assert runner.collect.calls == 0
    assert outcome.merged_yaml is None


def test_validation_can_be_disabled_through_config(source_tree) -> None:
    source_tree.write(
        {"OrderController.kt": ORDER_CONTROLLER, ".apidocgen.yml": "validate: false\n"}
    )
    runner = _runner("paths:\n  /orders: {}\n")

    outcome = Orchestrator(runner, sleep=lambda _: None).run(
        source_tree.path(), config=load_config(source_tree.path())
    )

    assert outcome.succeeded == 1
    assert runner.generate.calls == 1


def test_missing_project_raises(tmp_path) -> None:
    with pytest.raises(NotADirectoryError):
        Orchestrator(_runner(ORDER_FRAGMENT)).run(tmp_path / "absent")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("OrderController", "order_controller"),
        ("HTTPRouter", "http_router"),
        ("user-routes", "user_routes"),
        ("orders.routes", "orders_routes"),
        ("api", "api"),
    ],
)
def test_snake_case(name: str, expected: str) -> None:
    assert snake_case(name) == expected
