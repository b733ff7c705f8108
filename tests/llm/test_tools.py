"""Behaviour of the get_file retrieval tool."""

from __future__ import annotations

from apidocgen.llm.messages import ToolCall
from apidocgen.llm.tools import GET_FILE_TOOL, GetFileTool, RetrievalResult


def test_schema_matches_tool_arguments() -> None:
    assert GET_FILE_TOOL.name == "get_file"
    assert set(GET_FILE_TOOL.input_schema["properties"]) == {"absolutePath", "className"}
    assert GET_FILE_TOOL.input_schema["required"] == ["absolutePath", "className"]


def test_execute_returns_declaration_and_imports(source_tree) -> None:
    source_tree.write(
        {
            "dto/User.kt": """
            package dto

            import java.time.Instant

            data class User(val name: String, val joined: Instant)
            """
        }
    )
    path = str(source_tree.file("dto/User.kt"))

    result = GetFileTool().execute(path, "User")

    assert result.succeeded
    assert result.class_name == "User"
    assert result.absolute_path == str(source_tree.file("dto/User.kt").resolve())
    assert result.content.startswith("data class User(")
    assert any("java.time.Instant" in line for line in result.imports)


def test_lookup_miss_is_an_error_result(source_tree) -> None:
    source_tree.write({"User.kt": "class User\n"})
    path = str(source_tree.file("User.kt"))

    result = GetFileTool().execute(path, "Account")

    assert result.result == f"Error: File not found at path '{path}'."
    assert result.to_dict() == {"result": result.result, "absolutePath": path}


def test_unsupported_extension_is_an_error_result() -> None:
    result = GetFileTool().execute("/srv/app/models.rb", "User")

    assert result.result.startswith("Error:")
    assert "/srv/app/models.rb" in result.result
    assert result.content is None


def test_unexpected_finder_failure_is_an_error_result() -> None:
    class ExplodingFinder:
        def find_by_name(self, start_file, type_name):
            raise RuntimeError("disk on fire")

    tool = GetFileTool(router=lambda extension: ExplodingFinder())

    result = tool.execute("/srv/app/User.kt", "User")

    assert result.result.startswith("Error:")
    assert "disk on fire" in result.result
    assert "/srv/app/User.kt" in result.result


def test_dispatch_rejects_unknown_tools_and_bad_input() -> None:
    tool = GetFileTool()

    unknown = tool.dispatch(ToolCall(id="1", name="read_url", arguments={}))
    invalid = tool.dispatch(ToolCall(id="2", name="get_file", arguments={"absolutePath": 3}))

    assert unknown.to_dict() == {"result": "Error: Unknown tool 'read_url'."}
    assert invalid.to_dict() == {"result": "Error: Invalid input for get_file tool."}


def test_answer_wraps_payload_with_call_id(source_tree) -> None:
    source_tree.write({"User.kt": "class User\n"})
    call = ToolCall(
        id="toolu_1",
        name="get_file",
        arguments={"absolutePath": str(source_tree.file("User.kt")), "className": "User"},
    )

    answer = GetFileTool().answer(call)

    assert answer.call_id == "toolu_1"
    assert answer.payload["result"] == "Success"
    assert answer.payload["className"] == "User"


def test_to_dict_omits_missing_fields() -> None:
    result = RetrievalResult(result="Success", absolute_path="/a/B.kt", content="class B")

    assert result.to_dict() == {"result": "Success", "absolutePath": "/a/B.kt", "content": "class B"}
