import json

from scriptforge.functions import default_functions, execute_agent_function
from scriptforge.results import Err, ErrorKind, Ok


def _call(context, function_name, **params):
    return execute_agent_function(function_name, json.dumps(params), context, default_functions())


def test_read_var_reports_missing_variable(context):
    result = _call(context, "readVar", name="missing")
    assert isinstance(result, Err)
    assert result.error.kind == ErrorKind.CAPABILITY_EXECUTION_FAILED
    assert "{{missing}} not found" in result.error.message


def test_write_then_read_var(context):
    assert isinstance(_call(context, "writeVar", name="cfg", value='{"a": 1}'), Ok)
    assert isinstance(_call(context, "writeVar", name="note", value="plain text"), Ok)
    assert context.variables.get("cfg") == '{"a": 1}'
    assert context.variables.get("note") == '"plain text"'

    result = _call(context, "readVar", name="cfg")
    assert '{"a": 1}' in result.value.summary
    assert result.value.messages[1].content.startswith("## Variable {{cfg}}")


def test_create_and_find_script(context):
    created = _call(
        context,
        "createScript",
        namespace="text.shout",
        description="Upper-case a message",
        arguments="{ message: string }",
        code="message.upper()",
    )
    assert isinstance(created, Ok)
    assert context.scripts.get_script_by_name("text.shout").code == "message.upper()"

    found = _call(context, "findScript", query="upper")
    assert isinstance(found, Ok)
    assert "text.shout" in found.value.summary

    missing = _call(context, "findScript", query="nothing matches this")
    assert isinstance(missing, Err)


def test_create_script_rejects_duplicates_and_unsafe_code(context):
    duplicate = _call(context, "createScript", namespace="add", description="", arguments="", code="1")
    unsafe = _call(context, "createScript", namespace="bad", description="", arguments="", code="eval('1')")
    assert duplicate.error.kind == ErrorKind.INVALID_CAPABILITY_ARGUMENTS
    assert "already exists" in duplicate.error.message
    assert unsafe.error.kind == ErrorKind.INVALID_CAPABILITY_ARGUMENTS
    assert "Forbidden call: eval" in unsafe.error.message
    assert context.scripts.get_script_by_name("bad") is None


def test_write_and_read_workspace_files(context):
    written = _call(context, "writeFile", path="notes/today.txt", content="hello")
    assert isinstance(written, Ok)
    assert (context.workspace.root / "notes" / "today.txt").read_text(encoding="utf-8") == "hello"

    read = _call(context, "readFile", path="notes/today.txt")
    assert "hello" in read.value.summary


def test_file_access_outside_workspace_fails(context):
    result = _call(context, "readFile", path="../outside.txt")
    assert result.error.kind == ErrorKind.CAPABILITY_EXECUTION_FAILED
    assert "escapes workspace" in result.error.message

    missing = _call(context, "readFile", path="nope.txt")
    assert isinstance(missing, Err)


def test_blank_variable_names_are_rejected_as_invalid_arguments(context):
    for name in ("readVar", "writeVar"):
        params = {"name": "   "} if name == "readVar" else {"name": "   ", "value": "1"}
        result = _call(context, name, **params)
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.INVALID_CAPABILITY_ARGUMENTS
    assert len(context.variables) == 0
