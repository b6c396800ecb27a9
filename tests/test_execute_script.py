import json

from scriptforge.chat import ChatRole
from scriptforge.context import new_agent_context
from scriptforge.functions import default_functions, execute_agent_function
from scriptforge.results import Err, ErrorKind, Ok
from scriptforge.sandbox.evaluator import EvalOutcome, EvaluationClient, SandboxEvaluator
from scriptforge.scripts import InMemoryScriptCatalog, Script


def _call(context, **params):
    return execute_agent_function("executeScript", json.dumps(params), context, default_functions())


def test_unknown_script_is_reported_as_not_found(context, stub_evaluator):
    result = _call(context, namespace="unknown", arguments="{}", variable="out")
    assert isinstance(result, Err)
    assert result.error.kind == ErrorKind.SCRIPT_NOT_FOUND
    assert "not found" in result.error.message
    assert "Error executing 'unknown'" in result.error.messages[1].content
    assert "out" not in context.variables
    assert stub_evaluator.calls == []


def test_bad_script_arguments_name_the_offending_string(context, stub_evaluator):
    result = _call(context, namespace="add", arguments="{bad json")
    assert result.error.kind == ErrorKind.INVALID_CAPABILITY_ARGUMENTS
    assert "{bad json" in result.error.message
    assert stub_evaluator.calls == []


def test_placeholders_are_resolved_into_script_globals(context, stub_evaluator):
    context.variables.set("n", 41)
    result = _call(context, namespace="add", arguments="{x: '{{n}}', label: 'n={{n}} {{unset}}'}")
    assert isinstance(result, Ok)
    source, bindings = stub_evaluator.calls[0]
    assert source == "return x + 1"
    assert bindings == {"x": "41", "label": '"n=41 {{unset}}"'}


def test_successful_result_is_stored_in_variable(context, stub_evaluator):
    stub_evaluator.outcome = EvalOutcome.success('"hi"')
    result = _call(context, namespace="add", arguments="{}", variable="y")
    assert isinstance(result, Ok)
    assert context.variables.get("y") == '"hi"'
    summary = result.value.summary
    assert "{{y}}" in summary
    assert 'Preview: `"hi"`' in summary
    assert "Result stored in variable: {{y}}" in result.value.messages[1].content


def test_script_errors_do_not_touch_variables(context, stub_evaluator):
    stub_evaluator.outcome = EvalOutcome.script_error("ValueError: boom")
    result = _call(context, namespace="fail", arguments="{}", variable="y")
    assert result.error.kind == ErrorKind.CAPABILITY_EXECUTION_FAILED
    assert "boom" in result.error.message
    assert "y" not in context.variables
    assert [message.role for message in result.error.messages] == [
        ChatRole.FUNCTION_CALL,
        ChatRole.FUNCTION_RESULT,
    ]


def test_evaluator_failures_are_typed(context, stub_evaluator):
    stub_evaluator.outcome = EvalOutcome.failure("Script timed out after 5.0s")
    result = _call(context, namespace="add", arguments="{}")
    assert result.error.kind == ErrorKind.EVALUATOR_FAILURE
    assert "timed out" in result.error.message


def test_no_result_is_explicit(context, stub_evaluator):
    stub_evaluator.outcome = EvalOutcome.success("null")
    result = _call(context, namespace="add", arguments="")
    assert "No result returned." in result.value.summary
    assert stub_evaluator.calls[0][1] == {}


def test_scripts_run_end_to_end_in_the_sandbox(tmp_path):
    catalog = InMemoryScriptCatalog(
        [
            Script(namespace="add", code="return x + 1"),
            Script(namespace="fail", code="raise ValueError('boom')"),
        ]
    )
    context = new_agent_context(
        tmp_path, scripts=catalog, evaluation_client=EvaluationClient(SandboxEvaluator())
    )

    added = _call(context, namespace="add", arguments='{"x": 1}', variable="two")
    assert isinstance(added, Ok)
    assert "JSON result: 2" in added.value.summary
    assert context.variables.get_value("two") == 2

    chained = _call(context, namespace="add", arguments='{"x": "{{two}}"}')
    assert "JSON result: 3" in chained.value.summary

    failed = _call(context, namespace="fail", arguments="{}")
    assert failed.error.kind == ErrorKind.CAPABILITY_EXECUTION_FAILED
    assert "boom" in failed.error.messages[1].content
    assert context.evaluation_client.last_output.ok is True


def test_blank_result_variable_fails_before_the_script_runs(context, stub_evaluator):
    result = _call(context, namespace="add", arguments="{}", variable="  ")
    assert result.error.kind == ErrorKind.INVALID_CAPABILITY_ARGUMENTS
    assert stub_evaluator.calls == []
