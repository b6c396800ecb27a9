from pydantic import BaseModel, ConfigDict

from scriptforge.chat import ChatRole
from scriptforge.functions import FunctionRegistry, default_functions, execute_agent_function
from scriptforge.functions.base import AgentFunction
from scriptforge.results import Err, ErrorKind, Ok


class EmptyInput(BaseModel):
    model_config = ConfigDict(extra="forbid")


class BoomFunction(AgentFunction[EmptyInput]):
    name = "boom"
    description = "raises"
    input_model = EmptyInput

    def build_executor(self, context):
        def execute(params):
            raise RuntimeError("secret internals")

        return execute


class RefusingFunction(AgentFunction[EmptyInput]):
    name = "refuse"
    description = "reports an error"
    input_model = EmptyInput

    def __init__(self):
        self.calls = 0

    def build_executor(self, context):
        def execute(params):
            self.calls += 1
            return Err("not today")

        return execute


def _dispatch(context, name, args, functions=None):
    return execute_agent_function(name, args, context, functions or default_functions())


def _assert_pair(messages):
    assert [message.role for message in messages] == [ChatRole.FUNCTION_CALL, ChatRole.FUNCTION_RESULT]


def test_missing_name(context):
    result = _dispatch(context, None, "{}")
    assert isinstance(result, Err)
    assert result.error.kind == ErrorKind.UNDEFINED_FUNCTION_NAME
    _assert_pair(result.error.messages)


def test_unknown_function(context):
    result = _dispatch(context, "launchRockets", "{}")
    assert result.error.kind == ErrorKind.FUNCTION_NOT_FOUND
    assert "launchRockets does not exist" in result.error.message


def test_missing_arguments(context):
    result = _dispatch(context, "readVar", None)
    assert result.error.kind == ErrorKind.UNDEFINED_FUNCTION_ARGUMENTS


def test_unparsable_arguments_capture_parse_error(context):
    result = _dispatch(context, "readVar", "{oops")
    assert result.error.kind == ErrorKind.UNPARSABLE_FUNCTION_ARGUMENTS
    assert "{oops" in result.error.message
    assert result.error.details["parse_error"]
    _assert_pair(result.error.messages)


def test_non_object_arguments_are_unparsable(context):
    result = _dispatch(context, "readVar", "[1, 2]")
    assert result.error.kind == ErrorKind.UNPARSABLE_FUNCTION_ARGUMENTS


def test_schema_violations_fail_before_execution(context, stub_evaluator):
    missing = _dispatch(context, "executeScript", '{"namespace": "add"}')
    extra = _dispatch(context, "executeScript", '{"namespace": "add", "arguments": "{}", "result": "r"}')
    assert missing.error.kind == ErrorKind.INVALID_CAPABILITY_ARGUMENTS
    assert "arguments" in missing.error.message
    assert extra.error.kind == ErrorKind.INVALID_CAPABILITY_ARGUMENTS
    assert stub_evaluator.calls == []


def test_relaxed_arguments_are_accepted(context):
    context.variables.set("x", 5)
    result = _dispatch(context, "readVar", "{name: 'x',}")
    assert isinstance(result, Ok)
    assert "## Variable {{x}}" in result.value.summary


def test_internal_errors_become_generic_failures(context):
    result = _dispatch(context, "boom", "{}", [BoomFunction()])
    assert result.error.kind == ErrorKind.INTERNAL_ERROR
    assert "RuntimeError" in result.error.message
    assert "secret internals" not in result.error.message
    _assert_pair(result.error.messages)


def test_capability_errors_are_surfaced_once(context):
    refusing = RefusingFunction()
    result = _dispatch(context, "refuse", "{}", [refusing])
    assert result.error.kind == ErrorKind.CAPABILITY_EXECUTION_FAILED
    assert "not today" in result.error.message
    assert refusing.calls == 1


def test_generic_success_summary(context):
    result = _dispatch(context, "writeVar", '{"name": "greeting", "value": "hello"}')
    assert isinstance(result, Ok)
    summary = result.value
    assert summary.summary.startswith("Function call: `writeVar(")
    assert "Result:" in summary.summary
    assert summary.arguments == {"name": "greeting", "value": "hello"}
    _assert_pair(summary.messages)


def test_dispatch_accepts_a_registry(context):
    registry = FunctionRegistry(default_functions())
    result = execute_agent_function("writeVar", '{"name": "a", "value": "1"}', context, registry)
    assert isinstance(result, Ok)
    assert context.variables.get("a") == "1"
