import json

import pytest

from scriptforge.agent import Agent
from scriptforge.chat import ChatRole
from scriptforge.functions import FunctionRegistry, default_functions
from scriptforge.models.base import FunctionCall, ModelResponse
from scriptforge.models.mock import MockChatModel
from scriptforge.sandbox.evaluator import EvalOutcome
from scriptforge.trace import TraceRecorder


def _call(name, arguments):
    return ModelResponse(function_call=FunctionCall(name=name, arguments=arguments))


def test_agent_dispatches_calls_until_final_answer(context, stub_evaluator, tmp_path):
    stub_evaluator.outcome = EvalOutcome.success("42")
    model = MockChatModel(
        scripted=[
            _call("writeVar", '{"name": "x", "value": "41"}'),
            _call("executeScript", '{"namespace": "add", "arguments": "{x: \'{{x}}\'}", "variable": "answer"}'),
            _call("launchRockets", "{}"),
            ModelResponse(final_text="The answer is 42"),
        ]
    )
    trace = TraceRecorder(trace_id="loop", workspace_dir=str(tmp_path))
    agent = Agent(context, FunctionRegistry(default_functions()), model=model, trace=trace)

    result = agent.run("add one to 41")

    assert result.answer == "The answer is 42"
    assert result.completed
    assert result.steps == 4
    assert result.functions_used == ["writeVar", "executeScript"]
    assert context.variables.get("answer") == "42"
    assert stub_evaluator.calls[0][1] == {"x": "41"}
    roles = [message.role for message in context.chat.messages]
    assert roles == [ChatRole.USER] + [ChatRole.FUNCTION_CALL, ChatRole.FUNCTION_RESULT] * 3 + [ChatRole.ASSISTANT]
    assert "does not exist" in context.chat.messages[6].content
    event_types = [event["type"] for event in trace.events]
    assert "function_error" in event_types
    assert json.loads(open(result.trace_path, encoding="utf-8").read())["stats"]["completed"] is True


def test_agent_passes_function_definitions_to_model(context):
    model = MockChatModel()
    seen = {}

    def chat(messages, functions):
        seen["functions"] = functions
        return ModelResponse(final_text="done")

    model.chat = chat
    Agent(context, FunctionRegistry(default_functions()), model=model).run("hi")
    assert [definition["name"] for definition in seen["functions"]][0] == "executeScript"


def test_agent_stops_after_max_steps(context):
    model = MockChatModel(scripted=[_call("readVar", '{"name": "x"}')] * 5)
    agent = Agent(context, FunctionRegistry(default_functions()), model=model, max_steps=2)
    result = agent.run("loop forever")
    assert not result.completed
    assert result.steps == 2
    assert "Stopped after 2 steps" in result.answer
    assert len(context.chat) == 1 + 2 * 2


def test_mock_model_turns_call_prompts_into_function_calls(context):
    model = MockChatModel()
    agent = Agent(context, FunctionRegistry(default_functions()), model=model, max_steps=1)
    result = agent.run('CALL:writeVar {"name": "v", "value": "1"}')
    assert context.variables.get("v") == "1"
    assert not result.completed


def test_agent_requires_a_model(context):
    with pytest.raises(ValueError):
        Agent(context, FunctionRegistry())
