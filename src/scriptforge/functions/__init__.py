"""Agent functions and their dispatcher."""

from scriptforge.functions.base import AgentFunction
from scriptforge.functions.dispatcher import execute_agent_function, process_function_and_args
from scriptforge.functions.execute_script import ExecuteScriptFunction
from scriptforge.functions.files import ReadFileFunction, WriteFileFunction
from scriptforge.functions.registry import FunctionRegistry
from scriptforge.functions.scripts import CreateScriptFunction, FindScriptFunction
from scriptforge.functions.variables import ReadVarFunction, WriteVarFunction


def default_functions() -> list[AgentFunction]:
    return [
        ExecuteScriptFunction(),
        ReadVarFunction(),
        WriteVarFunction(),
        CreateScriptFunction(),
        FindScriptFunction(),
        ReadFileFunction(),
        WriteFileFunction(),
    ]


__all__ = [
    "AgentFunction",
    "CreateScriptFunction",
    "ExecuteScriptFunction",
    "FindScriptFunction",
    "FunctionRegistry",
    "ReadFileFunction",
    "ReadVarFunction",
    "WriteFileFunction",
    "WriteVarFunction",
    "default_functions",
    "execute_agent_function",
    "process_function_and_args",
]
