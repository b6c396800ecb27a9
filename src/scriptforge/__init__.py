"""Function-call dispatch and sandboxed script execution for LLM agents."""

from scriptforge.agent import Agent, AgentResult
from scriptforge.context import AgentContext, new_agent_context
from scriptforge.functions import FunctionRegistry, default_functions, execute_agent_function
from scriptforge.results import DispatchError, Err, ErrorKind, FunctionCallSummary, Ok
from scriptforge.variables import VariableStore

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentContext",
    "AgentResult",
    "DispatchError",
    "Err",
    "ErrorKind",
    "FunctionCallSummary",
    "FunctionRegistry",
    "Ok",
    "VariableStore",
    "default_functions",
    "execute_agent_function",
    "new_agent_context",
]
