"""
Tool registry shared by the MCP servers.

A registry is an ordered list of routes. Each route owns a group of tool
definitions and the coroutine that dispatches calls for them; the first route
whose predicate accepts a tool name handles the call. Arguments are checked
against the tool's input schema before the handler runs, and every failure is
reported back as an "Error: ..." result instead of escaping to the transport.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from jsonschema import Draft7Validator, validators
from jsonschema.exceptions import ValidationError

from .log import log_error, log_info

ToolHandler = Callable[[str, Dict[str, Any]], Awaitable[str]]


class ToolInputError(ValueError):
    """Raised when tool arguments do not satisfy the tool's input schema."""


@dataclass
class ToolResult:
    """Text produced by a tool call, flagged when it describes a failure."""

    text: str
    is_error: bool = False


@dataclass
class ToolRoute:
    """A group of tools and the predicate that selects it by tool name."""

    matches: Callable[[str], bool]
    tools: List[Dict[str, Any]]
    handler: ToolHandler


def name_contains(*fragments: str) -> Callable[[str], bool]:
    """Predicate accepting tool names that contain any of the fragments."""
    return lambda name: any(fragment in name for fragment in fragments)


def name_in(tools: Iterable[Dict[str, Any]]) -> Callable[[str], bool]:
    """Predicate accepting exactly the names of the given tool definitions."""
    names = {tool["name"] for tool in tools}
    return lambda name: name in names


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


def _required(validator, required, instance, schema):
    if not validator.is_type(instance, "object"):
        return
    missing = [key for key in required if _is_missing(instance.get(key))]
    if missing:
        yield ValidationError(f"Missing required parameter(s): {', '.join(missing)}")


# Draft 7 with a stricter "required": blank strings and empty arrays or objects
# do not satisfy it
ArgumentsValidator = validators.extend(Draft7Validator, {"required": _required})

# Lower sorts first; everything else reports after these
ERROR_PRIORITY = {"required": 0, "anyOf": 1}


def _parameter_name(path: Iterable[Any]) -> str:
    name = ""
    for part in path:
        if isinstance(part, int):
            name += "[]"
        else:
            name += f".{part}" if name else str(part)
    return name


def _describe(error: ValidationError) -> str:
    name = _parameter_name(error.absolute_path)

    if error.validator == "required":
        return error.message
    if error.validator == "anyOf":
        options = " | ".join(", ".join(group.get("required", [])) for group in error.validator_value)
        return f"One of the following parameter sets is required: {options}"
    if error.validator == "type":
        expected = error.validator_value
        if isinstance(expected, list):
            expected = " or ".join(expected)
        return f"Parameter '{name}' must be of type {expected}"
    if error.validator == "enum":
        return f"Parameter '{name}' must be one of: {', '.join(str(a) for a in error.validator_value)}"
    if name:
        return f"Invalid parameter '{name}': {error.message}"
    return error.message


def validate_arguments(schema: Optional[Dict[str, Any]], arguments: Any) -> Dict[str, Any]:
    """
    Check tool arguments against the tool's JSON-schema input definition.

    Arguments explicitly set to None are treated as absent. When several
    problems exist, missing required parameters are reported first, then
    unmet ``anyOf`` groups, then per-parameter errors.

    Args:
        schema: The tool's ``inputSchema`` (may be None)
        arguments: Arguments supplied by the caller

    Returns:
        The arguments as a dict (an empty dict when none were supplied)

    Raises:
        ToolInputError: If the arguments are not acceptable
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ToolInputError("Tool arguments must be an object")
    if not schema:
        return arguments

    present = {key: value for key, value in arguments.items() if value is not None}
    errors = sorted(
        ArgumentsValidator(schema).iter_errors(present),
        key=lambda error: ERROR_PRIORITY.get(error.validator, len(ERROR_PRIORITY)),
    )
    if errors:
        raise ToolInputError(_describe(errors[0]))

    return arguments


class ToolRegistry:
    """Routes tool calls to the handler that owns them."""

    def __init__(self, routes: List[ToolRoute], log_prefix: str = "MCP"):
        self.routes = routes
        self.log_prefix = log_prefix

    def get_tool_definitions(self) -> List[Dict[str, Any]]:
        tools = []
        for route in self.routes:
            tools.extend(route.tools)
        return tools

    def find_tool(self, name: str) -> Optional[Dict[str, Any]]:
        for tool in self.get_tool_definitions():
            if tool["name"] == name:
                return tool
        return None

    def find_route(self, name: str) -> Optional[ToolRoute]:
        for route in self.routes:
            if route.matches(name):
                return route
        return None

    async def handle_tool_call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """
        Validate and dispatch a tool call.

        Args:
            name: Tool name requested by the client
            arguments: Tool arguments (may be None)

        Returns:
            ToolResult with the handler's text, or "Error: <message>" with
            is_error set when routing, validation or the handler failed
        """
        try:
            route = self.find_route(name)
            if route is None:
                raise ValueError(f"Unknown tool: {name}")

            tool = self.find_tool(name)
            args = validate_arguments(tool.get("inputSchema") if tool else None, arguments)

            log_info(self.log_prefix, name, "called")
            text = await route.handler(name, args)
            return ToolResult(text=text, is_error=False)

        except Exception as e:
            message = str(e) or "Unknown error occurred"
            log_error(self.log_prefix, name, type(e).__name__, message)
            return ToolResult(text=f"Error: {message}", is_error=True)
