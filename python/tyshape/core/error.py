"""Cumulative validation errors."""

import json
import re
from typing import Any, Optional, Union

from .utils import UNDEFINED, MappingKey, is_array, is_nan, is_object, join_key_path

Resource = Union[dict, BaseException]

_PLACEHOLDER = re.compile(r"\{(.*?)\}")

_KINDS = ("exception", "unexcepted", "dirty", "overflow", "missing", "illegal", "notin")


class TyError(TypeError):
    """
    Collects the failures of one validation pass.

    Resources are raw causes: records such as
    ``{"kind": "exception", "value": 1, "pattern": str, "key": "name"}``,
    nested errors, or plain exceptions. `commit()` flattens them into traces
    that carry their full key path, and the message is rendered from those
    traces through a template table keyed by failure kind.
    """

    should_hide_sensitive_data = False
    should_break_long_message = False
    key_path_prefix = "$"
    default_messages = {
        "exception": "{keyPath} should match `{should}`, but receive `{receive}`.",
        "unexcepted": "{keyPath} should not match `{should}`, but receive `{receive}`.",
        "dirty": "{keyPath} receive `{receive}` whose length does not match `{should}`.",
        "overflow": "{keyPath} should not exist.",
        "missing": "{keyPath} is missing.",
        "illegal": "key `{key}` at {keyPath} should match `{should}`.",
        "notin": "{keyPath} receive `{receive}` did not match `{should}` in enum.",
    }

    def __init__(self, resource: Optional[Union[str, Resource]] = None):
        super().__init__()
        self.resources: list = []
        self.traces: list = []
        self._message: Optional[str] = None
        self._translation: Optional[dict] = None

        if resource:
            self.add(resource)
            self.commit()

    @classmethod
    def configure(cls, *, sensitive=None, breakline=None, key_path_prefix=None, messages=None) -> None:
        """Set the process-wide formatting knobs."""
        if sensitive is not None:
            cls.should_hide_sensitive_data = bool(sensitive)
        if breakline is not None:
            cls.should_break_long_message = bool(breakline)
        if key_path_prefix is not None:
            cls.key_path_prefix = key_path_prefix
        if messages:
            cls.default_messages = {**cls.default_messages, **messages}

    @property
    def message(self) -> str:
        if self._message is None:
            self._message = self.format()
        return self._message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"TyError({self.message!r})"

    @property
    def count(self) -> int:
        return len(self.resources)

    def add(self, resource: Union[str, Resource]) -> "TyError":
        if isinstance(resource, str):
            resource = TypeError(resource)
        if isinstance(resource, (BaseException, dict)):
            self.resources.append(resource)
        return self

    def replace(self, resource: Union[str, Resource]) -> "TyError":
        self.resources = []
        return self.add(resource)

    def commit(self) -> "TyError":
        self.traces = _make_traces(self, [])
        self._message = None
        self.format()
        return self

    def error(self) -> Optional["TyError"]:
        return self if self.count else None

    def format(self, *, key_path_prefix=None, templates=None, breaktag=None,
               breakline=None, sensitive=None, prefix="", suffix="") -> str:
        """Render the traces. Options override the class-level knobs for this call."""
        traces = self.traces
        if key_path_prefix is None:
            key_path_prefix = TyError.key_path_prefix
        if breaktag is None:
            breaktag = "\n" if len(traces) > 1 else ""
        if breakline is None:
            breakline = TyError.should_break_long_message
        if sensitive is None:
            sensitive = TyError.should_hide_sensitive_data
        bands = {**TyError.default_messages, **(templates or {})}

        messages = []
        for trace in traces:
            key_path = trace["key_path"]
            info = _describe_expectation(trace)
            params = {
                "key": key_path[-1] if key_path else "",
                "keyPath": join_key_path(key_path_prefix, key_path),
                "should": _make_should(info, breakline) if info else "",
                "receive": _stringify(trace["value"], sensitive, breakline) if "value" in trace else "",
            }
            messages.append(_render(trace["kind"], params, bands))

        text = prefix + breaktag.join(messages) + suffix
        self._message = text
        return text

    def translate(self, message: Optional[str] = None, prefix: Optional[str] = None,
                  suffix: Optional[str] = None) -> str:
        """Re-render every trace of this error with one custom template."""
        options = {"key_path_prefix": ""}
        if message:
            options["templates"] = {kind: message for kind in _KINDS}
        if prefix:
            options["prefix"] = prefix
        if suffix:
            options["suffix"] = suffix
        self._translation = options
        return self.format(**options)


def _render(kind: str, params: dict, templates: dict) -> str:
    template = templates.get(kind, kind)
    return _PLACEHOLDER.sub(lambda m: str(params[m.group(1)]) if m.group(1) in params else m.group(0), template)


def _make_traces(error: TyError, key_path: list) -> list:
    traces = []
    for resource in error.resources:
        traces.extend(_make_inner_traces(resource, list(key_path)))
    return traces


def _make_inner_traces(resource: Resource, key_path: list) -> list:
    if isinstance(resource, TyError):
        # a nested error rendered with its own template keeps that wording
        if resource._translation is not None:
            return [{"kind": resource.message, "key_path": key_path}]
        return _make_traces(resource, key_path)

    if isinstance(resource, BaseException):
        return [{"kind": str(resource), "key_path": key_path}]

    if "key" in resource:
        key = resource["key"]
        key_path.append(key if isinstance(key, str) else MappingKey(key))
    elif "index" in resource:
        key_path.append(resource["index"])

    kind = resource.get("kind")
    error = resource.get("error")
    errors = resource.get("errors")

    if kind in ("dirty", "overflow", "missing", "illegal"):
        trace = {"kind": kind, "key_path": key_path}
        for field in ("name", "value", "pattern"):
            if field in resource:
                trace[field] = resource[field]
        return [trace]

    if kind == "notin" and errors:
        traces = []
        for branch in errors:
            for item in _make_inner_traces(branch, list(key_path)):
                traces.append({**item, "kind": "notin"} if item["kind"] in _KINDS else item)
        return traces

    if error is None:
        trace = {"kind": kind or "exception", "key_path": key_path}
        for field in ("name", "value", "pattern"):
            if field in resource:
                trace[field] = resource[field]
        return [trace]

    return _make_inner_traces(error, key_path)


def _describe_expectation(trace: dict) -> list:
    name = trace.get("name")
    if name and "pattern" in trace:
        return [name, trace["pattern"]]
    if name:
        return [name]
    if "pattern" in trace:
        return [trace["pattern"]]
    return []


def _make_should(info: list, breakline: bool) -> str:
    if len(info) == 1:
        return _stringify(info[0], False, breakline)
    name, pattern = info
    return f"{name}({_stringify(pattern, False, breakline)})"


def _stringify(value: Any, sensitive: bool = False, breakline: bool = False) -> str:
    """Render a value or a pattern for a message."""
    seen = []

    def wrap(items: list, start: str, end: str, depth: int) -> str:
        joined = ",".join(items)
        if not breakline or (len(joined) < 25 and len(items) < 6):
            return start + joined + end
        indent = "  " * (depth + 1)
        body = "".join(f"\n{indent}{item}," for item in items)
        return f"{start}{body}\n{'  ' * depth}{end}"

    def make(value: Any, depth: int = 0) -> str:
        if value is None or value is UNDEFINED or isinstance(value, bool) or is_nan(value):
            return repr(value)
        if isinstance(value, (int, float)):
            return "***" if sensitive else repr(value)
        if isinstance(value, str):
            return json.dumps("***" if sensitive else value, ensure_ascii=False)
        if isinstance(value, re.Pattern):
            return f"/{value.pattern}/"
        if is_object(value):
            if sensitive:
                return wrap([str(key) for key in value], "{", "}", depth)
            return wrap([f"{key}:{make(item, depth + 1)}" for key, item in value.items()], "{", "}", depth)
        if is_array(value):
            return wrap([make(item, depth + 1) for item in value], "[", "]", depth)
        if isinstance(value, type):
            return value.__name__
        if hasattr(value, "pattern") and hasattr(value, "name"):
            # a Type or a Rule
            name = value.name
            if any(value is item for item in seen):
                return name if isinstance(name, str) else f"ref:{name}"
            seen.append(value)
            output = make(value.pattern, depth)
            return f"{name}({output})" if isinstance(name, str) else output
        if callable(value) and hasattr(value, "__name__"):
            return f"{value.__name__}()"
        name = getattr(value, "name", None)
        if isinstance(name, str):
            return name
        return type(value).__name__

    return make(value)
