"""
Miru output simulation.
Recovers what a generated C program would print by reading its printf calls,
without compiling or running the C code.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

INT_CALL = "int"
FLOAT_CALL = "float"
TEXT_CALL = "text"

NO_OUTPUT = "(Program executed but produced no output)"
NO_MAIN = "(No main function generated)"

ENTRY_POINT_MARKER = "int main"

# Argument runs to the first closing parenthesis on the same line.
_CALL_PATTERNS = (
    (INT_CALL, re.compile(r'printf\("%d\\n",\s*([^)\n]+)\)', re.ASCII)),
    (FLOAT_CALL, re.compile(r'printf\("%f\\n",\s*([^)\n]+)\)', re.ASCII)),
    (TEXT_CALL, re.compile(r'printf\("%s\\n",\s*([^)\n]+)\)', re.ASCII)),
)

# ASCII only: int() would otherwise accept any Unicode decimal digit.
_INT_LITERAL = re.compile(r"-?\d+", re.ASCII)
_FLOAT_LITERAL = re.compile(r"\d+\.\d+", re.ASCII)
_BINARY_OP = re.compile(r"(\d+)\s*([+\-*/%])\s*(\d+)", re.ASCII)
_IDENTIFIER = re.compile(r"[A-Za-z_]\w*", re.ASCII)

Number = Union[int, float]


@dataclass(frozen=True)
class OutputCall:
    kind: str
    expression: str
    offset: int


def extract_output_calls(c_code: str) -> List[OutputCall]:
    """Find every recognized printf call in document order.

    Each call shape is scanned separately, so the merged list is sorted by
    offset afterwards. Text calls whose argument is not a quoted literal are
    left out.
    """
    calls: List[OutputCall] = []
    for kind, pattern in _CALL_PATTERNS:
        for match in pattern.finditer(c_code):
            expr = match.group(1).strip()
            if kind == TEXT_CALL and not _is_quoted(expr):
                continue
            calls.append(OutputCall(kind, expr, match.start()))

    calls.sort(key=lambda call: call.offset)
    return calls


def _is_quoted(expr: str) -> bool:
    return len(expr) >= 2 and expr[0] == '"' and expr[-1] == '"'


def _evaluate_binary(left: int, op: str, right: int) -> int:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        # Operands are unsigned literals, so floor and truncation agree.
        return left // right
    return left % right


def _resolve_literal(expr: str) -> Optional[Number]:
    if _INT_LITERAL.fullmatch(expr):
        return int(expr, 10)

    if _FLOAT_LITERAL.fullmatch(expr):
        return float(expr)

    match = _BINARY_OP.fullmatch(expr)
    if match:
        left, op, right = match.groups()
        return _evaluate_binary(int(left), op, int(right))

    return None


def _find_int_initializer(name: str, c_code: str) -> Optional[str]:
    pattern = rf"\bint\s+{re.escape(name)}\s*=\s*([\d+\-*/% ]+);"
    match = re.search(pattern, c_code, re.ASCII)
    return match.group(1) if match else None


def resolve_expression(expr: str, c_code: str) -> Optional[Number]:
    """Evaluate one printf argument, or return None when it cannot be resolved.

    Handles integer and float literals, a single binary operation between two
    integer literals, and a bare identifier declared as ``int name = ...;``
    somewhere in ``c_code``. Variable lookups go one level deep only.
    """
    expr = expr.strip()

    value = _resolve_literal(expr)
    if value is not None:
        return value

    if _IDENTIFIER.fullmatch(expr):
        initializer = _find_int_initializer(expr, c_code)
        if initializer is not None:
            return _resolve_literal(initializer.strip())

    return None


def format_value(value: Number) -> str:
    if isinstance(value, float):
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def _render_call(call: OutputCall, c_code: str) -> Optional[str]:
    if call.kind == TEXT_CALL:
        return call.expression[1:-1]

    try:
        value = resolve_expression(call.expression, c_code)
        if value is None:
            return None
        return format_value(value)
    except Exception:  # noqa: BLE001
        # e.g. division by zero or an int too long to print; unresolved for this call only
        return None


def simulate_output(c_code: str, placeholder: Optional[str] = None) -> str:
    """Reconstruct the program output from generated C text.

    Unresolvable calls are dropped unless ``placeholder`` is given, in which
    case its ``{expression}`` field is filled in and emitted in their place.
    Always returns a string; when nothing is printed one of the
    ``NO_OUTPUT`` / ``NO_MAIN`` sentinels is returned.
    """
    lines: List[str] = []
    for call in extract_output_calls(c_code):
        rendered = _render_call(call, c_code)
        if rendered is None:
            if placeholder is None:
                continue
            rendered = placeholder.replace("{expression}", call.expression)
        lines.append(rendered)

    if lines:
        return "\n".join(lines)

    if ENTRY_POINT_MARKER in c_code:
        return NO_OUTPUT
    return NO_MAIN


def run_generated_c(c_code: str, placeholder: Optional[str] = None) -> Dict[str, object]:
    if not (c_code or "").strip():
        return {
            "ok": False,
            "error": "No generated code to run.",
            "generated": c_code,
        }

    return {
        "ok": True,
        "output": simulate_output(c_code, placeholder),
        "generated": c_code,
    }


def analyze_generated_c(c_code: str) -> Dict[str, object]:
    """Report every output call and whether it resolved.

    Shows the calls that ``simulate_output`` drops silently by default.
    """
    report: List[Dict[str, object]] = []
    unresolved = 0
    for call in extract_output_calls(c_code):
        rendered = _render_call(call, c_code)
        if rendered is None:
            unresolved += 1
        report.append(
            {
                "kind": call.kind,
                "expression": call.expression,
                "offset": call.offset,
                "resolved": rendered is not None,
                "value": rendered,
            }
        )

    return {
        "ok": True,
        "calls": report,
        "unresolved": unresolved,
        "hasMain": ENTRY_POINT_MARKER in c_code,
    }
