from __future__ import annotations

import ast
import operator
import re

OPERATORS = ("+", "-", "×", "÷", "%")

_PERCENT_RE = re.compile(r"(\d+\.?\d*)%")

_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS = {ast.UAdd: operator.pos, ast.USub: operator.neg}


class CalculatorError(ValueError):
    """Raised for expressions the keypad calculator cannot evaluate."""


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
        left, right = _eval_node(node.left), _eval_node(node.right)
        try:
            return _BIN_OPS[type(node.op)](left, right)
        except ZeroDivisionError as exc:
            raise CalculatorError("division by zero") from exc
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise CalculatorError(f"unsupported element: {type(node).__name__}")


def evaluate(expression: str) -> float:
    """Evaluate a keypad expression.

    Accepts digits, ``+ - × ÷ * /``, parentheses and ``N%`` (read as N / 100).
    """
    expr = (expression or "").replace("×", "*").replace("÷", "/")
    expr = _PERCENT_RE.sub(lambda m: repr(float(m.group(1)) / 100), expr)
    if not expr.strip():
        raise CalculatorError("empty expression")
    try:
        tree = ast.parse(expr, mode="eval")
    except SyntaxError as exc:
        raise CalculatorError(f"invalid expression: {expression}") from exc
    return _eval_node(tree)


def format_result(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(round(value, 10))


class Calculator:
    """Keypad state behind the calculator view."""

    def __init__(self) -> None:
        self.input = ""
        self.result = ""
        self.evaluated = False

    def press_digit(self, digit: str) -> None:
        if self.evaluated:
            self.input = digit
            self.evaluated = False
        elif self.input.endswith("%"):
            # "50%2" reads as 50% × 2
            self.input += "×" + digit
        else:
            self.input += digit

    def press_operator(self, op: str) -> None:
        if self.input == "" and op == "-":
            self.input = "-"
            return
        if self.input == "":
            return
        if self.input[-1] in OPERATORS and self.input[-1] != "%":
            # a second operator replaces the previous one; % is postfix and stays
            self.input = self.input[:-1] + op
        else:
            self.input += op
        self.evaluated = False

    def press_paren(self, paren: str) -> None:
        self.input += paren
        self.evaluated = False

    def backspace(self) -> None:
        self.input = self.input[:-1]

    def clear(self) -> None:
        self.input = ""
        self.result = ""
        self.evaluated = False

    def calculate(self) -> str:
        if not self.input:
            return self.result
        try:
            self.result = format_result(evaluate(self.input))
            self.input = self.result
        except CalculatorError:
            self.result = "Error"
        self.evaluated = True
        return self.result

    @property
    def display(self) -> str:
        return self.input or "0"
