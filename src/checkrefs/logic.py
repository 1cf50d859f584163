"""Classification of per-row gating rules into display flags.

Activities may carry a JSON Logic expression that decides when the app
shows them. The report only needs to know whether a row is switched off
entirely or restricted to the dev environment, so the expression is
parsed into a small tree and matched against those two shapes.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

logger = logging.getLogger(__name__)

ENVIRONMENT_VARIABLE = "server.env"
DEV_ENVIRONMENT = "dev"


class LogicFlag(Enum):
    """Display label derived from a row's gating rule."""

    NONE = ""
    DISABLED = "disabled"
    DEV_ONLY = "dev only"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class Constant:
    value: Any


@dataclass(frozen=True)
class Equality:
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class And:
    operands: Tuple["Expression", ...]


@dataclass(frozen=True)
class Other:
    pass


Expression = Union[Variable, Constant, Equality, And, Other]


def _is_falsy(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return value == ""


def parse_expression(value: Any) -> Expression:
    """Build an expression tree from decoded JSON Logic."""
    if isinstance(value, dict):
        if len(value) != 1:
            return Other()
        operator, args = next(iter(value.items()))
        if operator == "var":
            if isinstance(args, list) and args:
                args = args[0]
            if isinstance(args, str):
                return Variable(args)
            return Other()
        if operator in ("==", "==="):
            if isinstance(args, list) and len(args) == 2:
                return Equality(parse_expression(args[0]), parse_expression(args[1]))
            return Other()
        if operator == "and":
            if isinstance(args, list):
                return And(tuple(parse_expression(arg) for arg in args))
            return Other()
        return Other()
    if isinstance(value, list):
        return Other()
    return Constant(value)


def is_dev_check(expression: Expression) -> bool:
    """Whether ``expression`` tests that the environment equals dev, in either order."""
    if not isinstance(expression, Equality):
        return False
    sides = (expression.left, expression.right)
    for variable, constant in (sides, sides[::-1]):
        if (
            variable == Variable(ENVIRONMENT_VARIABLE)
            and isinstance(constant, Constant)
            and constant.value == DEV_ENVIRONMENT
        ):
            return True
    return False


def classify(text: Optional[str]) -> LogicFlag:
    """Classify a rule expression; malformed rules count as no flag."""
    if text is None or not text.strip():
        return LogicFlag.NONE
    try:
        value = json.loads(text)
    except ValueError:
        logger.debug("Ignoring unparseable rule", extra={"rule": text})
        return LogicFlag.NONE

    if _is_falsy(value):
        return LogicFlag.DISABLED

    expression = parse_expression(value)
    if is_dev_check(expression):
        return LogicFlag.DEV_ONLY
    if isinstance(expression, And) and any(is_dev_check(op) for op in expression.operands):
        return LogicFlag.DEV_ONLY
    return LogicFlag.NONE


def describe_flag_change(before: LogicFlag, after: LogicFlag) -> str:
    """Phrase a before/after pair of flags for the report."""
    if before == after:
        if after is LogicFlag.NONE:
            return ""
        return f"({after.label})"
    if before is LogicFlag.NONE:
        return f"(changed to {after.label})"
    if after is LogicFlag.NONE:
        return f"(changed from {before.label})"
    return f"(changed from {before.label} to {after.label})"
