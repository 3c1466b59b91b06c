"""
Condition evaluation engine for the Condition Layout service.
"""

import time
from enum import Enum
from typing import Dict, Any, List, Mapping, Sequence, Union

from shared.logging import get_logger
from shared.errors import UnknownConditionError
from .handlers import HANDLERS, Handler
from .models import MatchType, ConditionOutcome, EvaluationResult, parse_conditions

logger = get_logger("conditions.engine")


def condition_key(condition: Any) -> str:
    """Registry key of a condition."""
    key = condition.key
    return key.value if isinstance(key, Enum) else key


def _resolve_handler(condition: Any, handlers: Mapping[str, Handler]) -> Handler:
    key = condition_key(condition)
    handler = handlers.get(key)
    if handler is None:
        raise UnknownConditionError(key, handlers.keys())
    return handler


def _check_condition(condition: Any, facts: Any, handlers: Mapping[str, Handler]) -> bool:
    handler = _resolve_handler(condition, handlers)
    return bool(handler(facts, condition.args))


def validate_conditions(conditions: Sequence[Any], handlers: Mapping[str, Handler] = HANDLERS) -> None:
    """Raise UnknownConditionError for the first condition without a handler."""
    for condition in conditions:
        _resolve_handler(condition, handlers)


def evaluate(
    conditions: Sequence[Any],
    facts: Any,
    handlers: Mapping[str, Handler] = HANDLERS,
    match_type: Union[MatchType, str] = MatchType.ALL,
) -> bool:
    """Combine every condition's handler result under the match type.

    ALL holds for an empty list and ANY does not. Evaluation runs left to
    right and stops at the first result that decides the outcome.
    """
    match_type = MatchType(match_type)
    results = (_check_condition(condition, facts, handlers) for condition in conditions)

    if match_type == MatchType.ANY:
        return any(results)
    return all(results)


class ConditionEngine:
    """Evaluates a fixed list of conditions against successive Fact Bags."""

    def __init__(
        self,
        conditions: Sequence[Any],
        match_type: Union[MatchType, str] = MatchType.ALL,
        handlers: Mapping[str, Handler] = HANDLERS,
    ):
        self.logger = logger
        self.match_type = MatchType(match_type)
        self.handlers = handlers

        # Product conditions get their typed arguments checked up front
        if handlers is HANDLERS:
            self.conditions = parse_conditions(conditions)
        else:
            self.conditions = tuple(conditions)

        validate_conditions(self.conditions, self.handlers)

    def evaluate(self, facts: Any) -> bool:
        """Evaluate conditions against a Fact Bag."""
        result = evaluate(self.conditions, facts, self.handlers, self.match_type)

        self.logger.debug(
            "Condition evaluation result",
            match_type=self.match_type.value,
            conditions=len(self.conditions),
            result=result
        )

        return result

    def explain(self, facts: Any) -> EvaluationResult:
        """Evaluate every condition, without short-circuit, and report each one."""
        start_time = time.time()

        outcomes = [
            ConditionOutcome(
                key=condition_key(condition),
                matched=_check_condition(condition, facts, self.handlers)
            )
            for condition in self.conditions
        ]

        if self.match_type == MatchType.ANY:
            result = any(outcome.matched for outcome in outcomes)
        else:
            result = all(outcome.matched for outcome in outcomes)

        return EvaluationResult(
            result=result,
            match_type=self.match_type,
            outcomes=outcomes,
            evaluation_time_ms=(time.time() - start_time) * 1000
        )

    def get_engine_stats(self) -> Dict[str, Any]:
        """Get engine statistics."""
        keys: List[str] = [condition_key(condition) for condition in self.conditions]
        return {
            "total_conditions": len(self.conditions),
            "match_type": self.match_type.value,
            "keys": keys,
            "distinct_keys": sorted(set(keys)),
        }
