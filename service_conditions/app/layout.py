"""
Branch selection for condition layouts.

A layout holds two pieces of content, ``then`` and ``else_``, plus optional
``children`` rendered in place of ``then`` when it is not set. Content is
opaque here: it is whatever the renderer passed in.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from shared.logging import get_logger
from .context.facts import FactBagMemo, RawContext
from .rules.engine import ConditionEngine
from .rules.handlers import HANDLERS, Handler
from .rules.models import MatchType, EvaluationResult

logger = get_logger("conditions.layout")

THEN = "then"
ELSE = "else"


@dataclass(frozen=True)
class LayoutDecision:
    """Branch picked by a layout; ``branch`` is None when nothing renders."""
    branch: Optional[str] = None
    content: Any = None
    result: Optional[bool] = None

    @property
    def renders(self) -> bool:
        return self.branch is not None


def select_branch(
    result: Optional[bool],
    then: Any = None,
    else_: Any = None,
    children: Any = None,
) -> LayoutDecision:
    """Pick the content to render for an evaluation result.

    ``None`` means no decision yet and renders nothing.
    """
    if result is None:
        return LayoutDecision()

    if result:
        content = then if then is not None else children
        if content is None:
            return LayoutDecision(result=True)
        return LayoutDecision(THEN, content, True)

    if else_ is not None:
        return LayoutDecision(ELSE, else_, False)

    return LayoutDecision(result=False)


class ConditionLayout:
    """Conditions plus branches, evaluated against any kind of values."""

    def __init__(
        self,
        conditions: Sequence[Any],
        match_type: Union[MatchType, str] = MatchType.ALL,
        handlers: Mapping[str, Handler] = HANDLERS,
        then: Any = None,
        else_: Any = None,
        children: Any = None,
    ):
        self.engine = ConditionEngine(conditions, match_type, handlers)
        self.then = then
        self.else_ = else_
        self.children = children

    @property
    def match_type(self) -> MatchType:
        return self.engine.match_type

    def decide(self, values: Any) -> LayoutDecision:
        """Select a branch, or nothing when ``values`` is None."""
        result = None if values is None else self.engine.evaluate(values)
        return select_branch(result, self.then, self.else_, self.children)

    def explain(self, values: Any) -> Optional[EvaluationResult]:
        if values is None:
            return None
        return self.engine.explain(values)


class ConditionLayoutProduct(ConditionLayout):
    """Condition layout bound to the product context.

    Keeps the Fact Bag memoized across renders and renders nothing until
    the product and its selected item are known.
    """

    def __init__(
        self,
        conditions: Sequence[Any],
        match_type: Union[MatchType, str] = MatchType.ALL,
        then: Any = None,
        else_: Any = None,
        children: Any = None,
    ):
        super().__init__(conditions, match_type, HANDLERS, then, else_, children)
        self.facts = FactBagMemo()
        self._last_facts = None
        self._last_decision = LayoutDecision()

    def render(self, context: RawContext) -> LayoutDecision:
        facts = self.facts.get(context)

        if facts is None:
            logger.debug("Product context not ready, rendering nothing")
            return LayoutDecision()

        # Same Fact Bag object, same decision
        if facts is not self._last_facts:
            self._last_decision = self.decide(facts)
            self._last_facts = facts

        return self._last_decision
