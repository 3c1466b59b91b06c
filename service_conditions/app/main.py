"""
Conditions service for the Condition Layout.
"""

import time

from fastapi import Query

from shared.base_service import BaseService

from .context.facts import normalize_product_context
from .layout import ConditionLayout
from .rules.handlers import HANDLERS, list_handler_keys
from .rules.models import (
    MatchType, parse_conditions,
    EvaluateRequest, EvaluateResponse, ValidateRequest, ValidateResponse
)


class ConditionsService(BaseService):
    """Conditions service implementation."""

    def __init__(self):
        super().__init__("conditions", 8013)

        self.default_match_type = MatchType(self.config.default_match_type)

        self._setup_conditions_routes()

    def _setup_conditions_routes(self):
        """Set up condition-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "conditions",
                "message": "Condition Layout - Conditions Service",
                "version": "1.0.0",
                "capabilities": ["evaluate", "validate", "explain"]
            }

        @self.app.get("/conditions/handlers")
        async def get_handlers():
            """List supported condition keys."""
            return {
                "handlers": list_handler_keys(),
                "match_types": [match_type.value for match_type in MatchType],
                "default_match_type": self.default_match_type.value
            }

        @self.app.post("/conditions/validate", response_model=ValidateResponse)
        async def validate_conditions(request: ValidateRequest):
            """Validate conditions against the handler registry."""
            conditions = parse_conditions(request.conditions)

            return ValidateResponse(
                valid=True,
                conditions=[
                    condition.model_dump(mode="json", exclude_none=True)
                    for condition in conditions
                ]
            )

        @self.app.post("/conditions/evaluate", response_model=EvaluateResponse)
        async def evaluate_conditions(
            request: EvaluateRequest,
            explain: bool = Query(False, description="Include per-condition outcomes")
        ):
            """Decide which branch renders for a product context."""
            match_type = request.match_type or self.default_match_type

            layout = ConditionLayout(
                parse_conditions(request.conditions),
                match_type,
                HANDLERS,
                then=request.then,
                else_=request.else_,
                children=request.children
            )

            facts = normalize_product_context(request.context)
            if facts is None:
                self.metrics.record_not_ready()
                self.logger.info("Product context not ready", match_type=match_type.value)
                return EvaluateResponse(ready=False, match_type=match_type)

            start_time = time.time()
            decision = layout.decide(facts)
            duration = time.time() - start_time

            if self.config.enable_metrics:
                self.metrics.record_evaluation(match_type.value, decision.result, duration)

            self.logger.info(
                "Conditions evaluated",
                product_id=facts.product_id,
                selected_item_id=facts.selected_item_id,
                match_type=match_type.value,
                conditions=len(layout.engine.conditions),
                result=decision.result,
                branch=decision.branch,
                evaluation_time_ms=round(duration * 1000, 3)
            )

            explanation = layout.explain(facts).to_dict() if explain else None

            return EvaluateResponse(
                ready=True,
                result=decision.result,
                branch=decision.branch,
                content=decision.content,
                match_type=match_type,
                explanation=explanation
            )


def create_app():
    """Create conditions service application."""
    service = ConditionsService()
    return service.app


if __name__ == "__main__":
    service = ConditionsService()
    service.run()
