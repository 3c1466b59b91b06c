"""
Condition Layout service package.

This package decides whether a branch of storefront content should render
for the product currently on display. It provides:

- app.main: API surface for condition evaluation, validation and health.
- app.rules: Condition models, the handler registry and the evaluation engine.
- app.context: Product context payloads and Fact Bag normalization.
- app.layout: Branch selection on top of an evaluation result.

Guidelines:
- The service is stateless; every decision is computed from the request.
- Handlers are pure and must never raise on well-formed facts.
- Unknown condition keys are configuration errors, never a silent false.
"""
