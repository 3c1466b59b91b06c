"""
Rules engine package.

Defines the condition model, the fixed registry of product handlers and the
evaluation engine that folds per-condition results under a match type.

Modules of interest:
- models: Condition variants, argument payloads, match type and results.
- handlers: One pure predicate per condition key.
- engine: Validation and ALL/ANY evaluation with optional explanation.

Evaluation is in-memory and synchronous; there is no rule storage.
"""
