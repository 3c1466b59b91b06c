"""
Product context package.

Raw storefront product context payloads and their normalization into the
immutable Fact Bag consumed by condition handlers.
"""
