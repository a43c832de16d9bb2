"""
Moderation decision pipeline.

- **applicability.py**: Is this channel/author in scope for the guild?
- **model_resolver.py**: Resolve ``auto`` to a concrete model under a credit budget.
- **credit_ledger.py**: Cost of a call and whether the balance covers it.
- **action_resolver.py**: Classifier output + guild config -> decision.
- **moderation_parsing.py**: Validate raw classifier JSON.
- **moderation_engine.py**: Wires the above for one event.
"""
