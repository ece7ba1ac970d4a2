"""
DTS human effects - disaggregated human-effects records for disaster tracking.

- dts.core: errors, results, logging, settings, ORM
- dts.human_effects: definitions, validation, splitting, repositories
- dts.ops: transaction-scoped operations used by the CLI and web handlers
"""

__version__ = "0.1.0"
