"""
Rating prompt policy package.

Defines the persisted-state model and the decision engine that gates the
in-app store rating request on crash history, elapsed days since the last
request and an escalating launch-count threshold.

Modules of interest:
- models: Present/Absent values, decision reasons and snapshots.
- engine: RatingPromptPolicy and its request flow.
"""
