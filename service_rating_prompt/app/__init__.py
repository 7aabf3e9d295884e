"""
Rating prompt service package.

This package decides when an app should ask the user for a store rating.
It provides:

- app.main: Wiring of the policy with its store and collaborators.
- app.policy: Decision engine and persisted-state model.
- app.store: Key-value persistence (in-memory and Redis).
- app.collaborators: Clock, launch counter, crash reporter, review UI seams.

Guidelines:
- The policy holds no globals; every collaborator is injected.
- Keep evaluation deterministic and observable through logs.
"""
