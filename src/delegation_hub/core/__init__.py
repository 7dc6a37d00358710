"""
Run orchestration core.

Components:
- models.py: data structures (RunStats, DelegationItem, HistoryEntry, ProcessingPhase)
- classifier.py: total classification of a raw agent response
- state.py: RunState, its transitions and read-only snapshots
- controller.py: run lifecycle, simulated phases, timeout, teardown
- history.py: newest-first ledger of completed runs
- retry.py: single-notification retry
"""
