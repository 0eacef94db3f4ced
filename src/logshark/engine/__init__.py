"""Execution engine: orchestrator state machine, progress reporting and clocks.

Import from the submodules directly:
    from logshark.engine.orchestrator import PluginOrchestrator
    from logshark.engine.progress import PersisterStatusWriter
"""
