"""
ResumeAI - multi-agent resume optimization.

Packages:
    agents: the built-in agents
    orchestrator: agent registry, workflow catalog, orchestrator, insights
    optimization: output collection, merge engine, per-profile locks
    api: FastAPI HTTP surface
    config: schemas, settings, prompts
    utils: capability adapter, logging, exceptions, normalization
"""

__version__ = "0.1.0"
