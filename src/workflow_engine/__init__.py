"""Workflow Engine.

Clients define finite-state workflows (states + guarded actions) and run
instances of them:
- definitions are validated for structural soundness before they are stored
- instances move between states only through legal actions
- every executed action is recorded in the instance history
"""

__version__ = "0.1.0"

from workflow_engine.engine.config import EngineSettings

__all__ = ["__version__", "EngineSettings"]
