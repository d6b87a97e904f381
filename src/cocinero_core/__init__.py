"""Cocinero core - declarative host provisioning.

Recipes are parsed, expanded into a plan of concrete actions, and run in
order; packages and systemd units are handled by post-provision hooks.
"""

from cocinero_core.application import Provisioner
from cocinero_core.engine import build_plan, run_plan

__version__ = "0.3.0"
__all__ = ["__version__", "Provisioner", "build_plan", "run_plan"]
