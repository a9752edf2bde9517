"""Mini README: Interactive interfaces for ChoreBoard.

Exports the FastAPI application factory that serves the household ledger to
a browser front end. The command line entry point lives in
``main_choreboard.py`` at the repository root.
"""

from .web_app import create_application

__all__ = ["create_application"]
