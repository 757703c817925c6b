from .commands import main, run_cli, setup_logging

__all__ = ["run_cli", "main", "setup_logging"]
