"""Run the ledger API with ``python -m axis_ledger``."""

from .api import run_server


if __name__ == "__main__":
    run_server()
