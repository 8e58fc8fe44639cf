"""
File ingestion for the CLI: reads snapshot, ledger and history JSON exported
from the simulation backend into validated models.

Modules
-------
loader : load_state() + load_ledger() + load_history() + read_json_payload().
"""
