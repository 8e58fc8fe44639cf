"""
Weekly reconciliation engine: derives an auditable ``WeeklySummary`` from
two consecutive game-state snapshots and the ledger rows of the transition.

Modules
-------
engine      : compute_week_summary() — the single canonical entry point.
cash        : sum_by_entry_type() + build_cash_waterfall().
inventory   : raw_material_deltas() + finished_goods_added().
procurement : build_arrivals() + build_settlements() — contract matching
              with defect inference, or the reduced ledger-only mode.
production  : production_started() + production_completed().
marketing   : build_marketing_section().
series      : build_demand_series().
consistency : validate_ledger_rows() + build_diagnostics().
errors      : ReconciliationError hierarchy.

Snapshot diffing is authoritative for *what changed*; ledger rows are
authoritative for *why, in currency terms*. Pure functions, no I/O.
"""
