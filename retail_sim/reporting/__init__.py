"""
Reporting layer: human-readable text and file exports for CLI commands.

Modules
-------
formatters : format_forecast() + format_season_forecast() +
             format_week_summary() — plain ASCII for typer.echo().
export     : export_to_csv() + export_to_json() + export_summary_json() +
             flatten_summary_for_export() — file output.
"""
