"""
plancast.cli.commands

One module per subcommand, each exposing register(sub).
"""
__all__ = [
    "budget_cmd",
    "forecast_cmd",
    "reconcile_cmd",
    "scenario_cmd",
]
