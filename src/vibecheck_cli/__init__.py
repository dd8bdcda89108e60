"""
vibecheck CLI - submit eval suites and track their results.

This package provides the client side of the vibecheck scoring service:
suite submission, live result streaming, run listing, and CSV export.

Main entry points:
    - vibecheck_cli.main: CLI entrypoint
    - vibecheck_cli.core.runner: command orchestration
    - vibecheck_cli.models.config: Config and load_env()
"""
