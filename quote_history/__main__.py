from quote_history.infrastructure.entrypoints.cli import entrypoint

entrypoint()
