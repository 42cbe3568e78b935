"""Users document store: models, store clients and resource handlers."""
