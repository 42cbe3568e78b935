"""HTTP interface for the users document collection."""
