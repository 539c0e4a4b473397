"""HTTP API for human vs AI games."""
