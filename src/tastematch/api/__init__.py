"""HTTP API for tastematch."""
