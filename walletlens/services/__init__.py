"""Chain helpers and the holdings gateway."""
