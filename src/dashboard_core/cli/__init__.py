"""Diagnostics CLI for dashboard core (`dashboard-core`)."""
