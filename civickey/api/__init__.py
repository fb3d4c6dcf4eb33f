"""HTTP API: versioned JSON API and public website routes."""
