"""Application services (RBAC, routing, sessions, client-side cache/search/reminders)."""
