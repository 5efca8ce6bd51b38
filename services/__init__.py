"""Domain services: authentication, refresh token ledger, tasks and profile."""
