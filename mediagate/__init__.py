"""mediagate - media upload gateway, authenticated API client and avatar upload flow."""
