"""HTTP service for browsing the household inventory."""
