"""Access log session reconstruction and analytics service."""
