"""Interactive terminal UI for browsing dependency trees."""
