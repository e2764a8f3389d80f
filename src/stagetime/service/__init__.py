"""HTTP service for inspecting and changing reporter configuration."""
