"""Discord-facing layer: cogs that bind events and slash commands to the filter."""
