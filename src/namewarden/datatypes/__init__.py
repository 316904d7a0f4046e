"""Plain data types shared across the spam filter, the store and the cogs."""
