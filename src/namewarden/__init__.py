"""
Namewarden - Username Impersonation Filter for Discord

Namewarden watches members as they join a server or change their nickname and
auto-bans anyone whose display identity is a look-alike of a high-ranking
member's name.

Core Components:

- **Name Normalization**: Folds NFKC compatibility forms, strips emoji and
  whitespace, and maps Greek/Cyrillic/diacritic look-alikes to plain Latin
- **Protected Roles**: High-ranking roles configured per server (or fixed in
  the application config) whose holders form the impersonation reference set
- **Allowlist**: Per-server user and role exemptions, granted automatically
  when a banned member is reinstated
- **Enforcement**: Best-effort DM followed by a ban, tolerating partial failure
- **Configuration Workflow**: Reaction-driven approve/deny/edit prompt that
  admins use to add or remove protected roles

Usage:
    from namewarden.main import main
    main()  # Starts the bot
"""
