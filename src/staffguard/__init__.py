"""
StaffGuard - Discord Server Moderation Bot

StaffGuard gives a server's staff slash commands for manual moderation and
keeps enough in-memory history to undo the damage a compromised or rogue
staff account can cause.

Core Components:

- **Staff Directory**: Owner, head-staff and staff tiers from configured ids
  and per-guild staff roles
- **Moderation Commands**: Ban, kick, mute, unban and warn, each recorded in
  an append-only action log
- **Audit Logging**: Member joins, leaves and role changes routed to a
  security log channel; warnings and bans to their own channels
- **Channel Backups**: Snapshots of every channel, taken at startup and on
  deletion, used to recreate deleted channels with their permission overwrites
- **Rollback**: Reverses a staff member's bans and mutes, then restores
  deleted channels

All state lives in memory and is discarded when the process exits.

Usage:
    from staffguard.main import main
    main()
"""
