"""Infrastructure for workpool: configuration and logging setup."""
