"""Building blocks for a dotfile manager: quoting, git status, prompts, secrets and upgrades."""

__version__ = "0.1.0"