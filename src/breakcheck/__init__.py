"""breakcheck - flag breaking dependency upgrades in pull requests."""

__version__ = "0.1.0"
