"""SDK version manager helpers: settings, downloads, layout, locks, envs and post-install steps."""

__version__ = "0.1.0"