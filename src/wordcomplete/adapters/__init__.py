"""UI adapters hosting the plugin in-process."""
