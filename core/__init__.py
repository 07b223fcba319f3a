"""Timer state machine, registry, commands and the live tail loop."""
