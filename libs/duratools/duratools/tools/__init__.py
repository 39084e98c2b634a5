"""Single-purpose command-line tools."""
