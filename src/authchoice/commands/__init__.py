"""Built-in CLI commands for authchoice."""
