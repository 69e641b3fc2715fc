"""Built-in CLI sub-commands (``request``, ``profile``)."""
