"""obsctl core: configuration, errors and protocol-level tools."""
