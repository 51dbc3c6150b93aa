"""Core building blocks: transport, authentication, navigation and transfers."""
