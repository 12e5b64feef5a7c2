"""Domain layer: model, ports and exceptions."""
