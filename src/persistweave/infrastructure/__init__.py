"""Infrastructure layer: classpath access, class file parsing, descriptor IO, weaver."""
