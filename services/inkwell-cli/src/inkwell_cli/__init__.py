"""inkwell-cli: Command-line interface over the inkwell sync surface."""
