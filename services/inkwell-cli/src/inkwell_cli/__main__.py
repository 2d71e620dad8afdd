"""Allow ``python -m inkwell_cli``."""

from inkwell_cli.main import main

main()
