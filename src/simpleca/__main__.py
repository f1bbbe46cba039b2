"""Allow ``python -m simpleca``."""

from simpleca.cli.main import main

main()
