"""Allow ``python -m vinylmatch``."""

from vinylmatch.cli import main

main()
