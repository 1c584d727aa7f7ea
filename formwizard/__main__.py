"""Allow `python -m formwizard`."""

from .cli import main

main()
