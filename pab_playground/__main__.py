"""Allow ``python -m pab_playground``."""
from .cli import main

main()
