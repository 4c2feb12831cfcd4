"""Allow ``python -m prtw``."""

from prtw.pipeline import main

main()
