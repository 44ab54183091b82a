r"""
Run the Learning Journey terminal interface.

Run: python scripts/run_cli.py
"""

import sys
from pathlib import Path

_root = Path(__file__).resolve().parent.parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

if __name__ == "__main__":
    from journey.interfaces.cli_chat import main

    main()
