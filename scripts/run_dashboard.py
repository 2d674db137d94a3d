#!/usr/bin/env python3
"""
Portal entrypoint - validates configuration and launches the terminal portal.
"""

import sys
from pathlib import Path

# Load environment variables from .env file first
import dotenv
dotenv.load_dotenv()

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


def main():
    """Launch the TUI portal."""
    from conference.tui.main import main as tui_main

    try:
        tui_main()
    except KeyboardInterrupt:
        print("\nℹ️  Portal interrupted")
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
