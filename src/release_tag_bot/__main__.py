"""Allow ``python -m release_tag_bot``."""

from __future__ import annotations

from release_tag_bot.cli.main import main

if __name__ == "__main__":
    main()
