from __future__ import annotations

from funcplot_ui.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
