"""Allow ``python -m keyfmt``."""

from keyfmt.cli.main import main

raise SystemExit(main())
