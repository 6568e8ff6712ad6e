"""Allow ``python -m thriftcheck``."""

from thriftcheck.main import main

raise SystemExit(main())
