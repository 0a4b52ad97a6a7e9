from potstranslate.cli import main

raise SystemExit(main())
