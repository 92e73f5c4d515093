from srgjson.cli import main

raise SystemExit(main())
