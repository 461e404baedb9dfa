from fibfind.cli import main

raise SystemExit(main())
