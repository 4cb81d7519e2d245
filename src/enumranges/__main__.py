from enumranges.cli import main

raise SystemExit(main())
