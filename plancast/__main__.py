from plancast.cli.main import main

raise SystemExit(main())
