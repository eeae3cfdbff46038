from geonames.cli import main

raise SystemExit(main())
