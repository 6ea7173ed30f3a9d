from word2html.cli import main

raise SystemExit(main())
