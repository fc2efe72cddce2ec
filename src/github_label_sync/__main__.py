from github_label_sync.main import main

raise SystemExit(main())
