from connectcheck_oled.app import main

raise SystemExit(main())
