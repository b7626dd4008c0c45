import sys

from exprlib.repl import main

sys.exit(main())
