import sys

from phongtracer.cli import main

sys.exit(main())
